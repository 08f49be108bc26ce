"""Couch Tools - Client library for the CouchDB HTTP API."""

from couch_tools.client import CouchAPI as CouchClient
from couch_tools.client.config import CouchConfig
from couch_tools.client.exceptions import (
    AttachmentNotFoundError,
    CouchError,
    DatabaseNotFoundError,
    DocumentNotFoundError,
    ErrorKind,
    InvalidDatabaseNameError,
    PreconditionFailedError,
    ResourceConflictError,
    ServerError,
)

try:
    from importlib.metadata import version
    __version__ = version("couch-tools")
except Exception:
    __version__ = "0.1.0"  # Fallback for development

__all__ = [
    "AttachmentNotFoundError",
    "CouchClient",
    "CouchConfig",
    "CouchError",
    "DatabaseNotFoundError",
    "DocumentNotFoundError",
    "ErrorKind",
    "InvalidDatabaseNameError",
    "PreconditionFailedError",
    "ResourceConflictError",
    "ServerError",
    "__version__",
]
