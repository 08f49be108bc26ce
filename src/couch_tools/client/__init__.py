"""CouchDB API client.

This package provides the client library for communicating with CouchDB.
Operations come in two forms:

Functions:
    One module per resource kind (databases, documents, attachments, views,
    shows). Each function takes the server URL as its first argument.

CouchAPI:
    A handle constructed once with a server URL and transport, exposing the
    same operations as methods.

Usage:
    from couch_tools.client import CouchAPI, documents

    # Handle
    with CouchAPI() as api:
        doc = api.document_create("inventory", {"sku": "A-1"})

    # Plain function, with a temporary transport
    documents.document_get("http://localhost:5984", "inventory", doc["_id"])
"""

from .api import CouchAPI
from .config import CouchConfig
from .exceptions import (
    AttachmentNotFoundError,
    ConflictResolutionIncompleteError,
    CouchError,
    CouchNotFoundError,
    DatabaseNotFoundError,
    DocumentNotFoundError,
    ErrorKind,
    InvalidDatabaseNameError,
    PreconditionFailedError,
    ResourceConflictError,
    ServerError,
)
from .http import HTTPTransport
from .request import couch_request
from .retry import retry_on_conflict
from .transport import CouchRequest, CouchResponse, CouchTransport

__all__ = [
    # Main API
    "CouchAPI",
    "CouchConfig",
    "couch_request",
    "retry_on_conflict",
    # Transport protocol and implementation
    "CouchRequest",
    "CouchResponse",
    "CouchTransport",
    "HTTPTransport",
    # Exceptions
    "AttachmentNotFoundError",
    "ConflictResolutionIncompleteError",
    "CouchError",
    "CouchNotFoundError",
    "DatabaseNotFoundError",
    "DocumentNotFoundError",
    "ErrorKind",
    "InvalidDatabaseNameError",
    "PreconditionFailedError",
    "ResourceConflictError",
    "ServerError",
]
