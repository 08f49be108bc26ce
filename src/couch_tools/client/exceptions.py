"""Exceptions for CouchDB client and the status classifier."""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Discriminant carried by every CouchError."""

    INVALID_DATABASE_NAME = "invalid-database-name"
    DATABASE_NOT_FOUND = "database-not-found"
    DOCUMENT_NOT_FOUND = "document-not-found"
    ATTACHMENT_NOT_FOUND = "attachment-not-found"
    RESOURCE_CONFLICT = "resource-conflict"
    PRECONDITION_FAILED = "precondition-failed"
    SERVER_ERROR = "server-error"
    CONFLICT_RESOLUTION_INCOMPLETE = "conflict-resolution-incomplete"


class CouchError(Exception):
    """Base exception for all CouchDB errors.

    Attributes:
        kind: Which error this is (see ErrorKind)
        payload: Decoded JSON body of the server response, the raw body when
            it was not JSON, or the offending local value
        status_code: HTTP status, None for errors raised before any request
    """

    kind: ErrorKind = ErrorKind.SERVER_ERROR
    title = "CouchDB Error"

    def __init__(self, payload: Any = None, status_code: int | None = None):
        self.payload = payload
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def reason(self) -> str | None:
        """The server's `reason` field, when the payload has one."""
        if isinstance(self.payload, dict):
            return self.payload.get("reason")
        return None

    @property
    def message(self) -> str:
        return f"{self.title}: {self.payload}"

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"HTTP {self.status_code}: {self.message}"
        return self.message


class InvalidDatabaseNameError(CouchError):
    """Database name does not match the allowed grammar. No request was made."""
    kind = ErrorKind.INVALID_DATABASE_NAME
    title = "Invalid Database Name"


class CouchNotFoundError(CouchError):
    """Resource not found (404)."""
    kind = ErrorKind.DOCUMENT_NOT_FOUND
    title = "Not Found"


class DatabaseNotFoundError(CouchNotFoundError):
    kind = ErrorKind.DATABASE_NOT_FOUND
    title = "Database Not Found"


class DocumentNotFoundError(CouchNotFoundError):
    kind = ErrorKind.DOCUMENT_NOT_FOUND
    title = "Document Not Found"


class AttachmentNotFoundError(CouchNotFoundError):
    kind = ErrorKind.ATTACHMENT_NOT_FOUND
    title = "Attachment Not Found"


class ResourceConflictError(CouchError):
    """Raised when a 409 code is returned from the server."""
    kind = ErrorKind.RESOURCE_CONFLICT
    title = "Resource Conflict"


class PreconditionFailedError(CouchError):
    """Raised when a 412 code is returned from the server."""
    kind = ErrorKind.PRECONDITION_FAILED
    title = "Precondition Failed"


class ServerError(CouchError):
    """Raised when any unexpected code >= 400 is returned from the server."""
    kind = ErrorKind.SERVER_ERROR
    title = "Unhandled Server Error"


class ConflictResolutionIncompleteError(CouchError):
    """The merged document was written but the conflicting revision was not deleted.

    Attributes:
        document: The merged document as written, with its new `_rev`
        conflict_rev: The revision that is still in conflict
        cause: The error raised by the delete
    """

    kind = ErrorKind.CONFLICT_RESOLUTION_INCOMPLETE
    title = "Conflict Resolution Incomplete"

    def __init__(self, document: dict[str, Any], conflict_rev: str, cause: CouchError):
        self.document = document
        self.conflict_rev = conflict_rev
        self.cause = cause
        super().__init__(cause.payload, cause.status_code)

    @property
    def message(self) -> str:
        return (
            f"{self.title}: merged as {self.document.get('_rev')}, "
            f"revision {self.conflict_rev} not deleted ({self.cause.message})"
        )


ERROR_CLASSES: dict[ErrorKind, type[CouchError]] = {
    cls.kind: cls
    for cls in (
        InvalidDatabaseNameError,
        DatabaseNotFoundError,
        DocumentNotFoundError,
        AttachmentNotFoundError,
        ResourceConflictError,
        PreconditionFailedError,
        ServerError,
        ConflictResolutionIncompleteError,
    )
}

# CouchDB 1.x says "no_db_file", 2.x and later "Database does not exist."
# The second entry goes beyond the 1.x table; every other reason is a missing document.
_NOT_FOUND_REASONS = {
    "no_db_file": ErrorKind.DATABASE_NOT_FOUND,
    "Database does not exist.": ErrorKind.DATABASE_NOT_FOUND,
    "Document is missing attachment": ErrorKind.ATTACHMENT_NOT_FOUND,
}


def classify(status_code: int, payload: Any = None) -> ErrorKind | None:
    """Map a response status (and, for 404, its reason) to an error kind.

    Args:
        status_code: HTTP status code
        payload: Decoded JSON body, if any

    Returns:
        The ErrorKind to raise, or None for status codes below 400
    """
    if status_code < 400:
        return None
    if status_code == 404:
        reason = payload.get("reason") if isinstance(payload, dict) else None
        return _NOT_FOUND_REASONS.get(reason, ErrorKind.DOCUMENT_NOT_FOUND)
    if status_code == 409:
        return ErrorKind.RESOURCE_CONFLICT
    if status_code == 412:
        return ErrorKind.PRECONDITION_FAILED
    return ErrorKind.SERVER_ERROR


def raise_for_status(status_code: int, payload: Any = None) -> None:
    """Raise appropriate exception based on HTTP status code."""
    kind = classify(status_code, payload)
    if kind is not None:
        raise ERROR_CLASSES[kind](payload, status_code)
