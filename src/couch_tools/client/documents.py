"""Document operations.

A document reference is either an id string or a mapping carrying `_id`
(and `_rev`, where a revision is needed).
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from .encoding import encode_doc_id, make_couchdb_params, normalize_url, validate_dbname
from .exceptions import (
    ConflictResolutionIncompleteError,
    CouchError,
    ResourceConflictError,
    ServerError,
)
from .request import couch_request, transport_scope
from .transport import CouchRequest, CouchTransport

logger = logging.getLogger("couch-tools")

DocRef = str | Mapping[str, Any]


def doc_id_of(document: DocRef) -> str:
    """Return the id of a document reference."""
    if isinstance(document, Mapping):
        doc_id = document.get("_id")
        if not doc_id:
            raise ResourceConflictError("missing _id key")
        return doc_id
    if not document:
        raise ResourceConflictError("missing document id")
    return document


def doc_rev_of(
    server: str,
    database: str,
    document: DocRef,
    *,
    transport: CouchTransport | None = None,
) -> str:
    """Return the revision of a document reference.

    A mapping must carry `_rev`; for a bare id the current revision is read
    from the server.
    """
    if isinstance(document, Mapping):
        rev = document.get("_rev")
        if not rev:
            raise ResourceConflictError("missing _rev key")
        return rev
    return document_get(server, database, document, transport=transport)["_rev"]


def doc_url(server: str, database: str, doc_id: str) -> str:
    """URL of a document; validates the database name first."""
    return f"{normalize_url(server)}{validate_dbname(database)}/{encode_doc_id(doc_id)}"


def _document_touch(
    server: str,
    database: str,
    payload: Mapping[str, Any],
    doc_id: str | None,
    method: str,
    transport: CouchTransport | None,
) -> dict[str, Any]:
    if doc_id is not None:
        url = doc_url(server, database, doc_id)
    else:
        url = f"{normalize_url(server)}{validate_dbname(database)}"
    response = couch_request(
        CouchRequest(url=url, method=method, content_type="json", body=dict(payload)),
        transport,
    )
    return {**payload, "_id": response.json["id"], "_rev": response.json["rev"]}


def document_list(
    server: str,
    database: str,
    options: Mapping[str, Any] | None = None,
    *,
    transport: CouchTransport | None = None,
) -> list:
    """List documents in a database.

    Args:
        options: _all_docs query options (limit, startkey, include_docs, ...)

    Returns:
        Document ids, or the full documents when include_docs is set
    """
    database = validate_dbname(database)
    response = couch_request(
        CouchRequest(
            url=f"{normalize_url(server)}{database}/_all_docs",
            params=make_couchdb_params(options),
        ),
        transport,
    )
    field = "doc" if options and options.get("include_docs") else "id"
    return [row[field] for row in response.json["rows"]]


def document_create(
    server: str,
    database: str,
    payload: Mapping[str, Any],
    doc_id: str | None = None,
    *,
    transport: CouchTransport | None = None,
) -> dict[str, Any]:
    """Create a document, with a server-assigned id unless doc_id is given.

    Returns:
        The payload with `_id` and `_rev` set
    """
    if doc_id is None:
        return _document_touch(server, database, payload, None, "post", transport)
    return _document_touch(server, database, payload, doc_id_of(doc_id), "put", transport)


def document_update(
    server: str,
    database: str,
    document: DocRef,
    payload: Mapping[str, Any],
    *,
    transport: CouchTransport | None = None,
) -> dict[str, Any]:
    """Write a new revision of a document.

    If the payload has no `_rev`, the revision is taken from `document`
    (when it is a mapping) or read from the server first. A concurrent
    writer between that read and the write makes the server answer 409,
    raised as ResourceConflictError; there is no automatic retry.

    Returns:
        The payload with the new `_id` and `_rev`
    """
    doc_id = doc_id_of(document)
    with transport_scope(transport) as t:
        if not payload.get("_rev"):
            rev = doc_rev_of(server, database, document, transport=t)
            payload = {**payload, "_rev": rev}
        return _document_touch(server, database, payload, doc_id, "put", t)


def document_get(
    server: str,
    database: str,
    document: DocRef,
    rev: str | None = None,
    *,
    transport: CouchTransport | None = None,
) -> dict[str, Any]:
    """Get a document, optionally at a specific revision."""
    response = couch_request(
        CouchRequest(
            url=doc_url(server, database, doc_id_of(document)),
            params={"rev": rev} if rev else None,
        ),
        transport,
    )
    return response.json


def document_delete(
    server: str,
    database: str,
    document: DocRef,
    rev: str | None = None,
    *,
    transport: CouchTransport | None = None,
) -> bool:
    """Delete a document.

    Without an explicit rev, the revision comes from the reference or is
    read from the server.

    Returns:
        True once deleted, False if the reference is empty
    """
    if not document:
        return False
    doc_id = doc_id_of(document)
    with transport_scope(transport) as t:
        if rev is None:
            rev = doc_rev_of(server, database, document, transport=t)
        couch_request(
            CouchRequest(
                url=doc_url(server, database, doc_id),
                method="delete",
                params={"rev": rev},
            ),
            t,
        )
    return True


def document_bulk_update(
    server: str,
    database: str,
    documents: Sequence[Mapping[str, Any]],
    options: Mapping[str, Any] | None = None,
    *,
    transport: CouchTransport | None = None,
) -> list[dict[str, Any]]:
    """Create or update many documents in one _bulk_docs request.

    Args:
        documents: Documents to write; those with `_id`/`_rev` are updates
        options: Extra body fields such as all_or_nothing or new_edits

    Returns:
        One entry per input document, with `_id`/`_rev` from the response

    The response rows are paired with the input by position. CouchDB returns
    them in request order, but this is not checked: a row count that differs
    from the input raises ServerError, and an id that differs from the
    input's `_id` is only logged.
    """
    database = validate_dbname(database)
    body = {**(options or {}), "docs": [dict(doc) for doc in documents]}
    response = couch_request(
        CouchRequest(
            url=f"{normalize_url(server)}{database}/_bulk_docs",
            method="post",
            content_type="json",
            body=body,
        ),
        transport,
    )
    rows = response.json or []
    if len(rows) != len(documents):
        raise ServerError(
            f"_bulk_docs returned {len(rows)} rows for {len(documents)} documents",
            response.status_code,
        )

    results = []
    for row, doc in zip(rows, documents):
        if doc.get("_id") and doc["_id"] != row.get("id"):
            logger.warning(f"_bulk_docs row id {row.get('id')} does not match input id {doc['_id']}")
        if "error" in row:
            logger.warning(f"_bulk_docs failed for {row.get('id')}: {row['error']} ({row.get('reason')})")
        results.append({**doc, "_id": row.get("id"), "_rev": row.get("rev")})
    return results


def _rev_number(rev: str) -> int:
    return int(rev.split("-", 1)[0])


def document_revisions(
    server: str,
    database: str,
    document: DocRef,
    *,
    transport: CouchTransport | None = None,
) -> dict[str, str]:
    """Get the known revisions of a document.

    Returns:
        Mapping of revision -> status ("available", "missing", "deleted"),
        newest revision first
    """
    response = couch_request(
        CouchRequest(
            url=doc_url(server, database, doc_id_of(document)),
            params={"revs_info": "true"},
        ),
        transport,
    )
    revs_info = sorted(
        response.json.get("_revs_info", []),
        key=lambda info: _rev_number(info["rev"]),
        reverse=True,
    )
    return {info["rev"]: info["status"] for info in revs_info}


def document_get_conflicts(
    server: str,
    database: str,
    document: DocRef,
    *,
    transport: CouchTransport | None = None,
) -> list[str]:
    """Returns the list of revisions that conflict with the current one."""
    response = couch_request(
        CouchRequest(
            url=doc_url(server, database, doc_id_of(document)),
            params={"conflicts": "true"},
        ),
        transport,
    )
    return response.json.get("_conflicts", [])


def document_resolve_conflict(
    server: str,
    database: str,
    document: DocRef,
    conflict_rev: str,
    resolve_fn: Callable[[dict[str, Any], dict[str, Any]], Mapping[str, Any]],
    *,
    transport: CouchTransport | None = None,
) -> dict[str, Any]:
    """Resolve a conflicted document.

    Reads the conflicting revision and the current one, writes
    resolve_fn(conflicting, current) as a new revision, then deletes the
    conflicting revision.

    Args:
        document: Document reference
        conflict_rev: A revision from document_get_conflicts()
        resolve_fn: Takes the conflicting doc and the current doc, returns
            the merged doc

    Returns:
        The merged document as written, with its new `_rev`

    Raises:
        ConflictResolutionIncompleteError: If the merge was written but the
            conflicting revision could not be deleted
    """
    doc_id = doc_id_of(document)
    with transport_scope(transport) as t:
        conflicting = document_get(server, database, doc_id, conflict_rev, transport=t)
        current = document_get(server, database, doc_id, transport=t)
        merged = document_update(server, database, current, resolve_fn(conflicting, current), transport=t)
        try:
            document_delete(server, database, doc_id, conflict_rev, transport=t)
        except CouchError as e:
            raise ConflictResolutionIncompleteError(merged, conflict_rev, e) from e
    return merged
