"""Attachment operations."""

from typing import Any

from .documents import DocRef, doc_url, doc_id_of, doc_rev_of, document_get
from .encoding import url_encode
from .request import couch_request, transport_scope
from .transport import CouchRequest, CouchTransport


def attachment_list(
    server: str,
    database: str,
    document: DocRef,
    *,
    transport: CouchTransport | None = None,
) -> dict[str, Any]:
    """Return the `_attachments` stubs of a document, keyed by attachment name."""
    doc = document_get(server, database, doc_id_of(document), transport=transport)
    return dict(doc.get("_attachments", {}))


def attachment_create(
    server: str,
    database: str,
    document: DocRef,
    attachment_id: str,
    payload: bytes | str,
    content_type: str,
    *,
    transport: CouchTransport | None = None,
) -> str:
    """Add or replace an attachment on a document.

    The document revision is taken from the reference or read first.

    Returns:
        The attachment id
    """
    doc_id = doc_id_of(document)
    with transport_scope(transport) as t:
        rev = doc_rev_of(server, database, document, transport=t)
        couch_request(
            CouchRequest(
                url=f"{doc_url(server, database, doc_id)}/{url_encode(attachment_id)}",
                method="put",
                params={"rev": rev},
                content_type=content_type,
                body=payload,
            ),
            t,
        )
    return attachment_id


def attachment_get(
    server: str,
    database: str,
    document: DocRef,
    attachment_id: str,
    *,
    transport: CouchTransport | None = None,
) -> dict[str, Any]:
    """Fetch an attachment.

    Returns:
        {"body": ..., "content_type": ...}; body is a str for text/plain
        attachments and bytes otherwise
    """
    doc_id = doc_id_of(document)
    response = couch_request(
        CouchRequest(
            url=f"{doc_url(server, database, doc_id)}/{url_encode(attachment_id)}",
            as_="bytes",
        ),
        transport,
    )
    content_type = response.headers.get("content-type", "").lower()
    body = response.body
    if "text/plain" in content_type:
        body = response.text
    return {"body": body, "content_type": content_type}


def attachment_delete(
    server: str,
    database: str,
    document: DocRef,
    attachment_id: str,
    *,
    transport: CouchTransport | None = None,
) -> bool:
    doc_id = doc_id_of(document)
    with transport_scope(transport) as t:
        rev = doc_rev_of(server, database, document, transport=t)
        couch_request(
            CouchRequest(
                url=f"{doc_url(server, database, doc_id)}/{url_encode(attachment_id)}",
                method="delete",
                params={"rev": rev},
            ),
            t,
        )
    return True
