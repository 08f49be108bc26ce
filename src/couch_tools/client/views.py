"""View operations.

Views live in design documents (`_design/<name>`) under the `views` key,
each as {"map": "...", "reduce": "..."} function source strings.
"""

from collections.abc import Mapping
from typing import Any

from .documents import document_create, document_get, document_update
from .encoding import make_couchdb_params, normalize_url, url_encode, validate_dbname
from .exceptions import DocumentNotFoundError
from .request import couch_request, transport_scope
from .transport import CouchRequest, CouchTransport


def design_doc_id(design_doc: str) -> str:
    return f"_design/{design_doc}"


def view_list(
    server: str,
    database: str,
    design_doc: str,
    *,
    transport: CouchTransport | None = None,
) -> dict[str, Any]:
    """Get the views of a design document, including their definitions."""
    doc = document_get(server, database, design_doc_id(design_doc), transport=transport)
    return doc.get("views", {})


def view_add(
    server: str,
    database: str,
    design_doc: str,
    view_name: str,
    kind: str,
    js: str,
    *,
    transport: CouchTransport | None = None,
) -> dict[str, Any]:
    """Add a JavaScript function to a view in a design document.

    kind is "map" or "reduce". Overwrites any previous function of the same
    view and kind, keeping the rest of the view. Creates the design document
    when it does not exist. This is a plain read-modify-write: a concurrent
    writer makes it fail with ResourceConflictError.

    Returns:
        The design document as written
    """
    doc_id = design_doc_id(design_doc)
    with transport_scope(transport) as t:
        try:
            doc = document_get(server, database, doc_id, transport=t)
        except DocumentNotFoundError:
            return document_create(
                server,
                database,
                {"language": "javascript", "views": {view_name: {kind: js}}},
                doc_id,
                transport=t,
            )
        views = dict(doc.get("views", {}))
        views[view_name] = {**views.get(view_name, {}), kind: js}
        return document_update(server, database, doc, {**doc, "views": views}, transport=t)


def view_create(
    server: str,
    database: str,
    design_name: str,
    view_name: str,
    view_map: Mapping[str, str],
    *,
    transport: CouchTransport | None = None,
) -> dict[str, Any]:
    """Create or replace a map/reduce view in an existing design document.

    view_map has a "map" key and optionally a "reduce" key, holding function
    source in the design document's language.

    Raises:
        DocumentNotFoundError: If the design document does not exist
    """
    doc_id = design_doc_id(design_name)
    with transport_scope(transport) as t:
        doc = document_get(server, database, doc_id, transport=t)
        views = {**doc.get("views", {}), view_name: dict(view_map)}
        return document_update(server, database, doc, {**doc, "views": views}, transport=t)


def view_get(
    server: str,
    database: str,
    design_doc: str,
    view_name: str,
    options: Mapping[str, Any] | None = None,
    *,
    transport: CouchTransport | None = None,
) -> dict[str, Any]:
    """Query a view.

    Args:
        options: Query options; key, startkey and endkey are sent as JSON

    Returns:
        The view result (total_rows, offset, rows)
    """
    database = validate_dbname(database)
    response = couch_request(
        CouchRequest(
            url=(
                f"{normalize_url(server)}{database}/_design/{url_encode(design_doc)}"
                f"/_view/{url_encode(view_name)}"
            ),
            params=make_couchdb_params(options),
        ),
        transport,
    )
    return response.json


def view_temp_get(
    server: str,
    database: str,
    view_map: Mapping[str, str],
    options: Mapping[str, Any] | None = None,
    *,
    transport: CouchTransport | None = None,
) -> dict[str, Any]:
    """Run a temporary view (POST _temp_view). Only supported by CouchDB 1.x."""
    database = validate_dbname(database)
    response = couch_request(
        CouchRequest(
            url=f"{normalize_url(server)}{database}/_temp_view",
            method="post",
            params=make_couchdb_params(options),
            content_type="json",
            body=dict(view_map),
        ),
        transport,
    )
    return response.json
