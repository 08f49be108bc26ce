"""Show operations."""

from collections.abc import Mapping
from typing import Any

from .encoding import encode_doc_id, make_couchdb_params, normalize_url, url_encode, validate_dbname
from .request import couch_request
from .transport import CouchRequest, CouchTransport


def show_get(
    server: str,
    database: str,
    design_doc: str,
    show_name: str,
    doc_id: str,
    options: Mapping[str, Any] | None = None,
    *,
    transport: CouchTransport | None = None,
) -> str:
    """Render a document through a show function.

    Returns:
        The show output as text, whatever its content type
    """
    database = validate_dbname(database)
    response = couch_request(
        CouchRequest(
            url=(
                f"{normalize_url(server)}{database}/_design/{url_encode(design_doc)}"
                f"/_show/{url_encode(show_name)}/{encode_doc_id(doc_id)}"
            ),
            params=make_couchdb_params(options),
        ),
        transport,
    )
    return response.text
