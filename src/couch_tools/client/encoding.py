"""URL path and query parameter encoding."""

import json
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from .exceptions import InvalidDatabaseNameError

DBNAME_PATTERN = re.compile(r"^[a-z][a-z0-9_$()+-/]*$")

# Query parameters CouchDB expects as JSON values
JSON_PARAMS = ("key", "keys", "startkey", "endkey", "start_key", "end_key")

_RESERVED_PREFIXES = ("_design/", "_local/")


def url_encode(value: Any) -> str:
    """Percent-encode a value for use as a single URL path segment."""
    return quote(str(value), safe="")


def encode_doc_id(doc_id: Any) -> str:
    """Percent-encode a document id, keeping `_design/` and `_local/` literal."""
    doc_id = str(doc_id)
    for prefix in _RESERVED_PREFIXES:
        if doc_id.startswith(prefix):
            return prefix + url_encode(doc_id[len(prefix):])
    return url_encode(doc_id)


def valid_dbname(database: str) -> bool:
    return bool(DBNAME_PATTERN.match(database or ""))


def validate_dbname(database: str) -> str:
    """Check a database name and return it encoded for the URL path.

    Raises:
        InvalidDatabaseNameError: If the name does not match the grammar
    """
    if not valid_dbname(database):
        raise InvalidDatabaseNameError(database)
    return url_encode(database)


def normalize_url(url: str) -> str:
    """If not present, appends a / to the url."""
    return url if url.endswith("/") else url + "/"


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def make_couchdb_params(
    options: Mapping[str, Any] | None,
    *to_jsonify: str,
) -> dict[str, str]:
    """Build a query parameter dict, JSON-encoding the keys in `to_jsonify`.

    Args:
        options: Caller-supplied options; None values are dropped
        to_jsonify: Keys whose values are sent as JSON. Defaults to
            JSON_PARAMS (key, startkey, endkey and friends).

    Returns:
        A plain str -> str mapping ready for the query string
    """
    if not options:
        return {}
    to_jsonify = to_jsonify or JSON_PARAMS
    params = {}
    for name, value in options.items():
        if value is None:
            continue
        if name in to_jsonify:
            params[name] = json.dumps(value)
        else:
            params[name] = _param_value(value)
    return params
