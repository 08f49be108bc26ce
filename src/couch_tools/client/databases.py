"""Database operations."""

from typing import Any

from .encoding import normalize_url, validate_dbname
from .request import couch_request
from .transport import CouchRequest, CouchTransport


def database_list(server: str, *, transport: CouchTransport | None = None) -> list[str]:
    """List all database names on the server."""
    response = couch_request(
        CouchRequest(url=f"{normalize_url(server)}_all_dbs"),
        transport,
    )
    return response.json


def database_create(server: str, database: str, *, transport: CouchTransport | None = None) -> str:
    """Create a database.

    Returns:
        The encoded database name
    """
    database = validate_dbname(database)
    couch_request(
        CouchRequest(url=f"{normalize_url(server)}{database}", method="put"),
        transport,
    )
    return database


def database_delete(server: str, database: str, *, transport: CouchTransport | None = None) -> bool:
    database = validate_dbname(database)
    couch_request(
        CouchRequest(url=f"{normalize_url(server)}{database}", method="delete"),
        transport,
    )
    return True


def database_info(
    server: str,
    database: str,
    *,
    transport: CouchTransport | None = None,
) -> dict[str, Any]:
    """Get database information (doc_count, update_seq, sizes, ...)."""
    database = validate_dbname(database)
    response = couch_request(
        CouchRequest(url=f"{normalize_url(server)}{database}"),
        transport,
    )
    return response.json


def database_compact(server: str, database: str, *, transport: CouchTransport | None = None) -> bool:
    """Start compaction of a database. Compaction runs in the background on the server."""
    database = validate_dbname(database)
    couch_request(
        CouchRequest(
            url=f"{normalize_url(server)}{database}/_compact",
            method="post",
            content_type="json",
        ),
        transport,
    )
    return True


def database_replicate(
    src_server: str,
    src_database: str,
    target_server: str,
    target_database: str,
    *,
    transport: CouchTransport | None = None,
    **options: Any,
) -> dict[str, Any]:
    """Replicate a database, triggered on the target server.

    Args:
        src_server: Server holding the source database
        src_database: Source database name
        target_server: Server that runs the replication and holds the target
        target_database: Target database name, local to target_server, or a
            full database URL
        transport: Optional transport
        **options: Extra replication fields, e.g. continuous=True,
            create_target=True

    Returns:
        The server's replication result
    """
    src_database = validate_dbname(src_database)
    if not target_database.startswith(("http://", "https://")):
        validate_dbname(target_database)
    body = {
        "source": f"{normalize_url(src_server)}{src_database}",
        "target": target_database,
        **options,
    }
    response = couch_request(
        CouchRequest(
            url=f"{normalize_url(target_server)}_replicate",
            method="post",
            content_type="json",
            body=body,
        ),
        transport,
    )
    return response.json
