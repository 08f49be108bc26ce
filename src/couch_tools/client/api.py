"""High-level API for CouchDB operations.

CouchAPI fixes the server URL and transport once, so the operation
functions can be called without repeating them.
"""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from . import attachments, databases, documents, shows, views
from .config import CouchConfig
from .documents import DocRef
from .http import HTTPTransport
from .transport import CouchTransport


class CouchAPI:
    """High-level API for CouchDB operations.

    Every method maps onto the function of the same name in the databases,
    documents, attachments, views and shows modules, with the server and
    transport filled in.

    Usage:
        # Auto-configure from environment
        with CouchAPI() as api:
            api.database_create("inventory")
            doc = api.document_create("inventory", {"sku": "A-1"})

        # Explicit server
        api = CouchAPI(server="http://couch.internal:5984")

        # Inject custom transport (for testing)
        api = CouchAPI(transport=mock_transport)
    """

    def __init__(
        self,
        config: CouchConfig | None = None,
        transport: CouchTransport | None = None,
        server: str | None = None,
    ):
        """Initialize API client.

        Args:
            config: Configuration (loads from environment if None)
            transport: Optional pre-configured transport (for testing/advanced use).
                If provided, config is still stored but not used to create transport.
            server: Server URL; defaults to config.server_url
        """
        self.config = config or CouchConfig()
        self.server = server or self.config.server_url
        self._client = transport or HTTPTransport(self.config)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False

    def close(self) -> None:
        """Close API client and release resources."""
        self._client.close()

    # Databases

    def database_list(self) -> list[str]:
        return databases.database_list(self.server, transport=self._client)

    def database_create(self, database: str) -> str:
        return databases.database_create(self.server, database, transport=self._client)

    def database_delete(self, database: str) -> bool:
        return databases.database_delete(self.server, database, transport=self._client)

    def database_info(self, database: str) -> dict[str, Any]:
        return databases.database_info(self.server, database, transport=self._client)

    def database_compact(self, database: str) -> bool:
        return databases.database_compact(self.server, database, transport=self._client)

    def database_replicate(
        self,
        src_database: str,
        target_server: str,
        target_database: str,
        src_server: str | None = None,
        **options: Any,
    ) -> dict[str, Any]:
        """Replicate src_database (on this server unless src_server is given) to a target."""
        return databases.database_replicate(
            src_server or self.server,
            src_database,
            target_server,
            target_database,
            transport=self._client,
            **options,
        )

    # Documents

    def document_list(self, database: str, options: Mapping[str, Any] | None = None) -> list:
        return documents.document_list(self.server, database, options, transport=self._client)

    def document_create(
        self,
        database: str,
        payload: Mapping[str, Any],
        doc_id: str | None = None,
    ) -> dict[str, Any]:
        return documents.document_create(self.server, database, payload, doc_id, transport=self._client)

    def document_update(self, database: str, document: DocRef, payload: Mapping[str, Any]) -> dict[str, Any]:
        return documents.document_update(self.server, database, document, payload, transport=self._client)

    def document_get(self, database: str, document: DocRef, rev: str | None = None) -> dict[str, Any]:
        return documents.document_get(self.server, database, document, rev, transport=self._client)

    def document_delete(self, database: str, document: DocRef, rev: str | None = None) -> bool:
        return documents.document_delete(self.server, database, document, rev, transport=self._client)

    def document_bulk_update(
        self,
        database: str,
        docs: Sequence[Mapping[str, Any]],
        options: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        return documents.document_bulk_update(self.server, database, docs, options, transport=self._client)

    def document_revisions(self, database: str, document: DocRef) -> dict[str, str]:
        return documents.document_revisions(self.server, database, document, transport=self._client)

    def document_get_conflicts(self, database: str, document: DocRef) -> list[str]:
        return documents.document_get_conflicts(self.server, database, document, transport=self._client)

    def document_resolve_conflict(
        self,
        database: str,
        document: DocRef,
        conflict_rev: str,
        resolve_fn: Callable[[dict[str, Any], dict[str, Any]], Mapping[str, Any]],
    ) -> dict[str, Any]:
        return documents.document_resolve_conflict(
            self.server, database, document, conflict_rev, resolve_fn, transport=self._client
        )

    # Attachments

    def attachment_list(self, database: str, document: DocRef) -> dict[str, Any]:
        return attachments.attachment_list(self.server, database, document, transport=self._client)

    def attachment_create(
        self,
        database: str,
        document: DocRef,
        attachment_id: str,
        payload: bytes | str,
        content_type: str,
    ) -> str:
        return attachments.attachment_create(
            self.server, database, document, attachment_id, payload, content_type, transport=self._client
        )

    def attachment_get(self, database: str, document: DocRef, attachment_id: str) -> dict[str, Any]:
        return attachments.attachment_get(self.server, database, document, attachment_id, transport=self._client)

    def attachment_delete(self, database: str, document: DocRef, attachment_id: str) -> bool:
        return attachments.attachment_delete(self.server, database, document, attachment_id, transport=self._client)

    # Views

    def view_list(self, database: str, design_doc: str) -> dict[str, Any]:
        return views.view_list(self.server, database, design_doc, transport=self._client)

    def view_add(
        self,
        database: str,
        design_doc: str,
        view_name: str,
        kind: str,
        js: str,
    ) -> dict[str, Any]:
        return views.view_add(self.server, database, design_doc, view_name, kind, js, transport=self._client)

    def view_create(
        self,
        database: str,
        design_name: str,
        view_name: str,
        view_map: Mapping[str, str],
    ) -> dict[str, Any]:
        return views.view_create(self.server, database, design_name, view_name, view_map, transport=self._client)

    def view_get(
        self,
        database: str,
        design_doc: str,
        view_name: str,
        options: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        return views.view_get(self.server, database, design_doc, view_name, options, transport=self._client)

    def view_temp_get(
        self,
        database: str,
        view_map: Mapping[str, str],
        options: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        return views.view_temp_get(self.server, database, view_map, options, transport=self._client)

    # Shows

    def show_get(
        self,
        database: str,
        design_doc: str,
        show_name: str,
        doc_id: str,
        options: Mapping[str, Any] | None = None,
    ) -> str:
        return shows.show_get(self.server, database, design_doc, show_name, doc_id, options, transport=self._client)
