"""HTTP transport for CouchDB.

This module implements the transport on top of httpx. It performs exactly
one exchange per call, follows redirects, and lets httpx negotiate and
decode gzip/deflate. It never raises on HTTP status and never retries;
classifying error statuses is left to the caller (see request.py).
"""

import json
import logging

import httpx

from .config import CouchConfig
from .transport import CouchRequest, CouchResponse

logger = logging.getLogger("couch-tools")

_CONTENT_TYPES = {
    "json": "application/json",
    "text": "text/plain",
}


def _encode_body(body) -> bytes | None:
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body).encode("utf-8")


def _build_headers(request: CouchRequest) -> dict[str, str]:
    headers = {}
    if request.content_type:
        headers["Content-Type"] = _CONTENT_TYPES.get(request.content_type, request.content_type)
    if request.accept:
        headers["Accept"] = _CONTENT_TYPES.get(request.accept, request.accept)
    if request.accept_encoding:
        headers["Accept-Encoding"] = request.accept_encoding
    return headers


class HTTPTransport:
    """HTTP transport for CouchDB.

    Implements CouchTransport on top of a lazily created httpx.Client.

    Usage:
        transport = HTTPTransport(config)
        response = transport.request(CouchRequest(url="http://localhost:5984/_all_dbs"))
        transport.close()

    Or as context manager:
        with HTTPTransport(config) as transport:
            response = transport.request(...)
    """

    def __init__(self, config: CouchConfig | None = None, client: httpx.Client | None = None):
        """Initialize HTTP transport.

        Args:
            config: CouchDB configuration. If None, loads from environment.
            client: Optional pre-built httpx client (for testing/advanced use).
        """
        self.config = config or CouchConfig()
        self._client = client

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.config.timeout,
                follow_redirects=self.config.follow_redirects,
                verify=self.config.verify_ssl,
            )
        return self._client

    def __enter__(self) -> "HTTPTransport":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close client."""
        self.close()

    def close(self) -> None:
        """Close HTTP client and release resources."""
        if self._client:
            self._client.close()
            self._client = None

    def request(self, request: CouchRequest) -> CouchResponse:
        """Execute a single request without raising on status.

        Args:
            request: The request description

        Returns:
            Response with the body decoded as the request's `as_` hint asks

        Raises:
            httpx.TransportError: On connection failures and timeouts
        """
        method = (request.method or "get").upper()
        auth = request.basic_auth or self.config.auth
        try:
            response = self.client.request(
                method,
                request.url,
                params=request.params,
                content=_encode_body(request.body),
                headers=_build_headers(request),
                auth=auth if auth else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.TransportError as e:
            logger.warning(f"{method} {request.url} failed: {e}")
            raise

        logger.debug(f"{method} {response.request.url} {response.status_code}")
        if response.status_code >= 400:
            logger.debug(f"  body: {response.text}")

        body: str | bytes = response.content if request.as_ == "bytes" else response.text
        return CouchResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=body,
        )
