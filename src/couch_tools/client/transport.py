"""Transport protocol and request/response descriptors.

This module defines the values that cross the transport boundary and the
interface every transport implements. CouchAPI and the operation functions
only ever talk to a CouchTransport, so tests can inject a mock in place of
the HTTP transport.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, runtime_checkable

Method = Literal["get", "put", "post", "delete"]
BodyAs = Literal["text", "bytes", "json"]


@dataclass(frozen=True)
class CouchRequest:
    """Description of a single HTTP exchange."""
    url: str
    method: Method = "get"
    params: Mapping[str, Any] | None = None
    body: Any = None
    content_type: str | None = None
    accept: str | None = None
    accept_encoding: str | None = None
    basic_auth: tuple[str, str] | None = None
    as_: BodyAs = "text"


@dataclass
class CouchResponse:
    """Result of a single HTTP exchange.

    `headers` must be case-insensitive (httpx.Headers). `json` is filled in
    by the response classifier whenever the body parses, whatever the status.
    """
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str | bytes | None = None
    json: Any = None

    @property
    def text(self) -> str:
        """Body as a string, decoding bytes as UTF-8."""
        if self.body is None:
            return ""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8", errors="replace")
        return self.body


@runtime_checkable
class CouchTransport(Protocol):
    """Protocol defining the transport interface.

    Transports are responsible for:
    - Performing exactly one HTTP exchange per request() call
    - Encoding outbound bodies and decoding inbound ones per the `as_` hint
    - Returning error statuses as normal responses (never raising on status)

    Connection-level failures propagate to the caller unchanged.
    """

    def request(self, request: CouchRequest) -> CouchResponse:
        """Execute one request.

        Args:
            request: The request description

        Returns:
            The response, including 4xx and 5xx responses
        """
        ...

    def close(self) -> None:
        """Clean up resources (connection pools, clients, etc.).

        Should be called when the transport is no longer needed.
        Safe to call multiple times.
        """
        ...
