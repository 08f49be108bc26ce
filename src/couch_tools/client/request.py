"""Request pipeline shared by every operation.

couch_request() is the one place where responses are decoded and error
statuses are turned into CouchError subclasses.
"""

import json
from collections.abc import Iterator
from contextlib import contextmanager

from .config import CouchConfig
from .exceptions import raise_for_status
from .transport import CouchRequest, CouchResponse, CouchTransport


@contextmanager
def transport_scope(transport: CouchTransport | None = None) -> Iterator[CouchTransport]:
    """Yield the given transport, or a short-lived HTTP transport from the environment.

    A transport passed in is left open; one created here is closed on exit.
    """
    if transport is not None:
        yield transport
        return

    from .http import HTTPTransport

    with HTTPTransport(CouchConfig()) as owned:
        yield owned


def decode_json(response: CouchResponse) -> CouchResponse:
    """Attach the decoded JSON body, if the body parses.

    A body that is not JSON is not an error: shows and attachments return
    arbitrary content.
    """
    try:
        response.json = json.loads(response.text)
    except (ValueError, RecursionError):
        response.json = None
    return response


def couch_request(
    request: CouchRequest,
    transport: CouchTransport | None = None,
) -> CouchResponse:
    """Send a request and classify the response.

    Args:
        request: The request description
        transport: Transport to use; a temporary HTTP transport if None

    Returns:
        The response, with `json` set when the body is JSON

    Raises:
        CouchError: The subclass matching the status (and reason) for
            any response with status >= 400
        httpx.TransportError: On connection failures, unchanged
    """
    with transport_scope(transport) as t:
        response = t.request(request)
    # Successful binary bodies are never JSON
    if request.as_ != "bytes" or response.status_code >= 400:
        decode_json(response)
    payload = response.json if response.json is not None else response.text
    raise_for_status(response.status_code, payload)
    return response
