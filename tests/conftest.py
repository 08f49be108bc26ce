"""Pytest configuration and fixtures."""

import json
from unittest.mock import MagicMock

import httpx
import pytest

from couch_tools.client.config import CouchConfig
from couch_tools.client.transport import CouchResponse

SERVER = "http://localhost:5984"


def make_response(body=None, status_code: int = 200, headers: dict | None = None) -> CouchResponse:
    """Helper to create a transport response with a JSON (or raw) body."""
    if body is None or isinstance(body, (str, bytes)):
        raw = body
    else:
        raw = json.dumps(body)
    return CouchResponse(
        status_code=status_code,
        headers=httpx.Headers(headers or {"Content-Type": "application/json"}),
        body=raw,
    )


@pytest.fixture
def config():
    """Create a test config."""
    return CouchConfig(
        server_url=SERVER,
        timeout=30.0,
    )


@pytest.fixture
def mock_transport():
    """Create a mock transport; queue responses with transport.respond(...)."""
    transport = MagicMock()
    transport.request.return_value = make_response({"ok": True})

    def respond(*responses):
        transport.request.side_effect = list(responses)

    transport.respond = respond
    return transport


def sent(transport, index: int = -1):
    """Return the CouchRequest passed on the given call to transport.request."""
    return transport.request.call_args_list[index].args[0]


@pytest.fixture(name="make_response")
def make_response_fixture():
    """Expose make_response to tests."""
    return make_response


@pytest.fixture(name="sent")
def sent_fixture():
    """Expose sent to tests."""
    return sent


@pytest.fixture
def server():
    return SERVER
