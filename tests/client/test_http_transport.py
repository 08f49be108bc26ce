"""Tests for the HTTP transport.

These tests use httpx.MockTransport, so they don't need a running CouchDB.
"""

import base64
import gzip
import json

import httpx
import pytest

from couch_tools.client.config import CouchConfig
from couch_tools.client.http import HTTPTransport
from couch_tools.client.transport import CouchRequest, CouchTransport


def make_transport(handler, config: CouchConfig | None = None) -> HTTPTransport:
    client = httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=True)
    return HTTPTransport(config or CouchConfig(), client=client)


class TestHTTPTransportInit:
    """Tests for HTTPTransport initialization."""

    def test_implements_protocol(self, config):
        assert isinstance(HTTPTransport(config), CouchTransport)

    def test_client_is_lazy(self, config):
        transport = HTTPTransport(config)
        assert transport._client is None
        client = transport.client
        assert client is transport.client
        transport.close()
        assert transport._client is None

    def test_close_is_idempotent(self, config):
        transport = HTTPTransport(config)
        transport.close()
        transport.close()

    def test_context_manager_closes(self, config):
        with HTTPTransport(config) as transport:
            transport.client
        assert transport._client is None


class TestHTTPTransportRequest:
    """Tests for single exchanges."""

    def test_defaults_to_get(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=["a", "b"])

        response = make_transport(handler).request(CouchRequest(url="http://couch/_all_dbs"))

        assert seen[0].method == "GET"
        assert response.status_code == 200
        assert json.loads(response.body) == ["a", "b"]

    def test_error_status_is_returned_not_raised(self):
        def handler(request):
            return httpx.Response(404, json={"error": "not_found", "reason": "missing"})

        response = make_transport(handler).request(CouchRequest(url="http://couch/db/doc"))

        assert response.status_code == 404
        assert "missing" in response.text

    def test_json_body_and_content_type(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201, json={"ok": True})

        make_transport(handler).request(
            CouchRequest(url="http://couch/db", method="post", content_type="json", body={"a": 1})
        )

        assert seen[0].method == "POST"
        assert seen[0].headers["content-type"] == "application/json"
        assert json.loads(seen[0].content) == {"a": 1}

    def test_raw_bytes_body(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201, json={"ok": True})

        make_transport(handler).request(
            CouchRequest(url="http://couch/db/doc/img.png", method="put", content_type="image/png", body=b"\x89PNG")
        )

        assert seen[0].content == b"\x89PNG"
        assert seen[0].headers["content-type"] == "image/png"

    def test_query_params(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={})

        make_transport(handler).request(
            CouchRequest(url="http://couch/db/doc", params={"rev": "1-abc", "startkey": '"a"'})
        )

        assert seen[0].url.params["rev"] == "1-abc"
        assert seen[0].url.params["startkey"] == '"a"'

    def test_as_bytes(self):
        def handler(request):
            return httpx.Response(200, content=b"\x00\x01", headers={"Content-Type": "application/octet-stream"})

        response = make_transport(handler).request(CouchRequest(url="http://couch/db/doc/bin", as_="bytes"))

        assert response.body == b"\x00\x01"

    def test_headers_case_insensitive(self):
        def handler(request):
            return httpx.Response(200, text="hi", headers={"Content-Type": "text/plain"})

        response = make_transport(handler).request(CouchRequest(url="http://couch/x"))

        assert response.headers["content-type"] == "text/plain"
        assert response.headers["CONTENT-TYPE"] == "text/plain"

    def test_gzip_decoded(self):
        def handler(request):
            return httpx.Response(
                200,
                content=gzip.compress(b'{"ok": true}'),
                headers={"Content-Encoding": "gzip", "Content-Type": "application/json"},
            )

        response = make_transport(handler).request(CouchRequest(url="http://couch/x"))

        assert json.loads(response.body) == {"ok": True}

    def test_follows_redirects(self):
        def handler(request):
            if request.url.path == "/old":
                return httpx.Response(301, headers={"Location": "http://couch/new"})
            return httpx.Response(200, json={"path": request.url.path})

        response = make_transport(handler).request(CouchRequest(url="http://couch/old"))

        assert response.status_code == 200
        assert json.loads(response.body) == {"path": "/new"}

    def test_accept_headers(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={})

        make_transport(handler).request(
            CouchRequest(url="http://couch/x", accept="json", accept_encoding="identity")
        )

        assert seen[0].headers["accept"] == "application/json"
        assert seen[0].headers["accept-encoding"] == "identity"


class TestHTTPTransportAuth:
    """Tests for basic auth."""

    @staticmethod
    def _capture():
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={})

        return seen, handler

    def test_no_auth_by_default(self):
        seen, handler = self._capture()
        make_transport(handler).request(CouchRequest(url="http://couch/x"))
        assert "authorization" not in seen[0].headers

    def test_auth_from_config(self):
        seen, handler = self._capture()
        config = CouchConfig(username="admin", password="secret")
        make_transport(handler, config).request(CouchRequest(url="http://couch/x"))
        expected = "Basic " + base64.b64encode(b"admin:secret").decode()
        assert seen[0].headers["authorization"] == expected

    def test_request_auth_overrides_config(self):
        seen, handler = self._capture()
        config = CouchConfig(username="admin", password="secret")
        make_transport(handler, config).request(
            CouchRequest(url="http://couch/x", basic_auth=("reader", "pw"))
        )
        expected = "Basic " + base64.b64encode(b"reader:pw").decode()
        assert seen[0].headers["authorization"] == expected


class TestHTTPTransportFailures:
    """Tests for connection-level failures."""

    def test_connect_error_propagates_unchanged(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(httpx.ConnectError, match="Connection refused"):
            make_transport(handler).request(CouchRequest(url="http://couch/x"))

    def test_timeout_propagates_unchanged(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(httpx.ReadTimeout):
            make_transport(handler).request(CouchRequest(url="http://couch/x"))
