"""Tests for the shared request pipeline."""

from unittest.mock import patch

import pytest

from couch_tools.client.exceptions import (
    AttachmentNotFoundError,
    DatabaseNotFoundError,
    DocumentNotFoundError,
    ResourceConflictError,
    ServerError,
)
from couch_tools.client.request import couch_request, transport_scope
from couch_tools.client.transport import CouchRequest


class TestCouchRequest:
    """Tests for couch_request()."""

    def test_success_attaches_json(self, mock_transport, make_response):
        mock_transport.respond(make_response({"db_name": "inventory"}))

        response = couch_request(CouchRequest(url="http://couch/inventory"), mock_transport)

        assert response.json == {"db_name": "inventory"}
        mock_transport.request.assert_called_once()

    def test_non_json_body_is_not_an_error(self, mock_transport, make_response):
        mock_transport.respond(make_response("<h1>hello</h1>", headers={"Content-Type": "text/html"}))

        response = couch_request(CouchRequest(url="http://couch/x"), mock_transport)

        assert response.json is None
        assert response.text == "<h1>hello</h1>"

    def test_empty_body(self, mock_transport, make_response):
        mock_transport.respond(make_response(None))

        response = couch_request(CouchRequest(url="http://couch/x"), mock_transport)

        assert response.json is None

    def test_error_carries_json_payload(self, mock_transport, make_response):
        body = {"error": "not_found", "reason": "no_db_file"}
        mock_transport.respond(make_response(body, 404))

        with pytest.raises(DatabaseNotFoundError) as exc_info:
            couch_request(CouchRequest(url="http://couch/nope"), mock_transport)

        assert exc_info.value.payload == body
        assert exc_info.value.status_code == 404

    def test_error_carries_raw_body_when_not_json(self, mock_transport, make_response):
        mock_transport.respond(make_response("Bad Gateway", 502, {"Content-Type": "text/plain"}))

        with pytest.raises(ServerError) as exc_info:
            couch_request(CouchRequest(url="http://couch/x"), mock_transport)

        assert exc_info.value.payload == "Bad Gateway"
        assert exc_info.value.status_code == 502

    @pytest.mark.parametrize(
        "status,body,expected",
        [
            (404, {"reason": "Document is missing attachment"}, AttachmentNotFoundError),
            (404, {"reason": "deleted"}, DocumentNotFoundError),
            (409, {"error": "conflict", "reason": "Document update conflict."}, ResourceConflictError),
        ],
    )
    def test_classifies(self, mock_transport, make_response, status, body, expected):
        mock_transport.respond(make_response(body, status))

        with pytest.raises(expected):
            couch_request(CouchRequest(url="http://couch/x"), mock_transport)

    def test_binary_body_not_decoded(self, mock_transport, make_response):
        body = b"[" * 100000
        mock_transport.respond(make_response(body, headers={"Content-Type": "application/octet-stream"}))

        response = couch_request(CouchRequest(url="http://couch/db/doc/blob", as_="bytes"), mock_transport)

        assert response.json is None
        assert response.body == body

    def test_deeply_nested_text_is_not_json(self, mock_transport, make_response):
        mock_transport.respond(make_response("[" * 100000, headers={"Content-Type": "text/plain"}))

        response = couch_request(CouchRequest(url="http://couch/x"), mock_transport)

        assert response.json is None

    def test_binary_error_body_still_classified(self, mock_transport, make_response):
        body = b'{"error": "not_found", "reason": "Document is missing attachment"}'
        mock_transport.respond(make_response(body, 404))

        with pytest.raises(AttachmentNotFoundError) as exc_info:
            couch_request(CouchRequest(url="http://couch/db/doc/blob", as_="bytes"), mock_transport)

        assert exc_info.value.reason == "Document is missing attachment"

    def test_transport_errors_propagate(self, mock_transport):
        mock_transport.request.side_effect = ConnectionError("refused")

        with pytest.raises(ConnectionError):
            couch_request(CouchRequest(url="http://couch/x"), mock_transport)


class TestTransportScope:
    """Tests for transport_scope()."""

    def test_given_transport_left_open(self, mock_transport):
        with transport_scope(mock_transport) as t:
            assert t is mock_transport
        mock_transport.close.assert_not_called()

    def test_temporary_transport_closed(self):
        with patch("couch_tools.client.http.HTTPTransport.close") as mock_close:
            with transport_scope() as t:
                assert t is not None
            mock_close.assert_called_once()
