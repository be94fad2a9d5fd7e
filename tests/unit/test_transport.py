"""
tests/unit/test_transport.py

Unit tests for RequestsTransport and StubTransport.

Verifies:
✔ One POST per send with body, headers and timeout
✔ HTTP error statuses return the body (not a TransportFailure)
✔ Timeouts and connection errors raise TransportFailure without the URL
✔ StubTransport scripts replies by URL prefix and records calls
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from inference.errors import TransportFailure
from inference.stub import DEFAULT_STUB_REPLY, StubTransport
from inference.transport import RequestsTransport

URL = "https://example.test/v1/generate?key=SECRET"


def fake_response(status_code=200, content=b'{"ok": true}'):
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = content
    return resp


class TestRequestsTransport:
    @patch("inference.transport.requests.post")
    def test_posts_body(self, mock_post):
        mock_post.return_value = fake_response()

        body = RequestsTransport().send(URL, {"Content-Type": "application/json"}, '{"a": 1}', 7.0)

        assert body == b'{"ok": true}'
        mock_post.assert_called_once_with(
            URL,
            data=b'{"a": 1}',
            headers={"Content-Type": "application/json"},
            timeout=7.0,
        )

    @patch("inference.transport.requests.post")
    def test_http_error_returns_body(self, mock_post):
        mock_post.return_value = fake_response(429, b'{"error": {"message": "quota"}}')

        body = RequestsTransport().send(URL, {}, "{}", 1.0)

        assert body == b'{"error": {"message": "quota"}}'

    @patch("inference.transport.requests.post")
    def test_timeout(self, mock_post):
        mock_post.side_effect = requests.Timeout(URL)

        with pytest.raises(TransportFailure) as excinfo:
            RequestsTransport().send(URL, {}, "{}", 1.0)

        assert "timed out" in str(excinfo.value)
        assert "SECRET" not in str(excinfo.value)

    @patch("inference.transport.requests.post")
    def test_connection_error(self, mock_post):
        mock_post.side_effect = requests.ConnectionError(f"Max retries exceeded with url: {URL}")

        with pytest.raises(TransportFailure) as excinfo:
            RequestsTransport().send(URL, {}, "{}", 1.0)

        assert str(excinfo.value) == "Network Error: ConnectionError"

    def test_uses_given_session(self):
        session = MagicMock()
        session.post.return_value = fake_response()

        RequestsTransport(session=session).send(URL, {}, "{}", 1.0)

        session.post.assert_called_once()


class TestStubTransport:
    def test_default_reply(self):
        transport = StubTransport()
        assert transport.send("https://any", {}, "{}", 1.0) == DEFAULT_STUB_REPLY

    def test_prefix_match(self):
        transport = StubTransport({"https://a.test": "alpha", "https://b.test": b"beta"})
        assert transport.send("https://a.test/x?key=1", {}, "{}", 1.0) == b"alpha"
        assert transport.send("https://b.test/y", {}, "{}", 1.0) == b"beta"

    def test_scripted_failure(self):
        transport = StubTransport(default=TransportFailure("Network Error: refused"))
        with pytest.raises(TransportFailure, match="refused"):
            transport.send("https://any", {}, "{}", 1.0)

    def test_other_exception_wrapped(self):
        transport = StubTransport(default=ConnectionResetError("reset"))
        with pytest.raises(TransportFailure):
            transport.send("https://any", {}, "{}", 1.0)

    def test_calls_recorded(self):
        seen = []
        transport = StubTransport(on_send=seen.append)
        transport.send("https://any", {"H": "v"}, "body", 3.0)

        assert transport.call_count == 1
        assert transport.calls[0].headers == {"H": "v"}
        assert seen[0].timeout_s == 3.0
