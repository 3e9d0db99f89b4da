"""Tests for the http.server webhook endpoint, over a real local socket."""

import http.client
import json
import logging
import threading
from urllib.parse import urlsplit

import pytest
import requests

from webhook.registry import HandlerRegistry
from webhook.server import SECRET_HEADER, create_server


@pytest.fixture()
def registry() -> HandlerRegistry:
    registry = HandlerRegistry()
    registry.command("start")(lambda message: "change")
    return registry


@pytest.fixture()
def serve(token, client, registry):
    """Start a webhook server on a free port; yields a URL factory."""
    servers = []

    def start(**kwargs) -> str:
        server = create_server(token, registry, host="127.0.0.1", port=0, client=client, **kwargs)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        host, port = server.server_address[:2]
        return f"http://{host}:{port}"

    yield start

    for server in servers:
        server.shutdown()
        server.server_close()


def _post(url: str, body, headers=None) -> requests.Response:
    data = body if isinstance(body, (str, bytes)) else json.dumps(body)
    with requests.Session() as session:
        session.trust_env = False  # no proxies for 127.0.0.1
        return session.post(url, data=data, headers=headers or {}, timeout=5)


class TestWebhookServer:

    def test_direct_reply(self, serve, transport) -> None:
        base = serve()
        resp = _post(f"{base}/", {"message": {"text": "/start", "chat": {"id": "fake-chat-id"}}})

        assert resp.status_code == 200
        assert resp.json() == transport.body
        assert transport.calls[0]["data"] == {"chat_id": "fake-chat-id", "text": "change"}

    def test_no_reply_is_empty_200(self, serve, transport) -> None:
        base = serve()
        resp = _post(f"{base}/", {"message": {"text": "/stop", "chat": {"id": 1}}})

        assert resp.status_code == 200
        assert resp.content == b""
        assert transport.calls == []

    def test_malformed_json_is_400(self, serve, transport) -> None:
        base = serve()
        resp = _post(f"{base}/", '{"message": ')
        assert resp.status_code == 400
        assert transport.calls == []

    def test_failed_reply_still_200(self, serve, transport) -> None:
        transport.status = 403
        transport.body = {"ok": False, "description": "Forbidden"}
        base = serve()
        resp = _post(f"{base}/", {"message": {"text": "/start", "chat": {"id": 1}}})
        assert resp.status_code == 200
        assert resp.content == b""

    def test_unknown_path_is_404(self, serve) -> None:
        base = serve(path="/hook")
        assert _post(f"{base}/other", {"update_id": 1}).status_code == 404
        assert _post(f"{base}/hook?x=1", {"update_id": 1}).status_code == 200

    def test_secret_token(self, serve, transport) -> None:
        base = serve(secret_token="s3cret")
        update = {"message": {"text": "/start", "chat": {"id": 1}}}

        assert _post(f"{base}/", update).status_code == 403
        assert _post(f"{base}/", update, {SECRET_HEADER: "wrong"}).status_code == 403
        assert transport.calls == []
        assert _post(f"{base}/", update, {SECRET_HEADER: "s3cret"}).status_code == 200
        assert len(transport.calls) == 1

    def test_bad_content_length_is_400(self, serve, transport) -> None:
        base = urlsplit(serve())
        conn = http.client.HTTPConnection(base.hostname, base.port, timeout=5)
        try:
            conn.putrequest("POST", "/")
            conn.putheader("Content-Length", "lots")
            conn.endheaders()
            assert conn.getresponse().status == 400
        finally:
            conn.close()
        assert transport.calls == []

    def test_handler_error_is_500_and_logged(self, registry, serve, caplog) -> None:
        caplog.set_level(logging.ERROR, logger="wirebot")

        @registry.message()
        def broken(message):
            raise RuntimeError("boom")

        resp = _post(f"{serve()}/", {"message": {"text": "hello", "chat": {"id": 1}}})

        assert resp.status_code == 500
        failures = [r for r in caplog.records if r.getMessage() == "Webhook handler failed"]
        assert len(failures) == 1
        assert failures[0].exc_info[0] is RuntimeError
