"""Minimal webhook endpoint on top of :mod:`http.server`.

:func:`make_request_handler` builds a ``BaseHTTPRequestHandler`` subclass
that reads Telegram's POST, runs :func:`webhook.dispatcher.dispatch`, and
writes the resulting :class:`~webhook.dispatcher.WebResponse`.  Malformed
JSON and a bad ``Content-Length`` are answered with 400, a handler that raises
with 500 (logged with its traceback); everything else gets 200, so
Telegram does not redeliver it.
"""

from __future__ import annotations

import hmac
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional

from core.logger import WirebotLogger
from sdk.client import BotClient
from sdk.exceptions import DecodingError
from webhook.adapter import WebRequest
from webhook.dispatcher import Handler, WebResponse, dispatch

logger = WirebotLogger.get_logger()

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def make_request_handler(
    token: str,
    handler: Handler,
    client: Optional[BotClient] = None,
    path: str = "/",
    secret_token: Optional[str] = None,
) -> type[BaseHTTPRequestHandler]:
    """Return a request handler class serving the webhook at *path*.

    When *secret_token* is set, requests whose ``X-Telegram-Bot-Api-Secret-Token``
    header does not match are refused with 403 before anything is decoded.
    """

    class WebhookRequestHandler(BaseHTTPRequestHandler):

        def do_POST(self) -> None:
            if self.path.split("?", 1)[0] != path:
                self._write(WebResponse(status=404))
                return

            if secret_token is not None and not hmac.compare_digest(
                self.headers.get(SECRET_HEADER, ""), secret_token
            ):
                logger.warning("Webhook secret mismatch", extra={"path": self.path})
                self._write(WebResponse(status=403))
                return

            try:
                length = int(self.headers.get("Content-Length", 0))
            except ValueError:
                length = -1
            if length < 0:
                logger.warning("Bad Content-Length", extra={"content_length": self.headers.get("Content-Length")})
                self._write(WebResponse(status=400))
                return

            request = WebRequest(body=self.rfile.read(length), headers=dict(self.headers))
            try:
                result = dispatch(token, handler, request, client)
            except DecodingError as exc:
                logger.warning("Rejected malformed webhook body", extra={"error": str(exc)})
                self._write(WebResponse(status=400))
                return
            except Exception:
                logger.exception("Webhook handler failed", extra={"path": self.path})
                self._write(WebResponse(status=500))
                return
            self._write(result.response)

        def _write(self, response: WebResponse) -> None:
            body = response.body or b""
            self.send_response(response.status)
            if body:
                self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format: str, *args: object) -> None:
            logger.debug(format % args, extra={"client_address": self.client_address[0]})

    return WebhookRequestHandler


def create_server(
    token: str,
    handler: Handler,
    host: str = "0.0.0.0",
    port: int = 8443,
    client: Optional[BotClient] = None,
    path: str = "/",
    secret_token: Optional[str] = None,
) -> ThreadingHTTPServer:
    """Bind a threaded HTTP server for the webhook; call ``serve_forever()`` on it."""
    server = ThreadingHTTPServer(
        (host, port),
        make_request_handler(token, handler, client=client, path=path, secret_token=secret_token),
    )
    logger.info("Webhook server bound", extra={"host": host, "port": server.server_address[1], "path": path})
    return server
