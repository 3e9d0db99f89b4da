"""Shared fixtures: a recording fake transport and a well-formed bot token."""

import os
import sys

# Ignore any WIREBOT_LOG_DIR from a local .env; must precede config import.
os.environ["WIREBOT_LOG_DIR"] = ""

# Ensure the project root is importable.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest  # noqa: E402

from sdk.client import BotClient  # noqa: E402
from sdk.transport import TransportResponse  # noqa: E402

TOKEN = "123456789:ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghi"


class FakeTransport:
    """Records every outbound call and answers with a canned response.

    Set ``status``/``body`` to shape the reply, or ``error`` to make every
    call raise that exception instead.
    """

    def __init__(self) -> None:
        self.calls: list[dict] = []
        self.status = 200
        self.body: dict = {"ok": True, "result": {"message_id": 1}}
        self.error: Exception | None = None

    def _respond(self, call: dict) -> TransportResponse:
        self.calls.append(call)
        if self.error is not None:
            raise self.error
        return TransportResponse(self.status, self.body)

    def get(self, token, method, params=None, long_poll=0):
        return self._respond({"verb": "get", "token": token, "method": method,
                              "data": dict(params or {}), "long_poll": long_poll})

    def post_json(self, token, method, payload=None):
        return self._respond({"verb": "post", "token": token, "method": method, "data": dict(payload or {})})

    def post_multipart(self, token, method, fields, files):
        # Read file parts now: path-backed handles are closed after the call.
        read_files = {}
        for field, (name, content) in files.items():
            if hasattr(content, "read"):
                content = content.read()
            read_files[field] = (name, content)
        return self._respond({"verb": "multipart", "token": token, "method": method,
                              "data": dict(fields), "files": read_files})


@pytest.fixture()
def token() -> str:
    return TOKEN


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def client(transport: FakeTransport) -> BotClient:
    return BotClient(transport)
