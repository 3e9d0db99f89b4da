"""HTTP transport for the Bot API, built on ``requests``.

The transport knows how to reach ``<api_url>/bot<token>/<method>`` with a
query string, a JSON body or a multipart form, and how to decode the reply.
It never interprets the HTTP status: that is the client's job, so the
same transport can back both strict wrappers and best-effort callers.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple, Union

import requests

from config import API_URL, REQUEST_TIMEOUT

# (filename, content) as accepted by ``requests`` for a multipart file part.
FilePart = Tuple[str, Any]


@dataclasses.dataclass(frozen=True)
class TransportConfig:
    """Immutable connection settings handed to a transport."""

    api_url: str = API_URL
    timeout: float = REQUEST_TIMEOUT

    def method_url(self, token: str, method: str) -> str:
        """Full URL of Bot API *method* for *token*."""
        return f"{self.api_url.rstrip('/')}/bot{token}/{method}"


@dataclasses.dataclass(frozen=True)
class TransportResponse:
    """HTTP status plus the decoded JSON body (``{}`` when not JSON)."""

    status: int
    body: Dict[str, Any]

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """What :class:`~sdk.client.BotClient` needs from a transport."""

    def get(self, token: str, method: str, params: Optional[Mapping[str, Any]] = None, long_poll: float = 0) -> TransportResponse: ...  # noqa: E704

    def post_json(self, token: str, method: str, payload: Optional[Mapping[str, Any]] = None) -> TransportResponse: ...  # noqa: E704

    def post_multipart(self, token: str, method: str, fields: Mapping[str, Any], files: Mapping[str, FilePart]) -> TransportResponse: ...  # noqa: E704


def form_value(value: Any) -> Union[str, bytes]:
    """Render one multipart form value; structured values become JSON."""
    if isinstance(value, (str, bytes)):
        return value
    return json.dumps(value)


class HttpTransport:
    """Blocking :class:`Transport` implementation using :mod:`requests`."""

    def __init__(self, config: Optional[TransportConfig] = None) -> None:
        self.config = config or TransportConfig()

    # ------------------------------------------------------------------
    #  Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _wrap(response: requests.Response) -> TransportResponse:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"result": body}
        return TransportResponse(status=response.status_code, body=body)

    # ------------------------------------------------------------------
    #  Public API
    # ------------------------------------------------------------------

    def get(
        self,
        token: str,
        method: str,
        params: Optional[Mapping[str, Any]] = None,
        long_poll: float = 0,
    ) -> TransportResponse:
        """GET *method* with *params* as the query string.

        *long_poll* is how long the server may hold the request open; it is
        added to the configured timeout so a long poll is not cut short.

        Raises:
            requests.RequestException: On transport-level failures.
        """
        response = requests.get(
            self.config.method_url(token, method),
            params=dict(params or {}),
            timeout=self.config.timeout + long_poll,
        )
        return self._wrap(response)

    def post_json(self, token: str, method: str, payload: Optional[Mapping[str, Any]] = None) -> TransportResponse:
        """POST *payload* to *method* as a JSON body."""
        response = requests.post(
            self.config.method_url(token, method),
            json=dict(payload or {}),
            timeout=self.config.timeout,
        )
        return self._wrap(response)

    def post_multipart(
        self,
        token: str,
        method: str,
        fields: Mapping[str, Any],
        files: Mapping[str, FilePart],
    ) -> TransportResponse:
        """POST a ``multipart/form-data`` body made of *fields* and *files*."""
        response = requests.post(
            self.config.method_url(token, method),
            data={name: form_value(value) for name, value in fields.items()},
            files=dict(files),
            timeout=self.config.timeout,
        )
        return self._wrap(response)
