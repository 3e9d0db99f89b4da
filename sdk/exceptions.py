"""Exception hierarchy for the wirebot Telegram SDK."""

from typing import Any, Dict, Iterable, Optional


class WirebotError(Exception):
    """Base class for every error raised by this library."""


class UpstreamError(WirebotError):
    """Non-2xx response from the Telegram Bot API.

    Attributes:
        status_code: HTTP status code returned by the API.
        response_body: Decoded response body, when available.
        method: Bot API method that was called, e.g. ``"sendMessage"``.
    """

    def __init__(
        self,
        status_code: int,
        response_body: Optional[Dict[str, Any]] = None,
        method: Optional[str] = None,
    ) -> None:
        """Initialise with the HTTP status code, optional body and method."""
        self.status_code = status_code
        self.response_body = response_body or {}
        self.method = method
        description = self.response_body.get("description", "Unknown error")
        prefix = f"{method} failed" if method else "API error"
        super().__init__(f"{prefix} with status {status_code}: {description}")


class DecodingError(WirebotError, ValueError):
    """An inbound webhook body is not a JSON-encoded update object."""


class InvalidToken(WirebotError, ValueError):
    """A bot token does not look like ``<9 digits>:<35 characters>``."""


class UnsupportedFileType(WirebotError, ValueError):
    """A file's extension is not accepted by the target send method."""

    def __init__(self, filename: str, extensions: Iterable[str]) -> None:
        self.filename = filename
        self.extensions = tuple(extensions)
        super().__init__(
            "Telegram API only supports the following formats: "
            f"{', '.join(self.extensions)} for this method. "
            "Other formats may be sent using send_document"
        )
