"""Telegram Bot API SDK — transport, endpoint wrappers, schemas and exceptions.

The :class:`BotClient` class wraps each Bot API method we support with a
synchronous method taking the bot token first.  Module-level free
functions (``send_message``, ``get_updates``, etc.) are shortcuts bound to
a default client.

Usage::

    from sdk import BotClient, UpstreamError
    from sdk.client import send_message, get_updates
"""

from sdk.client import BotClient
from sdk.exceptions import (
    DecodingError,
    InvalidToken,
    UnsupportedFileType,
    UpstreamError,
    WirebotError,
)
from sdk.transport import HttpTransport, TransportConfig, TransportResponse

__all__ = [
    "BotClient",
    "HttpTransport",
    "TransportConfig",
    "TransportResponse",
    "WirebotError",
    "DecodingError",
    "InvalidToken",
    "UnsupportedFileType",
    "UpstreamError",
]
