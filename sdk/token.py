"""Bot token format checks.

A token is ``<numeric bot id>:<secret>``; the library never stores one,
it only validates the string a caller passes to each API call.
"""

import re

from sdk.exceptions import InvalidToken

_TOKEN_RE = re.compile(r"\d{9}:.{35}")


def is_valid_token(token: object) -> bool:
    """Return ``True`` if *token* is a string in bot-token format."""
    return isinstance(token, str) and _TOKEN_RE.fullmatch(token) is not None


def validate_token(token: object) -> str:
    """Return *token* unchanged, or raise :class:`InvalidToken`."""
    if not is_valid_token(token):
        raise InvalidToken(f"Malformed bot token: {mask_token(token)!r}")
    return token  # type: ignore[return-value]


def mask_token(token: object) -> str:
    """Render *token* for logs: the bot id survives, the secret does not."""
    if not isinstance(token, str):
        return f"<{type(token).__name__}>"
    bot_id, sep, _secret = token.partition(":")
    if not sep:
        return "***"
    return f"{bot_id}:***"
