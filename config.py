"""Library configuration — environment variables and derived constants.

Loads ``WIREBOT_API_URL``, ``WIREBOT_TIMEOUT``, ``WIREBOT_LOG_LEVEL`` and
``WIREBOT_LOG_DIR`` from the environment via ``python-dotenv``.  All values
are resolved at import time so other modules can ``from config import …``
without repeated lookups.

The bot token is deliberately absent: callers pass it to every API call.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import logging
import os

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── Environment bootstrap ────────────────────────────────────────────────────
load_dotenv()


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse_timeout(raw: str | None, default: float = 10.0) -> float:
    """Parse a positive timeout in seconds, falling back to *default*."""
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _parse_log_level(raw: str | None) -> int:
    """Map a level name such as ``"debug"`` onto its :mod:`logging` constant."""
    if not raw:
        return logging.INFO
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO


# ── Public constants ─────────────────────────────────────────────────────────

API_URL: str = os.environ.get("WIREBOT_API_URL", "https://api.telegram.org").rstrip("/")
REQUEST_TIMEOUT: float = _parse_timeout(os.environ.get("WIREBOT_TIMEOUT"))
LOG_LEVEL: int = _parse_log_level(os.environ.get("WIREBOT_LOG_LEVEL"))
# Rotating file logging is opt-in; empty disables it.
LOG_DIR: str = os.environ.get("WIREBOT_LOG_DIR", "")
