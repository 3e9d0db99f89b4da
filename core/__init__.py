"""Core helpers — logging and update inspection.

This package works on plain dicts only. It must NEVER import from ``sdk/`` or ``webhook/``.
"""

from core.identity import get_chat_id, get_message
from core.logger import WirebotLogger

__all__ = [
    "get_chat_id",
    "get_message",
    "WirebotLogger",
]
