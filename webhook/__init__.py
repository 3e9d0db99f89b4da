"""Webhook layer — adapt inbound requests, route updates, reply to chats.

This package may import from ``core/``, ``sdk/`` and ``config`` only.
"""

from webhook.adapter import WebRequest, adapt
from webhook.dispatcher import (
    DispatchResult,
    NoReply,
    OpaqueResult,
    TextReply,
    WebResponse,
    classify,
    direct_reply,
    dispatch,
    dispatch_async,
)
from webhook.polling import poll_once, run_polling
from webhook.registry import HandlerRegistry
from webhook.server import create_server, make_request_handler

__all__ = [
    # Adapter
    "WebRequest",
    "adapt",
    # Dispatcher
    "NoReply",
    "TextReply",
    "OpaqueResult",
    "WebResponse",
    "DispatchResult",
    "classify",
    "direct_reply",
    "dispatch",
    "dispatch_async",
    # Routing and runners
    "HandlerRegistry",
    "poll_once",
    "run_polling",
    "create_server",
    "make_request_handler",
]
