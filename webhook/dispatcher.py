"""Reply dispatcher — run a handler for one update and build the HTTP answer.

The chain for a single webhook delivery is::

    adapt(request) -> handler(update) -> classify(result)
        -> [sendMessage for a TextReply] -> DispatchResult

Nothing here keeps state between calls, so a threaded or asyncio server may
dispatch many deliveries at once.  Errors follow two rules:

* a malformed inbound body raises :class:`~sdk.exceptions.DecodingError`
  and never becomes a success response;
* a failed auto-reply is logged and returned in ``reply_error`` but the
  webhook still gets a 200, because Telegram would otherwise redeliver an
  update we already accepted.
"""

from __future__ import annotations

import asyncio
import dataclasses
import inspect
import json
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import requests

from core.identity import get_chat_id
from core.logger import WirebotLogger
from sdk.client import BotClient, get_default_client
from sdk.exceptions import UpstreamError
from webhook.adapter import adapt

logger = WirebotLogger.get_logger()

Update = Dict[str, Any]
Handler = Callable[[Update], Any]
AsyncHandler = Callable[[Update], Union[Any, Awaitable[Any]]]

# ── Handler results ──────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True)
class NoReply:
    """The handler declined to answer."""


@dataclasses.dataclass(frozen=True)
class TextReply:
    """Answer the update's chat with *text*."""

    text: str


@dataclasses.dataclass(frozen=True)
class OpaqueResult:
    """The handler produced its own effect; *value* is passed through untouched."""

    value: Any


HandlerResult = Union[NoReply, TextReply, OpaqueResult]


def classify(value: Any) -> HandlerResult:
    """Map a raw handler return value onto a :data:`HandlerResult`.

    ``None`` means no reply, a ``str`` is reply text, an existing result
    is kept as is, and anything else is opaque.
    """
    if isinstance(value, (NoReply, TextReply, OpaqueResult)):
        return value
    if value is None:
        return NoReply()
    if isinstance(value, str):
        return TextReply(value)
    return OpaqueResult(value)


# ── Responses ────────────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True)
class WebResponse:
    """What the webhook endpoint sends back to Telegram."""

    status: int = 200
    body: Optional[bytes] = None


@dataclasses.dataclass(frozen=True)
class DispatchResult:
    """A :class:`WebResponse` plus what happened on the way to it.

    Attributes:
        response: The HTTP answer for the webhook caller.
        direct_reply: ``True`` when a ``sendMessage`` auto-reply was issued
            and accepted by the API.
        reply_error: The exception of a failed auto-reply, if any.
    """

    response: WebResponse
    direct_reply: bool = False
    reply_error: Optional[Exception] = None

    @property
    def status(self) -> int:
        return self.response.status


# ── Dispatch ─────────────────────────────────────────────────────────────────


def _reply(token: str, client: BotClient, update: Update, text: str) -> DispatchResult:
    """Send *text* back into the update's chat and describe the outcome."""
    chat_id = get_chat_id(update)
    if chat_id is None:
        logger.warning("Text reply has no chat to go to, dropping it", extra={"update_id": update.get("update_id")})
        return DispatchResult(WebResponse())

    try:
        body = client.send_message(token, chat_id, text)
    except (UpstreamError, requests.RequestException) as exc:
        logger.error(
            "Direct reply failed",
            extra={
                "api_method": "sendMessage",
                "chat_id": chat_id,
                "update_id": update.get("update_id"),
                "status_code": getattr(exc, "status_code", None),
                "error": str(exc),
            },
        )
        return DispatchResult(WebResponse(), reply_error=exc)

    logger.info("Direct reply sent", extra={"api_method": "sendMessage", "chat_id": chat_id})
    return DispatchResult(
        WebResponse(body=json.dumps(body).encode("utf-8")),
        direct_reply=True,
    )


def respond(token: str, client: BotClient, update: Update, result: HandlerResult) -> DispatchResult:
    """Turn a classified handler *result* into a :class:`DispatchResult`."""
    if isinstance(result, TextReply):
        return _reply(token, client, update, result.text)
    if isinstance(result, OpaqueResult):
        logger.debug("Handler returned a non-text result, not replying", extra={"update_id": update.get("update_id")})
        return DispatchResult(WebResponse())
    if isinstance(result, NoReply):
        return DispatchResult(WebResponse())
    raise TypeError(f"Unknown handler result: {result!r}")


def direct_reply(token: str, handler: Handler, client: Optional[BotClient] = None) -> Callable[[Update], DispatchResult]:
    """Wrap *handler* so a string result is sent back to the chat.

    The returned callable takes an already-decoded update, which makes it
    usable for polled updates too.

    Raises:
        TypeError: If *handler* returns an awaitable; use :func:`dispatch_async`.
    """
    def wrapped(update: Update) -> DispatchResult:
        value = handler(update)
        if inspect.isawaitable(value):
            if inspect.iscoroutine(value):
                value.close()
            raise TypeError("Handler returned an awaitable; use dispatch_async for async handlers")
        return respond(token, client or get_default_client(), update, classify(value))

    return wrapped


def dispatch(token: str, handler: Handler, request: Any, client: Optional[BotClient] = None) -> DispatchResult:
    """Handle one webhook delivery end to end.

    Raises:
        DecodingError: If the request body is not a JSON update object.
    """
    update = adapt(request)
    return direct_reply(token, handler, client)(update)


async def dispatch_async(
    token: str,
    handler: AsyncHandler,
    request: Any,
    client: Optional[BotClient] = None,
) -> DispatchResult:
    """Asyncio flavour of :func:`dispatch`.

    *handler* may be a plain function or a coroutine function.  The
    blocking auto-reply runs in a worker thread via :func:`asyncio.to_thread`
    and is the only suspension point after the handler returns.
    """
    update = adapt(request)
    value = handler(update)
    if inspect.isawaitable(value):
        value = await value
    result = classify(value)
    if isinstance(result, TextReply):
        return await asyncio.to_thread(_reply, token, client or get_default_client(), update, result.text)
    return respond(token, client or get_default_client(), update, result)
