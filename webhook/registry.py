"""Handler registry — decide which user function answers a given update.

A :class:`HandlerRegistry` is itself a handler: call it with an update dict
and it tries its entries in registration order, returning the first result
that is not ``None``.  That makes it a drop-in ``handler`` argument for
:func:`webhook.dispatcher.dispatch` and :func:`webhook.polling.run_polling`.

Registered functions receive the part of the update they are about:

- ``@registry.command("start")``: the ``message`` whose text starts with
  ``/start`` (``/start@my_bot args`` matches as well);
- ``@registry.message()``: any ``message``;
- ``@registry.callback_query()``: the ``callback_query`` object;
- ``@registry.inline_query()``: the ``inline_query`` object.

Usage::

    registry = HandlerRegistry()

    @registry.command("start", description="Say hello")
    def start(message: dict) -> str:
        return "Hello!"

    result = dispatch(token, registry, request)
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Optional

from core.logger import WirebotLogger

logger = WirebotLogger.get_logger()

EntryHandler = Callable[[dict], Any]

COMMAND = "command"
MESSAGE = "message"
CALLBACK_QUERY = "callback_query"
INLINE_QUERY = "inline_query"


def parse_command(text: Optional[str]) -> Optional[str]:
    """Return the command name of *text* (``"/start@bot x"`` → ``"start"``)."""
    if not text or not text.startswith("/"):
        return None
    head = text.split()[0]
    return head[1:].split("@")[0].lower() or None


@dataclasses.dataclass(frozen=True, slots=True)
class HandlerEntry:
    """One registered function and the updates it applies to."""

    kind: str                      # one of COMMAND, MESSAGE, CALLBACK_QUERY, INLINE_QUERY
    handler: EntryHandler
    command: Optional[str] = None  # command name without the slash, for COMMAND
    description: str = ""

    def select(self, update: dict) -> Optional[dict]:
        """Return the object this entry's handler should receive, or ``None``."""
        if self.kind in (COMMAND, MESSAGE):
            message = update.get("message")
            if not message:
                return None
            if self.kind == COMMAND and parse_command(message.get("text")) != self.command:
                return None
            return message
        return update.get(self.kind) or None


class HandlerRegistry:
    """Ordered collection of handlers, callable as a single update handler."""

    def __init__(self) -> None:
        self._entries: list[HandlerEntry] = []

    # ── decorators ───────────────────────────────────────────────────────

    def _register(self, kind: str, command: Optional[str] = None, description: str = "") -> Callable[[EntryHandler], EntryHandler]:
        def decorator(func: EntryHandler) -> EntryHandler:
            self.add(HandlerEntry(kind=kind, handler=func, command=command, description=description))
            return func
        return decorator

    def command(self, name: str, *, description: str = "") -> Callable[[EntryHandler], EntryHandler]:
        """Register a handler for the ``/name`` command."""
        return self._register(COMMAND, name.lstrip("/").lower(), description)

    def message(self) -> Callable[[EntryHandler], EntryHandler]:
        """Register a handler for any message."""
        return self._register(MESSAGE)

    def callback_query(self) -> Callable[[EntryHandler], EntryHandler]:
        return self._register(CALLBACK_QUERY)

    def inline_query(self) -> Callable[[EntryHandler], EntryHandler]:
        return self._register(INLINE_QUERY)

    # ── lookup helpers ───────────────────────────────────────────────────

    def add(self, entry: HandlerEntry) -> None:
        self._entries.append(entry)

    def entries(self) -> list[HandlerEntry]:
        """Return a copy of the registered entries, in order."""
        return list(self._entries)

    def commands(self) -> dict[str, str]:
        """Map ``/command`` → description, e.g. for a ``/help`` text."""
        return {f"/{e.command}": e.description for e in self._entries if e.kind == COMMAND}

    def __call__(self, update: dict) -> Any:
        """Run the first matching handlers until one returns a value."""
        for entry in self._entries:
            target = entry.select(update)
            if target is None:
                continue
            result = entry.handler(target)
            if result is not None:
                return result
        logger.debug("No handler produced a result", extra={"update_id": update.get("update_id")})
        return None
