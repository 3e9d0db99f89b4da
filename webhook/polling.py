"""Long-polling runner that feeds updates through the webhook reply rules.

Polled updates go through :func:`webhook.dispatcher.direct_reply`, so a
handler behaves the same whether updates arrive by webhook or by polling.
The offset lives only in the running loop; it is never persisted.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from core.logger import WirebotLogger
from sdk.client import BotClient, get_default_client
from webhook.dispatcher import DispatchResult, Handler, direct_reply

logger = WirebotLogger.get_logger()


def poll_once(
    token: str,
    handler: Handler,
    offset: Optional[int] = None,
    client: Optional[BotClient] = None,
    limit: Optional[int] = None,
    timeout: Optional[int] = None,
) -> Tuple[List[DispatchResult], Optional[int]]:
    """Fetch one batch of updates and handle each of them in order.

    Returns the per-update results and the offset to pass next time
    (unchanged when the batch was empty).

    Raises:
        UpstreamError: If ``getUpdates`` answers with a non-2xx status.
    """
    client = client or get_default_client()
    updates = client.get_updates(token, limit=limit, offset=offset, timeout=timeout)
    if updates:
        logger.debug("Received updates", extra={"count": len(updates)})

    reply = direct_reply(token, handler, client)
    results: List[DispatchResult] = []
    for update in updates:
        results.append(reply(update))
        offset = update["update_id"] + 1
    return results, offset


def run_polling(
    token: str,
    handler: Handler,
    client: Optional[BotClient] = None,
    timeout: int = 30,
    should_stop: Callable[[], bool] = lambda: False,
) -> Optional[int]:
    """Poll until *should_stop* returns ``True``; return the last offset.

    Errors from the API or from *handler* propagate and end the loop.
    """
    offset: Optional[int] = None
    logger.info("Polling for updates", extra={"api_method": "getUpdates", "timeout": timeout})
    while not should_stop():
        _, offset = poll_once(token, handler, offset=offset, client=client, timeout=timeout)
    logger.info("Polling stopped", extra={"offset": offset})
    return offset
