from core.logger import WirebotLogger

logger = WirebotLogger.get_logger()

# Update keys that carry a Message object, in lookup order.
MESSAGE_KEYS = ("message", "edited_message", "channel_post", "edited_channel_post")


def get_message(update: dict) -> dict | None:
    """Return the first message-like object carried by *update*, if any."""
    for key in MESSAGE_KEYS:
        message = update.get(key)
        if message:
            return message
    return None


def get_chat_id(update: dict) -> int | str | None:
    """Resolve the chat a reply to *update* should go to.

    Message-based updates answer into their own chat.  A callback query
    answers into the chat of the message that carried the inline keyboard.
    Inline queries (and anything else without a chat) resolve to ``None``.
    """
    message = get_message(update)

    if message is None:
        callback_query = update.get("callback_query")
        if callback_query:
            message = callback_query.get("message")

    if not message:
        logger.debug("No chat-bearing object in update", extra={"update_id": update.get("update_id")})
        return None

    chat = message.get("chat") or {}
    chat_id = chat.get("id")
    if chat_id is None:
        logger.warning("Message has no chat id", extra={"update_id": update.get("update_id")})
    return chat_id
