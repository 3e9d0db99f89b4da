"""BotClient -- service layer wrapping the Telegram Bot API endpoints we use.

Every method takes the bot ``token`` as its first argument; the client
holds only an immutable transport, never a credential, so one instance can
safely serve many bots and many threads.  Request parameters are validated
with the Pydantic schemas in :mod:`sdk.models` before any I/O, and a
non-2xx reply raises :class:`~sdk.exceptions.UpstreamError`.

The module also provides free-function shortcuts (``send_message``,
``get_updates``, ...) bound to a lazily created default client.
"""

from __future__ import annotations

import os
from typing import Any, Dict, List, Mapping, Optional, Sequence

from core.logger import WirebotLogger
from sdk.exceptions import UpstreamError
from sdk.files import (
    AUDIO_EXTENSIONS,
    PHOTO_EXTENSIONS,
    STICKER_EXTENSIONS,
    VIDEO_EXTENSIONS,
    assert_file_type,
    file_name,
)
from sdk.models import (
    AnswerCallbackQuery,
    AnswerInlineQuery,
    ApiResponse,
    ChatId,
    DeleteMessage,
    EditMessageText,
    GetMe,
    GetUpdates,
    SendMessage,
)
from sdk.token import mask_token, validate_token
from sdk.transport import HttpTransport, Transport, TransportConfig, TransportResponse

logger = WirebotLogger.get_logger()


class BotClient:
    """Client-side service layer for the Telegram Bot API.

    Each public method corresponds to one Bot API method and returns the
    decoded JSON body of the reply (``get_updates`` returns the ``result``
    list instead).
    """

    def __init__(self, transport: Optional[Transport] = None, config: Optional[TransportConfig] = None) -> None:
        """Create a client on top of *transport*.

        Args:
            transport: Anything implementing :class:`~sdk.transport.Transport`;
                defaults to an :class:`~sdk.transport.HttpTransport`.
            config: Settings for the default transport; ignored when
                *transport* is given.
        """
        self._transport = transport if transport is not None else HttpTransport(config)

    @property
    def transport(self) -> Transport:
        return self._transport

    # ------------------------------------------------------------------
    #  Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check(token: str, method: str, response: TransportResponse) -> Dict[str, Any]:
        """Return the body of a 2xx *response*, otherwise log and raise.

        Raises:
            UpstreamError: If the response status code is not 2xx.
        """
        if not response.ok:
            logger.error(
                "Bot API call failed",
                extra={
                    "api_method": method,
                    "bot": mask_token(token),
                    "status_code": response.status,
                    "api_response": response.body,
                },
            )
            raise UpstreamError(response.status, response.body, method)
        return response.body

    def _get(
        self,
        token: str,
        method: str,
        params: Optional[Mapping[str, Any]] = None,
        long_poll: float = 0,
    ) -> Dict[str, Any]:
        validate_token(token)
        logger.debug("GET", extra={"api_method": method, "bot": mask_token(token)})
        return self._check(token, method, self._transport.get(token, method, params, long_poll=long_poll))

    def _post(self, token: str, method: str, payload: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        validate_token(token)
        logger.debug("POST", extra={"api_method": method, "bot": mask_token(token)})
        return self._check(token, method, self._transport.post_json(token, method, payload))

    def _send_file(
        self,
        token: str,
        method: str,
        chat_id: ChatId,
        field: str,
        payload: Any,
        default_name: str,
        options: Mapping[str, Any],
        extensions: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        """Send *payload* as the *field* part of a multipart form.

        ``str`` payloads are file ids or URLs; nothing is uploaded, so they
        go out as a JSON body instead.
        """
        validate_token(token)
        if extensions is not None:
            assert_file_type(payload, extensions)

        options = {key: value for key, value in options.items() if value is not None}

        if isinstance(payload, str):
            return self._post(token, method, {"chat_id": chat_id, **options, field: payload})

        fields: Dict[str, Any] = {"chat_id": str(chat_id), **options}
        logger.debug("POST multipart", extra={"api_method": method, "bot": mask_token(token), "chat_id": chat_id})

        if isinstance(payload, os.PathLike):
            with open(payload, "rb") as fh:
                files = {field: (file_name(payload) or default_name, fh)}
                return self._check(token, method, self._transport.post_multipart(token, method, fields, files))

        if isinstance(payload, (bytes, bytearray)):
            name = default_name
        else:
            name = file_name(payload) or default_name
        files = {field: (name, payload)}
        return self._check(token, method, self._transport.post_multipart(token, method, fields, files))

    # ------------------------------------------------------------------
    #  Updates and webhooks
    # ------------------------------------------------------------------

    def get_updates(
        self,
        token: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        timeout: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Receive pending updates via the long-polling endpoint.

        Unset parameters fall back to ``timeout=1``, ``offset=0`` and
        ``limit=100``.  Returns the list of raw update dicts.
        """
        given = {"limit": limit, "offset": offset, "timeout": timeout}
        query = GetUpdates(**{key: value for key, value in given.items() if value is not None})
        body = self._get(token, "getUpdates", query.payload(), long_poll=query.timeout)
        return ApiResponse.model_validate(body).result or []

    def set_webhook(self, token: str, url: str, **options: Any) -> Dict[str, Any]:
        """Register *url* to receive updates from chats.

        Extra Bot API parameters such as ``secret_token`` go into *options*.
        """
        params = {key: value for key, value in options.items() if value is not None}
        params["url"] = url
        return self._get(token, "setWebhook", params)

    def delete_webhook(self, token: str, drop_pending_updates: Optional[bool] = None) -> Dict[str, Any]:
        """Remove the webhook so ``get_updates`` can be used again."""
        payload: Dict[str, Any] = {}
        if drop_pending_updates is not None:
            payload["drop_pending_updates"] = drop_pending_updates
        return self._post(token, "deleteWebhook", payload)

    def get_webhook_info(self, token: str) -> Dict[str, Any]:
        return self._get(token, "getWebhookInfo")

    def get_me(self, token: str) -> Dict[str, Any]:
        """A simple method for testing the bot's token."""
        return self._get(token, "getMe", GetMe().payload())

    # ------------------------------------------------------------------
    #  Text messages
    # ------------------------------------------------------------------

    def send_message(
        self,
        token: str,
        chat_id: ChatId,
        text: str,
        parse_mode: Optional[str] = None,
        disable_web_page_preview: Optional[bool] = None,
        **options: Any,
    ) -> Dict[str, Any]:
        """Send a text message to the chat.

        *parse_mode* must be ``"Markdown"`` or ``"HTML"`` when given; any
        further Bot API parameter (``reply_markup``, ``disable_notification``,
        ...) can be passed through *options*.
        """
        request = SendMessage(
            chat_id=chat_id,
            text=text,
            parse_mode=parse_mode,
            disable_web_page_preview=disable_web_page_preview,
            **options,
        )
        return self._post(token, "sendMessage", request.payload())

    def edit_message_text(
        self,
        token: str,
        chat_id: ChatId,
        message_id: int,
        text: str,
        **options: Any,
    ) -> Dict[str, Any]:
        """Replace the text of a message the bot sent earlier."""
        request = EditMessageText(chat_id=chat_id, message_id=message_id, text=text, **options)
        return self._post(token, "editMessageText", request.payload())

    def delete_message(self, token: str, chat_id: ChatId, message_id: int) -> Dict[str, Any]:
        """Remove a message from the chat."""
        request = DeleteMessage(chat_id=chat_id, message_id=message_id)
        return self._post(token, "deleteMessage", request.payload())

    # ------------------------------------------------------------------
    #  Media
    # ------------------------------------------------------------------

    def send_photo(self, token: str, chat_id: ChatId, photo: Any, **options: Any) -> Dict[str, Any]:
        """Send an image; local files must be jpg, jpeg, gif, png, tif or bmp."""
        return self._send_file(token, "sendPhoto", chat_id, "photo", photo, "photo.png", options, PHOTO_EXTENSIONS)

    def send_document(self, token: str, chat_id: ChatId, document: Any, **options: Any) -> Dict[str, Any]:
        """Send a file of any type."""
        return self._send_file(token, "sendDocument", chat_id, "document", document, "document", options)

    def send_video(self, token: str, chat_id: ChatId, video: Any, **options: Any) -> Dict[str, Any]:
        return self._send_file(token, "sendVideo", chat_id, "video", video, "video.mp4", options, VIDEO_EXTENSIONS)

    def send_audio(self, token: str, chat_id: ChatId, audio: Any, **options: Any) -> Dict[str, Any]:
        return self._send_file(token, "sendAudio", chat_id, "audio", audio, "audio.mp3", options, AUDIO_EXTENSIONS)

    def send_sticker(self, token: str, chat_id: ChatId, sticker: Any, **options: Any) -> Dict[str, Any]:
        return self._send_file(
            token, "sendSticker", chat_id, "sticker", sticker, "sticker.webp", options, STICKER_EXTENSIONS
        )

    # ------------------------------------------------------------------
    #  Queries
    # ------------------------------------------------------------------

    def answer_inline_query(
        self,
        token: str,
        inline_query_id: str,
        results: List[Dict[str, Any]],
        **options: Any,
    ) -> Dict[str, Any]:
        """Send the results for an inline query."""
        request = AnswerInlineQuery(inline_query_id=inline_query_id, results=results, **options)
        return self._post(token, "answerInlineQuery", request.payload())

    def answer_callback_query(
        self,
        token: str,
        callback_query_id: str,
        text: str = "",
        show_alert: bool = False,
    ) -> Dict[str, Any]:
        """Acknowledge a callback query so the spinner disappears for the user."""
        request = AnswerCallbackQuery(callback_query_id=callback_query_id, text=text, show_alert=show_alert)
        return self._post(token, "answerCallbackQuery", request.payload())


# ── Module-level shortcuts ───────────────────────────────────────────────────
#
# Free functions bound to a lazily-initialised default :class:`BotClient`
# using the settings from :mod:`config`.
# ─────────────────────────────────────────────────────────────────────────────

_default_client: Optional[BotClient] = None


def get_default_client() -> BotClient:
    """Return the shared default client, creating it on first use."""
    global _default_client
    if _default_client is None:
        _default_client = BotClient()
    return _default_client


def get_updates(token: str, limit: Optional[int] = None, offset: Optional[int] = None, timeout: Optional[int] = None) -> List[Dict[str, Any]]:
    return get_default_client().get_updates(token, limit=limit, offset=offset, timeout=timeout)


def set_webhook(token: str, url: str, **options: Any) -> Dict[str, Any]:
    return get_default_client().set_webhook(token, url, **options)


def send_message(token: str, chat_id: ChatId, text: str, **options: Any) -> Dict[str, Any]:
    return get_default_client().send_message(token, chat_id, text, **options)


def edit_message_text(token: str, chat_id: ChatId, message_id: int, text: str, **options: Any) -> Dict[str, Any]:
    return get_default_client().edit_message_text(token, chat_id, message_id, text, **options)


def delete_message(token: str, chat_id: ChatId, message_id: int) -> Dict[str, Any]:
    return get_default_client().delete_message(token, chat_id, message_id)


def send_photo(token: str, chat_id: ChatId, photo: Any, **options: Any) -> Dict[str, Any]:
    return get_default_client().send_photo(token, chat_id, photo, **options)


def send_document(token: str, chat_id: ChatId, document: Any, **options: Any) -> Dict[str, Any]:
    return get_default_client().send_document(token, chat_id, document, **options)


def send_video(token: str, chat_id: ChatId, video: Any, **options: Any) -> Dict[str, Any]:
    return get_default_client().send_video(token, chat_id, video, **options)


def send_audio(token: str, chat_id: ChatId, audio: Any, **options: Any) -> Dict[str, Any]:
    return get_default_client().send_audio(token, chat_id, audio, **options)


def send_sticker(token: str, chat_id: ChatId, sticker: Any, **options: Any) -> Dict[str, Any]:
    return get_default_client().send_sticker(token, chat_id, sticker, **options)


def answer_inline_query(token: str, inline_query_id: str, results: List[Dict[str, Any]], **options: Any) -> Dict[str, Any]:
    return get_default_client().answer_inline_query(token, inline_query_id, results, **options)


def answer_callback_query(token: str, callback_query_id: str, text: str = "", show_alert: bool = False) -> Dict[str, Any]:
    return get_default_client().answer_callback_query(token, callback_query_id, text, show_alert)
