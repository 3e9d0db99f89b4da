"""Pydantic request and response schemas for the Bot API methods we wrap.

Request models validate parameters before any I/O happens and render the
wire payload with :meth:`RequestModel.payload`.  Unknown keyword options are
kept (``extra="allow"``) so callers can pass newer Bot API parameters
without waiting for a schema update.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict

ChatId = Union[int, str]
ParseMode = Literal["Markdown", "HTML"]


class RequestModel(BaseModel):
    """Base class for outbound request bodies."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def payload(self) -> Dict[str, Any]:
        """Return the JSON body, dropping parameters left unset."""
        return self.model_dump(by_alias=True, exclude_none=True)


class GetMe(RequestModel):
    """``getMe`` takes no parameters."""

    model_config = ConfigDict(extra="forbid")


class GetUpdates(RequestModel):
    """Long-polling query; defaults match what the client always sends."""

    timeout: int = 1
    offset: int = 0
    limit: int = 100


class SendMessage(RequestModel):
    """Use this method to send text messages."""

    chat_id: ChatId
    text: str
    parse_mode: Optional[ParseMode] = None
    disable_web_page_preview: Optional[bool] = None


class EditMessageText(RequestModel):
    """Use this method to edit text messages sent by the bot."""

    chat_id: ChatId
    message_id: int
    text: str
    parse_mode: Optional[ParseMode] = None
    disable_web_page_preview: Optional[bool] = None


class DeleteMessage(RequestModel):
    chat_id: ChatId
    message_id: int


class AnswerInlineQuery(RequestModel):
    """Use this method to send answers to an inline query."""

    inline_query_id: str
    results: List[Dict[str, Any]]


class AnswerCallbackQuery(RequestModel):
    """Use this method to answer callback queries sent from inline keyboards.

    ``text`` and ``show_alert`` are always sent so the spinner is cleared
    even when the caller has nothing to say.
    """

    callback_query_id: str
    text: str = ""
    show_alert: bool = False


class ApiResponse(BaseModel):
    """Envelope every Bot API reply is wrapped in."""

    ok: bool
    result: Any = None
    description: Optional[str] = None
    error_code: Optional[int] = None

    model_config = ConfigDict(extra="allow")
