"""Tests for the webhook update adapter and chat resolution."""

import io
import json

import pytest

from core.identity import get_chat_id, get_message
from sdk.exceptions import DecodingError
from webhook.adapter import WebRequest, adapt


def command_message(command: str) -> dict:
    return {"text": f"/{command}", "chat": {"id": "fake-chat-id"}}


# ── adapt ────────────────────────────────────────────────────────────────────


class TestAdapt:
    """The webhook body must decode to the polling shape."""

    def test_matches_polled_update(self) -> None:
        polled = {"update_id": 10, "message": command_message("start")}
        request = WebRequest(body=json.dumps(polled))
        assert adapt(request) == polled

    def test_bytes_body(self) -> None:
        request = WebRequest(body='{"message":{"text":"/start","chat":{"id":"fake-chat-id"}}}'.encode())
        assert adapt(request) == {"message": command_message("start")}

    def test_mapping_request(self) -> None:
        assert adapt({"body": '{"message": {"text": "/start"}}'}) == {"message": {"text": "/start"}}

    def test_object_with_body_attribute(self) -> None:
        class Req:
            body = '{"inline_query": {"id": "1", "query": "cats"}}'

        assert adapt(Req())["inline_query"]["query"] == "cats"

    def test_stream_body(self) -> None:
        assert adapt(WebRequest(body=io.BytesIO(b'{"update_id": 1}'))) == {"update_id": 1}  # type: ignore[arg-type]

    def test_idempotent(self) -> None:
        request = WebRequest(body='{"callback_query": {"id": "cb", "data": "x"}}')
        first = adapt(request)
        second = adapt(request)
        assert first == second
        assert first is not second

    @pytest.mark.parametrize("body", [
        '{"message": ',
        "not json at all",
        "",
        b"\xff\xfe\x00",
    ])
    def test_invalid_body(self, body) -> None:
        with pytest.raises(DecodingError):
            adapt(WebRequest(body=body))

    @pytest.mark.parametrize("body", ["[]", "42", '"text"', "null"])
    def test_non_object_json(self, body) -> None:
        with pytest.raises(DecodingError, match="JSON object"):
            adapt(WebRequest(body=body))

    def test_missing_body(self) -> None:
        with pytest.raises(DecodingError):
            adapt({"headers": {}})
        with pytest.raises(DecodingError):
            adapt(object())

    def test_decoding_error_keeps_cause(self) -> None:
        with pytest.raises(DecodingError) as exc_info:
            adapt(WebRequest(body="{bad"))
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)


# ── chat resolution ──────────────────────────────────────────────────────────


class TestChatResolution:

    def test_message(self) -> None:
        assert get_chat_id({"message": command_message("start")}) == "fake-chat-id"

    def test_edited_message_and_channel_post(self) -> None:
        assert get_chat_id({"edited_message": {"chat": {"id": 5}}}) == 5
        assert get_chat_id({"channel_post": {"chat": {"id": -100}}}) == -100

    def test_callback_query_uses_carrier_message(self) -> None:
        update = {"callback_query": {"id": "cb", "data": "x", "message": {"chat": {"id": 77}}}}
        assert get_chat_id(update) == 77

    def test_inline_query_has_no_chat(self) -> None:
        assert get_chat_id({"inline_query": {"id": "1", "query": "q"}}) is None

    def test_message_without_chat(self) -> None:
        assert get_chat_id({"message": {"text": "/start"}}) is None

    def test_get_message_order(self) -> None:
        update = {"edited_message": {"text": "b"}, "message": {"text": "a"}}
        assert get_message(update) == {"text": "a"}
        assert get_message({"poll": {}}) is None
