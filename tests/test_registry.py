"""Tests for the handler registry."""

import pytest

from webhook.registry import HandlerEntry, HandlerRegistry, parse_command


def _message_update(text: str, chat_id: int = 1000) -> dict:
    return {"update_id": 1, "message": {"message_id": 1, "chat": {"id": chat_id, "type": "private"}, "text": text}}


class TestParseCommand:

    @pytest.mark.parametrize("text, expected", [
        ("/start", "start"),
        ("/start@wirebot_bot", "start"),
        ("/Start now please", "start"),
        ("/help@bot arg", "help"),
        ("hello", None),
        ("", None),
        (None, None),
        ("/", None),
    ])
    def test_parse(self, text, expected) -> None:
        assert parse_command(text) == expected


class TestRegistration:

    def test_command_decorator_returns_function(self) -> None:
        registry = HandlerRegistry()

        @registry.command("/start", description="Say hello")
        def start(message: dict) -> str:
            return "hi"

        assert start({"text": "/start"}) == "hi"
        assert registry.commands() == {"/start": "Say hello"}

    def test_entries_is_a_copy(self) -> None:
        registry = HandlerRegistry()
        registry.message()(lambda m: None)
        entries = registry.entries()
        entries.clear()
        assert len(registry.entries()) == 1

    def test_registries_are_independent(self) -> None:
        first, second = HandlerRegistry(), HandlerRegistry()
        first.command("start")(lambda m: "x")
        assert second.entries() == []


class TestRouting:

    def test_command_receives_message(self) -> None:
        registry = HandlerRegistry()
        seen = []
        registry.command("start")(lambda message: seen.append(message) or "ok")

        update = _message_update("/start@wirebot_bot")
        assert registry(update) == "ok"
        assert seen == [update["message"]]

    def test_unmatched_command_returns_none(self) -> None:
        registry = HandlerRegistry()
        registry.command("start")(lambda m: "ok")
        assert registry(_message_update("/stop")) is None
        assert registry(_message_update("start")) is None

    def test_first_non_none_wins(self) -> None:
        registry = HandlerRegistry()
        registry.message()(lambda m: None)
        registry.command("start")(lambda m: "from command")
        registry.message()(lambda m: "from catch-all")

        assert registry(_message_update("/start")) == "from command"
        assert registry(_message_update("plain text")) == "from catch-all"

    def test_structured_results_stop_the_chain(self) -> None:
        registry = HandlerRegistry()
        registry.message()(lambda m: {})
        registry.message()(lambda m: "never")
        assert registry(_message_update("x")) == {}

    def test_callback_and_inline_queries(self) -> None:
        registry = HandlerRegistry()
        registry.callback_query()(lambda cq: f"pressed {cq['data']}")
        registry.inline_query()(lambda iq: [iq["query"]])

        assert registry({"callback_query": {"id": "c", "data": "yes"}}) == "pressed yes"
        assert registry({"inline_query": {"id": "i", "query": "cats"}}) == ["cats"]
        assert registry({"poll": {"id": "p"}}) is None

    def test_command_ignores_edited_messages(self) -> None:
        registry = HandlerRegistry()
        registry.command("start")(lambda m: "ok")
        assert registry({"edited_message": {"text": "/start", "chat": {"id": 1}}}) is None

    def test_entry_select(self) -> None:
        entry = HandlerEntry(kind="callback_query", handler=lambda cq: None)
        assert entry.select({"callback_query": {"id": "1"}}) == {"id": "1"}
        assert entry.select({"message": {"text": "x"}}) is None
