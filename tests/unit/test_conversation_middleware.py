"""Tests for ConversationMiddleware."""
from __future__ import annotations

import logging

import pytest

from slack_llm_bot.config import ContextConfig, StoreConfig
from slack_llm_bot.context import builder as builder_module
from slack_llm_bot.context import stats as stats_module
from slack_llm_bot.context.builder import ContextBuilder
from slack_llm_bot.conversation.message import ConversationKey, Role
from slack_llm_bot.middleware.conversation import ConversationMiddleware
from slack_llm_bot.storage.memory import InMemoryStore

KEY = ConversationKey(user_id="U1", channel_id="C1")


@pytest.fixture()
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture()
def middleware(store: InMemoryStore) -> ConversationMiddleware:
    return ConversationMiddleware(store)


class TestConversationMiddleware:
    def test_invalid_history_limit(self, store: InMemoryStore) -> None:
        with pytest.raises(ValueError, match="history_limit"):
            ConversationMiddleware(store, history_limit=0)

    def test_first_turn_has_no_context(self, middleware: ConversationMiddleware) -> None:
        turn = middleware.before_request(KEY, "hello there")
        assert turn.history == []
        assert turn.prompt == (
            "Current message: hello there\n\nProvide a helpful, concise response:"
        )
        assert turn.stats.total_messages == 0

    def test_user_turn_recorded(
        self, middleware: ConversationMiddleware, store: InMemoryStore
    ) -> None:
        middleware.before_request(KEY, "hello there")
        history = store.get_history(KEY)
        assert [(m.role, m.content) for m in history] == [(Role.USER, "hello there")]

    def test_current_text_not_in_its_own_context(
        self, middleware: ConversationMiddleware
    ) -> None:
        turn = middleware.before_request(KEY, "unique sentence")
        assert "Conversation context" not in turn.prompt

    def test_full_cycle_builds_context(self, middleware: ConversationMiddleware) -> None:
        middleware.before_request(KEY, "tell me about pizza dough")
        middleware.after_request(KEY, "Pizza dough needs flour, water and yeast")
        turn = middleware.before_request(KEY, "more about dough")
        assert len(turn.history) == 2
        assert turn.prompt.startswith("Conversation context:\n\n")
        assert "→ Assistant: Pizza dough needs flour, water and yeast" in turn.prompt
        assert turn.prompt.endswith(
            "Current message: more about dough\n\nProvide a helpful, concise response:"
        )

    def test_options_stripped_from_prompt(self, middleware: ConversationMiddleware) -> None:
        turn = middleware.before_request(KEY, '"good morning" --to es-ES')
        assert turn.command.target_language == "es-ES"
        assert "Current message: good morning\n" in turn.prompt
        assert "--to" not in turn.prompt

    def test_history_limit_applied(self, store: InMemoryStore) -> None:
        for i in range(5):
            store.add_message(KEY, "user", f"m{i}", timestamp=i)
        middleware = ConversationMiddleware(store, history_limit=2)
        turn = middleware.before_request(KEY, "next")
        assert [m.content for m in turn.history] == ["m3", "m4"]

    def test_custom_builder(self, store: InMemoryStore) -> None:
        builder = ContextBuilder(ContextConfig(min_recent_messages=1))
        middleware = ConversationMiddleware(store, builder=builder)
        assert middleware.builder is builder

    def test_after_request_returns_message(self, middleware: ConversationMiddleware) -> None:
        message = middleware.after_request(KEY, "answer")
        assert message.role is Role.ASSISTANT
        assert message.content == "answer"

    def test_reset(self, middleware: ConversationMiddleware, store: InMemoryStore) -> None:
        middleware.before_request(KEY, "hello")
        assert middleware.reset(KEY) is True
        assert store.count_messages(KEY) == 0
        assert middleware.reset(KEY) is False

    def test_stats_logged(
        self, middleware: ConversationMiddleware, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="slack_llm_bot.middleware.conversation"):
            middleware.before_request(KEY, "hello")
        assert "Context stats for U1:C1" in caplog.text

    def test_command_options_logged(
        self, middleware: ConversationMiddleware, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="slack_llm_bot.middleware.conversation"):
            middleware.before_request(KEY, "hola --to es-ES --tone formal")
        assert "to=es-ES tone=formal" in caplog.text


class TestConversationMiddlewareFromConfig:
    def test_history_limit_from_store_config(self, store: InMemoryStore) -> None:
        middleware = ConversationMiddleware.from_config(
            store, StoreConfig(history_limit=7), ContextConfig(min_recent_messages=2)
        )
        assert middleware.history_limit == 7
        assert middleware.builder.config.min_recent_messages == 2

    def test_reads_environment(
        self, store: InMemoryStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HISTORY_LIMIT", "12")
        monkeypatch.setenv("MAX_CONTEXT_CHARS", "900")
        middleware = ConversationMiddleware.from_config(store)
        assert middleware.history_limit == 12
        assert middleware.builder.config.max_context_chars == 900


class TestContextFailure:
    @pytest.fixture()
    def broken_selector(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _boom(*_args: object) -> list[object]:
            raise RuntimeError("selector failed")

        monkeypatch.setattr(stats_module, "select_messages", _boom)
        monkeypatch.setattr(builder_module, "select_messages", _boom)

    @pytest.mark.usefixtures("broken_selector")
    def test_request_continues_without_context(
        self,
        middleware: ConversationMiddleware,
        store: InMemoryStore,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        store.add_message(KEY, "user", "earlier pizza question", timestamp=1)
        with caplog.at_level(logging.ERROR):
            turn = middleware.before_request(KEY, "pizza dough")
        assert turn.prompt == (
            "Current message: pizza dough\n\nProvide a helpful, concise response:"
        )
        assert turn.stats.total_messages == 1
        assert turn.stats.included_messages == 0
        assert "Context stats failed" in caplog.text
        assert [m.content for m in store.get_history(KEY)] == [
            "earlier pizza question",
            "pizza dough",
        ]
