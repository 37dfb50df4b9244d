"""Tests for the conversation domain models."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from slack_llm_bot.conversation.message import (
    ConversationKey,
    Message,
    Role,
    ScoredMessage,
    now_millis,
)


class TestRole:
    def test_values(self) -> None:
        assert Role("user") is Role.USER
        assert Role("assistant") is Role.ASSISTANT

    def test_labels(self) -> None:
        assert Role.USER.label == "User"
        assert Role.ASSISTANT.label == "Assistant"

    def test_unknown_role_rejected(self) -> None:
        with pytest.raises(ValueError):
            Role("system")


class TestMessage:
    def test_role_coerced_from_string(self) -> None:
        message = Message(role="assistant", content="hi", timestamp=1)
        assert message.role is Role.ASSISTANT

    def test_frozen(self) -> None:
        message = Message(role=Role.USER, content="hi", timestamp=1)
        with pytest.raises(ValidationError):
            message.content = "changed"  # type: ignore[misc]

    def test_negative_timestamp_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Message(role=Role.USER, content="hi", timestamp=-1)

    def test_invalid_role_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Message(role="system", content="hi", timestamp=1)  # type: ignore[arg-type]

    def test_now_stamps_current_time(self) -> None:
        before = now_millis()
        message = Message.now("user", "hello")
        assert before <= message.timestamp <= now_millis()

    def test_hashable(self) -> None:
        message = Message(role=Role.USER, content="hi", timestamp=1)
        assert message in {message}


class TestConversationKey:
    def test_str(self) -> None:
        assert str(ConversationKey(user_id="U1", channel_id="C1")) == "U1:C1"

    def test_usable_as_dict_key(self) -> None:
        key = ConversationKey(user_id="U1", channel_id="C1")
        assert {key: 1}[ConversationKey(user_id="U1", channel_id="C1")] == 1

    def test_empty_ids_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ConversationKey(user_id="", channel_id="C1")


class TestScoredMessage:
    def test_score_bounds(self) -> None:
        message = Message(role=Role.USER, content="hi", timestamp=1)
        with pytest.raises(ValidationError):
            ScoredMessage(message=message, score=1.5)
