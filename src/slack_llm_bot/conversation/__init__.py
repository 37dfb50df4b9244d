"""Conversation domain models and serialization."""
from __future__ import annotations

from slack_llm_bot.conversation.message import (
    ConversationKey,
    Message,
    Role,
    ScoredMessage,
    now_millis,
)
from slack_llm_bot.conversation.serializer import HistorySerializer, SchemaVersionError

__all__ = [
    "ConversationKey",
    "HistorySerializer",
    "Message",
    "Role",
    "SchemaVersionError",
    "ScoredMessage",
    "now_millis",
]
