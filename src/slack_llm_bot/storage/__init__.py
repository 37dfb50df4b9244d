"""Conversation store subpackage.

All stores implement the ``ConversationStore`` ABC.

Public surface
--------------
- ConversationStore  — abstract base class
- InMemoryStore      — in-process dict of message lists (useful for testing)
- SQLiteStore        — persist messages in a local SQLite database
"""
from __future__ import annotations

from slack_llm_bot.storage.base import ConversationStore
from slack_llm_bot.storage.memory import InMemoryStore
from slack_llm_bot.storage.sqlite import SQLiteStore

__all__ = [
    "ConversationStore",
    "InMemoryStore",
    "SQLiteStore",
]
