"""Tests for the conversation store backends."""
from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from slack_llm_bot.conversation.message import ConversationKey, Message, Role
from slack_llm_bot.storage.base import MILLIS_PER_DAY, ConversationStore
from slack_llm_bot.storage.memory import InMemoryStore
from slack_llm_bot.storage.sqlite import SQLiteStore


KEY = ConversationKey(user_id="U1", channel_id="C1")
OTHER = ConversationKey(user_id="U2", channel_id="C1")


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> ConversationStore:
    if request.param == "memory":
        return InMemoryStore()
    return SQLiteStore(tmp_path / "db" / "conversations.db")


# ---------------------------------------------------------------------------
# Shared contract
# ---------------------------------------------------------------------------


class TestConversationStoreContract:
    def test_unknown_key_has_empty_history(self, store: ConversationStore) -> None:
        assert store.get_history(KEY) == []
        assert store.count_messages(KEY) == 0

    def test_add_returns_stored_message(self, store: ConversationStore) -> None:
        message = store.add_message(KEY, "user", "hello", timestamp=100)
        assert message == Message(role=Role.USER, content="hello", timestamp=100)

    def test_add_defaults_timestamp(self, store: ConversationStore) -> None:
        message = store.add_message(KEY, Role.ASSISTANT, "hi")
        assert message.timestamp > 0

    def test_history_oldest_first(self, store: ConversationStore) -> None:
        for i in range(3):
            store.add_message(KEY, "user", f"m{i}", timestamp=i)
        assert [m.content for m in store.get_history(KEY)] == ["m0", "m1", "m2"]

    def test_history_limit_keeps_newest(self, store: ConversationStore) -> None:
        for i in range(10):
            store.add_message(KEY, "user", f"m{i}", timestamp=i)
        assert [m.content for m in store.get_history(KEY, limit=3)] == ["m7", "m8", "m9"]

    def test_non_positive_limit_returns_empty(self, store: ConversationStore) -> None:
        store.add_message(KEY, "user", "hello", timestamp=1)
        assert store.get_history(KEY, limit=0) == []

    def test_equal_timestamps_keep_insertion_order(self, store: ConversationStore) -> None:
        store.add_message(KEY, "user", "first", timestamp=5)
        store.add_message(KEY, "assistant", "second", timestamp=5)
        assert [m.content for m in store.get_history(KEY)] == ["first", "second"]

    def test_conversations_are_isolated(self, store: ConversationStore) -> None:
        store.add_message(KEY, "user", "mine", timestamp=1)
        store.add_message(OTHER, "user", "theirs", timestamp=2)
        assert [m.content for m in store.get_history(KEY)] == ["mine"]
        assert store.count_messages(OTHER) == 1

    def test_clear_history(self, store: ConversationStore) -> None:
        store.add_message(KEY, "user", "hello", timestamp=1)
        assert store.clear_history(KEY) is True
        assert store.count_messages(KEY) == 0
        assert store.clear_history(KEY) is False

    def test_cleanup_older_than(self, store: ConversationStore) -> None:
        now = 100 * MILLIS_PER_DAY
        store.add_message(KEY, "user", "ancient", timestamp=now - 40 * MILLIS_PER_DAY)
        store.add_message(KEY, "user", "recent", timestamp=now - 1 * MILLIS_PER_DAY)
        store.add_message(OTHER, "user", "stale", timestamp=now - 31 * MILLIS_PER_DAY)
        assert store.cleanup_older_than(30, now=now) == 2
        assert [m.content for m in store.get_history(KEY)] == ["recent"]
        assert store.keys() == [KEY]

    def test_keys(self, store: ConversationStore) -> None:
        store.add_message(KEY, "user", "a", timestamp=1)
        store.add_message(OTHER, "user", "b", timestamp=2)
        assert set(store.keys()) == {KEY, OTHER}

    def test_invalid_role_rejected(self, store: ConversationStore) -> None:
        with pytest.raises(ValueError):
            store.add_message(KEY, "system", "nope")


# ---------------------------------------------------------------------------
# InMemoryStore specifics
# ---------------------------------------------------------------------------


class TestInMemoryStore:
    def test_out_of_order_append_is_resorted(self) -> None:
        store = InMemoryStore()
        store.add_message(KEY, "user", "later", timestamp=20)
        store.add_message(KEY, "user", "earlier", timestamp=10)
        assert [m.content for m in store.get_history(KEY)] == ["earlier", "later"]

    def test_history_is_a_snapshot(self) -> None:
        store = InMemoryStore()
        store.add_message(KEY, "user", "a", timestamp=1)
        snapshot = store.get_history(KEY)
        store.add_message(KEY, "user", "b", timestamp=2)
        assert len(snapshot) == 1

    def test_len_and_clear(self) -> None:
        store = InMemoryStore()
        store.add_message(KEY, "user", "a", timestamp=1)
        store.add_message(OTHER, "user", "b", timestamp=2)
        assert len(store) == 2
        store.clear()
        assert len(store) == 0
        assert "messages=0" in repr(store)


# ---------------------------------------------------------------------------
# SQLiteStore specifics
# ---------------------------------------------------------------------------


class TestSQLiteStore:
    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "dir" / "bot.db"
        SQLiteStore(db_path).add_message(KEY, "user", "hello", timestamp=1)
        assert db_path.exists()

    def test_data_survives_new_instance(self, tmp_path: Path) -> None:
        db_path = tmp_path / "bot.db"
        SQLiteStore(db_path).add_message(KEY, "user", "persisted", timestamp=1)
        assert [m.content for m in SQLiteStore(db_path).get_history(KEY)] == ["persisted"]

    def test_schema_rejects_unknown_role(self, tmp_path: Path) -> None:
        db_path = tmp_path / "bot.db"
        SQLiteStore(db_path).count_messages(KEY)
        conn = sqlite3.connect(str(db_path))
        try:
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute(
                    "INSERT INTO messages (user_id, channel_id, role, content, timestamp) "
                    "VALUES ('U1', 'C1', 'system', 'x', 1)"
                )
        finally:
            conn.close()

    def test_repr(self, tmp_path: Path) -> None:
        assert "bot.db" in repr(SQLiteStore(tmp_path / "bot.db"))
