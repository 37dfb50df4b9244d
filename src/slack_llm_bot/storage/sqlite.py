"""SQLite conversation store.

Stores every message as one row in a local SQLite database using the
standard library ``sqlite3`` module.

Classes
-------
- SQLiteStore  — SQLite-backed conversation storage
"""
from __future__ import annotations

import sqlite3
from pathlib import Path

from slack_llm_bot.conversation.message import ConversationKey, Message, Role, now_millis
from slack_llm_bot.storage.base import MILLIS_PER_DAY, ConversationStore

_DEFAULT_DB_PATH: Path = Path("db") / "conversations.db"
_CREATE_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS messages (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id    TEXT NOT NULL,
    channel_id TEXT NOT NULL,
    role       TEXT NOT NULL CHECK(role IN ('user', 'assistant')),
    content    TEXT NOT NULL,
    timestamp  INTEGER NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_user_channel
ON messages(user_id, channel_id, timestamp);
CREATE INDEX IF NOT EXISTS idx_timestamp
ON messages(timestamp);
"""
_INSERT_SQL = """
INSERT INTO messages (user_id, channel_id, role, content, timestamp)
VALUES (?, ?, ?, ?, ?)
"""
_HISTORY_SQL = """
SELECT role, content, timestamp
FROM messages
WHERE user_id = ? AND channel_id = ?
ORDER BY timestamp DESC, id DESC
LIMIT ?
"""


class SQLiteStore(ConversationStore):
    """Persists conversation messages in a local SQLite database.

    Parameters
    ----------
    db_path:
        Path to the SQLite file.  Defaults to ``db/conversations.db``
        relative to the working directory.  The parent directory and the
        schema are created automatically on first use.
    """

    def __init__(self, db_path: str | Path | None = None) -> None:
        self._db_path: Path = Path(db_path) if db_path is not None else _DEFAULT_DB_PATH

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get_connection(self) -> sqlite3.Connection:
        """Open a connection and ensure the schema exists."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.executescript(_CREATE_SCHEMA_SQL)
        return conn

    # ------------------------------------------------------------------
    # ConversationStore interface
    # ------------------------------------------------------------------

    def add_message(
        self,
        key: ConversationKey,
        role: Role | str,
        content: str,
        timestamp: int | None = None,
    ) -> Message:
        """Insert one message row."""
        message = Message(
            role=Role(role),
            content=content,
            timestamp=now_millis() if timestamp is None else timestamp,
        )
        conn = self._get_connection()
        try:
            with conn:
                conn.execute(
                    _INSERT_SQL,
                    (key.user_id, key.channel_id, message.role.value, message.content, message.timestamp),
                )
        finally:
            conn.close()
        return message

    def get_history(self, key: ConversationKey, limit: int = 10) -> list[Message]:
        """Return the newest ``limit`` rows for ``key``, oldest first.

        Raises
        ------
        pydantic.ValidationError
            If a stored row does not form a valid message.
        """
        if limit <= 0:
            return []
        conn = self._get_connection()
        try:
            rows = conn.execute(_HISTORY_SQL, (key.user_id, key.channel_id, limit)).fetchall()
        finally:
            conn.close()
        return [
            Message(role=row["role"], content=row["content"], timestamp=row["timestamp"])
            for row in reversed(rows)
        ]

    def clear_history(self, key: ConversationKey) -> bool:
        """Delete all rows for ``key``."""
        conn = self._get_connection()
        try:
            with conn:
                cursor = conn.execute(
                    "DELETE FROM messages WHERE user_id = ? AND channel_id = ?",
                    (key.user_id, key.channel_id),
                )
        finally:
            conn.close()
        return cursor.rowcount > 0

    def count_messages(self, key: ConversationKey) -> int:
        """Return the row count for ``key``."""
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT COUNT(*) AS count FROM messages WHERE user_id = ? AND channel_id = ?",
                (key.user_id, key.channel_id),
            ).fetchone()
        finally:
            conn.close()
        return int(row["count"])

    def cleanup_older_than(self, days: int = 30, now: int | None = None) -> int:
        """Delete rows whose timestamp falls before the retention window."""
        cutoff = (now_millis() if now is None else now) - days * MILLIS_PER_DAY
        conn = self._get_connection()
        try:
            with conn:
                cursor = conn.execute("DELETE FROM messages WHERE timestamp < ?", (cutoff,))
        finally:
            conn.close()
        return cursor.rowcount

    def keys(self) -> list[ConversationKey]:
        """Return every conversation key that has stored messages."""
        conn = self._get_connection()
        try:
            rows = conn.execute(
                "SELECT DISTINCT user_id, channel_id FROM messages ORDER BY user_id, channel_id"
            ).fetchall()
        finally:
            conn.close()
        return [ConversationKey(user_id=row["user_id"], channel_id=row["channel_id"]) for row in rows]

    def __repr__(self) -> str:
        return f"SQLiteStore(db_path={str(self._db_path)!r})"
