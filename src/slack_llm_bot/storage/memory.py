"""In-memory conversation store.

Keeps each conversation as a plain Python list.  All data is lost when
the process exits; useful for tests and local prototyping.

Classes
-------
- InMemoryStore  — dict-of-lists ephemeral storage
"""
from __future__ import annotations

from slack_llm_bot.conversation.message import ConversationKey, Message, Role, now_millis
from slack_llm_bot.storage.base import MILLIS_PER_DAY, ConversationStore


class InMemoryStore(ConversationStore):
    """Ephemeral, in-process conversation store."""

    def __init__(self) -> None:
        self._logs: dict[ConversationKey, list[Message]] = {}

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
        """Append a message to the list for ``key``."""
        message = Message(
            role=Role(role),
            content=content,
            timestamp=now_millis() if timestamp is None else timestamp,
        )
        log = self._logs.setdefault(key, [])
        log.append(message)
        # Out-of-order timestamps are rare; a stable sort keeps equal ones in
        # insertion order.
        if len(log) > 1 and log[-2].timestamp > message.timestamp:
            log.sort(key=lambda m: m.timestamp)
        return message

    def get_history(self, key: ConversationKey, limit: int = 10) -> list[Message]:
        """Return the last ``limit`` messages for ``key``, oldest first."""
        if limit <= 0:
            return []
        return list(self._logs.get(key, [])[-limit:])

    def clear_history(self, key: ConversationKey) -> bool:
        """Drop the list for ``key``."""
        return bool(self._logs.pop(key, None))

    def count_messages(self, key: ConversationKey) -> int:
        """Return the list length for ``key``."""
        return len(self._logs.get(key, []))

    def cleanup_older_than(self, days: int = 30, now: int | None = None) -> int:
        """Remove messages older than the retention window from every list."""
        cutoff = (now_millis() if now is None else now) - days * MILLIS_PER_DAY
        deleted = 0
        for key in list(self._logs):
            kept = [m for m in self._logs[key] if m.timestamp >= cutoff]
            deleted += len(self._logs[key]) - len(kept)
            if kept:
                self._logs[key] = kept
            else:
                del self._logs[key]
        return deleted

    def keys(self) -> list[ConversationKey]:
        """Return every conversation key in insertion order."""
        return list(self._logs)

    # ------------------------------------------------------------------
    # Extras
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Remove every conversation."""
        self._logs.clear()

    def __len__(self) -> int:
        return sum(len(log) for log in self._logs.values())

    def __repr__(self) -> str:
        return f"InMemoryStore(conversations={len(self._logs)}, messages={len(self)})"
