"""Abstract base class for conversation stores.

A store keeps one append-only message log per conversation key and hands
out oldest-first snapshots of its tail.  The context engine only ever
reads those snapshots.

Classes
-------
- ConversationStore  — abstract base for all stores
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from slack_llm_bot.conversation.message import ConversationKey, Message, Role

MILLIS_PER_DAY: int = 24 * 60 * 60 * 1000


class ConversationStore(ABC):
    """Contract for reading and writing per-conversation message logs.

    Stores must be safe for sequential (single-threaded) use.  Ordering
    an append against a later read for the same conversation is the
    caller's responsibility.
    """

    @abstractmethod
    def add_message(
        self,
        key: ConversationKey,
        role: Role | str,
        content: str,
        timestamp: int | None = None,
    ) -> Message:
        """Append a message to the log for ``key``.

        Parameters
        ----------
        key:
            Conversation the message belongs to.
        role:
            ``"user"`` or ``"assistant"``.
        content:
            Message text.
        timestamp:
            Epoch milliseconds.  Defaults to the current time.

        Returns
        -------
        Message
            The stored message.
        """

    @abstractmethod
    def get_history(self, key: ConversationKey, limit: int = 10) -> list[Message]:
        """Return the most recent ``limit`` messages for ``key``, oldest first.

        Returns an empty list for an unknown key.
        """

    @abstractmethod
    def clear_history(self, key: ConversationKey) -> bool:
        """Delete every message for ``key``.

        Returns
        -------
        bool
            True if at least one message was removed.
        """

    @abstractmethod
    def count_messages(self, key: ConversationKey) -> int:
        """Return the number of stored messages for ``key``."""

    @abstractmethod
    def cleanup_older_than(self, days: int = 30, now: int | None = None) -> int:
        """Delete messages older than ``days`` across all conversations.

        Parameters
        ----------
        days:
            Retention window in days.
        now:
            Reference time in epoch milliseconds.  Defaults to the current
            time.

        Returns
        -------
        int
            Number of messages deleted.
        """

    @abstractmethod
    def keys(self) -> list[ConversationKey]:
        """Return every conversation key that currently has messages."""
