"""Conversation domain models.

All types are frozen Pydantic models: a message never changes after the
conversation store has produced it.

Classes
-------
- Role             — message author enum
- Message          — one conversation turn
- ConversationKey  — (user_id, channel_id) pair identifying a history
- ScoredMessage    — a message paired with a transient relevance score
"""
from __future__ import annotations

import time
from enum import Enum

from pydantic import BaseModel, Field


def now_millis() -> int:
    """Return the current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


class Role(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"

    @property
    def label(self) -> str:
        """Human-readable label used when rendering context blocks."""
        return "User" if self is Role.USER else "Assistant"


class Message(BaseModel):
    """A single conversation turn.

    Parameters
    ----------
    role:
        Who wrote the message.
    content:
        Raw message text.
    timestamp:
        Epoch milliseconds.  Monotonic within one conversation.
    """

    role: Role
    content: str
    timestamp: int = Field(ge=0)

    model_config = {"frozen": True}

    @classmethod
    def now(cls, role: Role | str, content: str) -> Message:
        """Create a message stamped with the current time."""
        return cls(role=Role(role), content=content, timestamp=now_millis())


class ConversationKey(BaseModel):
    """Identifies one linear message history (a user within a channel)."""

    user_id: str = Field(min_length=1)
    channel_id: str = Field(min_length=1)

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.user_id}:{self.channel_id}"


class ScoredMessage(BaseModel):
    """A message and its relevance to the current prompt."""

    message: Message
    score: float = Field(ge=0.0, le=1.0)

    model_config = {"frozen": True}
