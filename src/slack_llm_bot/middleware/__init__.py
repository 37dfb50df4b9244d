"""Request-cycle middleware that wraps the context engine with storage."""
from __future__ import annotations

from slack_llm_bot.middleware.conversation import ConversationMiddleware, PreparedTurn

__all__ = [
    "ConversationMiddleware",
    "PreparedTurn",
]
