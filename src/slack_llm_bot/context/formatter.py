"""Render selected messages as a context block for any LLM backend."""
from __future__ import annotations

from collections.abc import Sequence

from slack_llm_bot.conversation.message import Message

CONTEXT_HEADER = "Conversation context:"
CONTEXT_SEPARATOR = "---"
RECENT_MARKER = "→"
OLDER_MARKER = "•"


def format_context(messages: Sequence[Message], recent_count: int) -> str:
    """Format ``messages`` as ``<marker> <Role>: <content>`` lines.

    The last ``recent_count`` lines carry the recency arrow; earlier lines
    get a bullet.  Returns an empty string when there is nothing to show.
    """
    if not messages:
        return ""

    first_recent = len(messages) - recent_count
    lines = [f"{CONTEXT_HEADER}\n"]
    for index, message in enumerate(messages):
        marker = RECENT_MARKER if index >= first_recent else OLDER_MARKER
        lines.append(f"{marker} {message.role.label}: {message.content}")
    return "\n".join(lines) + f"\n\n{CONTEXT_SEPARATOR}\n\n"
