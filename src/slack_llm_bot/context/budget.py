"""Character-budget trimming of a selected message sequence.

Messages are kept newest-first until the budget is spent, so the result
is always a contiguous suffix of the input.  The budget is soft: the
newest message is kept even when it alone is over budget.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from slack_llm_bot.conversation.message import Message

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_OVERHEAD: int = 30


def message_cost(message: Message, overhead: int = DEFAULT_MESSAGE_OVERHEAD) -> int:
    """Budget cost of one message: its content length plus formatting overhead."""
    return len(message.content) + overhead


def truncate_to_budget(
    messages: Sequence[Message],
    max_chars: int,
    overhead: int = DEFAULT_MESSAGE_OVERHEAD,
) -> list[Message]:
    """Drop the oldest messages until the rest fit in ``max_chars``.

    Parameters
    ----------
    messages:
        Chronologically ordered messages.
    max_chars:
        Character budget, overhead included.
    overhead:
        Fixed per-message cost added to each content length.

    Returns
    -------
    list[Message]
        The longest newest suffix that fits, in chronological order.
        Never empty when ``messages`` is non-empty.
    """
    total = 0
    kept = 0
    for message in reversed(messages):
        cost = message_cost(message, overhead)
        if kept and total + cost > max_chars:
            logger.debug("Truncated at %d messages (%d chars)", kept, total)
            break
        total += cost
        kept += 1

    return list(messages[len(messages) - kept:])
