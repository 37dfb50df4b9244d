"""Diagnostics describing what the context pipeline would send.

Classes
-------
- ContextStats  — counts and budget utilisation for one prompt
"""
from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel

from slack_llm_bot.config import ContextConfig
from slack_llm_bot.context.budget import truncate_to_budget
from slack_llm_bot.context.selector import select_messages
from slack_llm_bot.conversation.message import Message


class ContextStats(BaseModel):
    """Summary of one context-selection run.

    Parameters
    ----------
    total_messages:
        Size of the history passed in.
    relevant_messages:
        Messages chosen by the selector (recent window plus relevant older).
    included_messages:
        Messages left after budgeting.
    total_chars:
        Sum of content lengths after budgeting, without formatting overhead.
    utilization_percent:
        ``total_chars`` as a percentage of ``max_context_chars``, rounded to
        one decimal place.
    """

    total_messages: int
    relevant_messages: int
    included_messages: int
    total_chars: int
    utilization_percent: float

    model_config = {"frozen": True}


def compute_stats(
    history: Sequence[Message],
    prompt: str,
    config: ContextConfig,
) -> ContextStats:
    """Run selection and budgeting and report what they produced."""
    selected = select_messages(history, prompt, config)
    included = truncate_to_budget(selected, config.max_context_chars, config.message_overhead)
    total_chars = sum(len(message.content) for message in included)
    return ContextStats(
        total_messages=len(history),
        relevant_messages=len(selected),
        included_messages=len(included),
        total_chars=total_chars,
        utilization_percent=round(total_chars / config.max_context_chars * 100, 1),
    )
