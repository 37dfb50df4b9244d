"""Choose which prior messages are worth sending with the next prompt.

The newest ``min_recent_messages`` are always kept.  Older messages are
pulled in only when they share enough keywords with the prompt, up to
``max_relevant_older`` of them.  The result is always chronological.

A prompt with no keywords selects only the recent window.  This holds
even with ``relevance_threshold=0``, where a plain threshold filter would
admit every older message at score 0.0; that case is excluded on purpose.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from slack_llm_bot.config import ContextConfig
from slack_llm_bot.context.keywords import extract_keywords
from slack_llm_bot.context.relevance import RelevanceScorer
from slack_llm_bot.conversation.message import Message

logger = logging.getLogger(__name__)


def split_recent(
    history: Sequence[Message], recent_count: int
) -> tuple[list[Message], list[Message]]:
    """Split ``history`` into ``(older, recent)`` around the last
    ``recent_count`` entries."""
    if len(history) <= recent_count:
        return [], list(history)
    cut = len(history) - recent_count
    return list(history[:cut]), list(history[cut:])


def select_messages(
    history: Sequence[Message],
    prompt: str,
    config: ContextConfig,
) -> list[Message]:
    """Merge the recent window with the most relevant older messages.

    Parameters
    ----------
    history:
        Full conversation history, oldest first.
    prompt:
        The text about to be sent to the LLM.
    config:
        Selection settings.

    Returns
    -------
    list[Message]
        Selected messages sorted by timestamp ascending, without duplicates.
    """
    if not history:
        return []

    keywords = extract_keywords(prompt, config.min_keyword_length)
    logger.debug("Keywords extracted: %s", keywords)

    older, recent = split_recent(history, config.min_recent_messages)
    # Without keywords every older message scores 0.0; none is relevant
    # even when relevance_threshold is 0.
    if not older or not keywords:
        return recent

    scorer = RelevanceScorer(config.min_keyword_length)
    candidates = [
        scored
        for scored in scorer.score_many(older, keywords)
        if scored.score >= config.relevance_threshold
    ]
    candidates.sort(key=lambda scored: scored.score, reverse=True)
    relevant_older = [scored.message for scored in candidates[: config.max_relevant_older]]
    logger.debug("Selected %d relevant older messages", len(relevant_older))

    combined = relevant_older + recent
    combined.sort(key=lambda message: message.timestamp)
    return combined
