"""Context-selection subpackage.

Turns a conversation history and the current prompt into a short context
block: keywords are extracted from the prompt, older messages are scored
against them, the most relevant are merged with the recent window, the
result is trimmed to a character budget and rendered as text.

Public surface
--------------
- extract_keywords    — salient prompt terms
- RelevanceScorer     — keyword-overlap scoring
- select_messages     — recent window + relevant older messages
- truncate_to_budget  — newest-first character budgeting
- format_context      — render the context block
- ContextBuilder      — the whole pipeline behind one config
- ContextStats        — diagnostics for logging
"""
from __future__ import annotations

from slack_llm_bot.context.budget import message_cost, truncate_to_budget
from slack_llm_bot.context.builder import ContextBuilder, build_context
from slack_llm_bot.context.formatter import format_context
from slack_llm_bot.context.keywords import STOP_WORDS, extract_keywords
from slack_llm_bot.context.relevance import RelevanceScorer, score_relevance
from slack_llm_bot.context.selector import select_messages
from slack_llm_bot.context.stats import ContextStats, compute_stats

__all__ = [
    "STOP_WORDS",
    "ContextBuilder",
    "ContextStats",
    "RelevanceScorer",
    "build_context",
    "compute_stats",
    "extract_keywords",
    "format_context",
    "message_cost",
    "score_relevance",
    "select_messages",
    "truncate_to_budget",
]
