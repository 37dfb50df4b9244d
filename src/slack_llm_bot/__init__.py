"""slack-llm-bot — conversation memory for a Slack slash-command LLM bot.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import slack_llm_bot
>>> slack_llm_bot.__version__
'0.1.0'
"""
from __future__ import annotations

__version__: str = "0.1.0"

# Configuration
from slack_llm_bot.config import ContextConfig, StoreConfig

# Conversation model
from slack_llm_bot.conversation.message import ConversationKey, Message, Role, ScoredMessage
from slack_llm_bot.conversation.serializer import HistorySerializer, SchemaVersionError

# Context selection
from slack_llm_bot.context.budget import truncate_to_budget
from slack_llm_bot.context.builder import ContextBuilder, build_context
from slack_llm_bot.context.formatter import format_context
from slack_llm_bot.context.keywords import extract_keywords
from slack_llm_bot.context.relevance import RelevanceScorer, score_relevance
from slack_llm_bot.context.selector import select_messages
from slack_llm_bot.context.stats import ContextStats, compute_stats

# Conversation stores
from slack_llm_bot.storage.base import ConversationStore
from slack_llm_bot.storage.memory import InMemoryStore
from slack_llm_bot.storage.sqlite import SQLiteStore

# Commands and middleware
from slack_llm_bot.commands.parser import ParsedCommand, parse_command
from slack_llm_bot.middleware.conversation import ConversationMiddleware, PreparedTurn

__all__ = [
    "__version__",
    # Configuration
    "ContextConfig",
    "StoreConfig",
    # Conversation model
    "ConversationKey",
    "HistorySerializer",
    "Message",
    "Role",
    "SchemaVersionError",
    "ScoredMessage",
    # Context selection
    "ContextBuilder",
    "ContextStats",
    "RelevanceScorer",
    "build_context",
    "compute_stats",
    "extract_keywords",
    "format_context",
    "score_relevance",
    "select_messages",
    "truncate_to_budget",
    # Stores
    "ConversationStore",
    "InMemoryStore",
    "SQLiteStore",
    # Commands and middleware
    "ConversationMiddleware",
    "ParsedCommand",
    "PreparedTurn",
    "parse_command",
]
