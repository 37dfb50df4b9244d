"""Process-wide configuration loaded once from the environment.

Both models are frozen: build them at startup with ``from_env`` and pass
them explicitly to the components that need them.

Classes
-------
- ContextConfig  — tuning knobs for the context-selection engine
- StoreConfig    — settings for the conversation store collaborator
"""
from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from typing import Callable, TypeVar

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_T = TypeVar("_T", int, float)

_INT_PREFIX = re.compile(r"[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _read_number(
    environ: Mapping[str, str],
    name: str,
    default: _T,
    parse: Callable[[str], _T],
) -> _T:
    """Parse the leading number of ``environ[name]`` or fall back to ``default``.

    Trailing text is ignored, so ``"5.0"`` reads as 5 for an int setting and
    ``"2000chars"`` as 2000.  Missing, blank, non-numeric and zero values
    all yield the default.
    """
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    pattern = _INT_PREFIX if parse is int else _FLOAT_PREFIX
    match = pattern.match(raw)
    if match is None:
        logger.warning("Ignoring invalid %s=%r; using default %r", name, raw, default)
        return default
    return parse(match.group()) or default


class ContextConfig(BaseModel):
    """Configuration for the context-selection pipeline.

    Parameters
    ----------
    max_context_chars:
        Character budget for the selected messages, overhead included.
        Default: 4000.
    min_recent_messages:
        The newest N messages are always candidates.  Default: 3.
    max_relevant_older:
        Cap on older messages pulled in by relevance.  Default: 3.
    min_keyword_length:
        Shortest token treated as a keyword.  Default: 4.
    relevance_threshold:
        Minimum keyword-overlap score for an older message.  Default: 0.3.
    message_overhead:
        Per-message formatting cost charged against the budget.
        Default: 30.
    """

    max_context_chars: int = Field(default=4000, ge=1)
    min_recent_messages: int = Field(default=3, ge=1)
    max_relevant_older: int = Field(default=3, ge=0)
    min_keyword_length: int = Field(default=4, ge=1)
    relevance_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    message_overhead: int = Field(default=30, ge=0)

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ContextConfig:
        """Build a config from ``MAX_CONTEXT_CHARS`` and friends.

        Parameters
        ----------
        environ:
            Mapping to read from.  Defaults to ``os.environ``.

        Raises
        ------
        pydantic.ValidationError
            If a parsed value is out of range.
        """
        env = os.environ if environ is None else environ
        return cls(
            max_context_chars=_read_number(env, "MAX_CONTEXT_CHARS", 4000, int),
            min_recent_messages=_read_number(env, "MIN_RECENT_MESSAGES", 3, int),
            max_relevant_older=_read_number(env, "MAX_RELEVANT_OLDER", 3, int),
            min_keyword_length=_read_number(env, "MIN_KEYWORD_LENGTH", 4, int),
            relevance_threshold=_read_number(env, "RELEVANCE_THRESHOLD", 0.3, float),
        )


class StoreConfig(BaseModel):
    """Settings for the conversation store and the request middleware."""

    db_path: str = "db/conversations.db"
    history_limit: int = Field(default=50, ge=1)
    cleanup_days: int = Field(default=30, ge=1)

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> StoreConfig:
        """Build a store config from ``CONVERSATION_DB_PATH``, ``HISTORY_LIMIT``
        and ``DB_CLEANUP_DAYS``."""
        env = os.environ if environ is None else environ
        return cls(
            db_path=env.get("CONVERSATION_DB_PATH", "").strip() or "db/conversations.db",
            history_limit=_read_number(env, "HISTORY_LIMIT", 50, int),
            cleanup_days=_read_number(env, "DB_CLEANUP_DAYS", 30, int),
        )
