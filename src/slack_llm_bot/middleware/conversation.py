"""Conversation bookkeeping around each slash-command request.

Loads the history snapshot for a conversation before the LLM call,
records the user's turn, and records the assistant's reply afterwards.
The context engine itself never touches the store.

Classes
-------
- PreparedTurn            — everything the LLM call needs for one request
- ConversationMiddleware  — before/after request hooks
"""
from __future__ import annotations

import logging

from pydantic import BaseModel

from slack_llm_bot.commands.parser import ParsedCommand, parse_command
from slack_llm_bot.config import ContextConfig, StoreConfig
from slack_llm_bot.context.builder import ContextBuilder
from slack_llm_bot.context.stats import ContextStats
from slack_llm_bot.conversation.message import ConversationKey, Message, Role
from slack_llm_bot.storage.base import ConversationStore

logger = logging.getLogger(__name__)


class PreparedTurn(BaseModel):
    """Result of ``ConversationMiddleware.before_request``.

    Parameters
    ----------
    key:
        Conversation the request belongs to.
    command:
        The parsed slash-command text.
    history:
        Snapshot read before the new user message was recorded.
    stats:
        Context diagnostics for the snapshot and the raw command text.
    prompt:
        The command text with the context block prepended.
    """

    key: ConversationKey
    command: ParsedCommand
    history: list[Message]
    stats: ContextStats
    prompt: str

    model_config = {"frozen": True}


class ConversationMiddleware:
    """Read and write conversation history around each request cycle.

    Parameters
    ----------
    store:
        Conversation store to read snapshots from and append turns to.
    builder:
        Context builder.  Defaults to ``ContextBuilder()``.
    history_limit:
        Number of most recent messages loaded per request.  Default: 50.
    """

    def __init__(
        self,
        store: ConversationStore,
        builder: ContextBuilder | None = None,
        history_limit: int = 50,
    ) -> None:
        if history_limit < 1:
            raise ValueError(f"history_limit must be >= 1, got {history_limit!r}.")
        self._store = store
        self.builder = builder or ContextBuilder()
        self.history_limit = history_limit

    @classmethod
    def from_config(
        cls,
        store: ConversationStore,
        store_config: StoreConfig | None = None,
        context_config: ContextConfig | None = None,
    ) -> ConversationMiddleware:
        """Build a middleware whose history limit and context settings come
        from config objects.  Both default to ``from_env()``."""
        store_config = store_config or StoreConfig.from_env()
        context_config = context_config or ContextConfig.from_env()
        return cls(
            store,
            builder=ContextBuilder(context_config),
            history_limit=store_config.history_limit,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def before_request(self, key: ConversationKey, text: str) -> PreparedTurn:
        """Snapshot history, record the user turn, and build the prompt.

        The snapshot is taken before the new message is stored so that the
        current text does not appear in its own context.

        Parameters
        ----------
        key:
            Conversation identifier.
        text:
            Raw slash-command text.

        Returns
        -------
        PreparedTurn
        """
        command = parse_command(text)
        logger.debug(
            "Command for %s: to=%s tone=%s flags=%s",
            key,
            command.target_language,
            command.tone,
            command.flags,
        )
        history = self._store.get_history(key, self.history_limit)
        stats = self._compute_stats(history, text)
        logger.info(
            "Context stats for %s: %d/%d messages, %d chars (%.1f%%)",
            key,
            stats.included_messages,
            stats.total_messages,
            stats.total_chars,
            stats.utilization_percent,
        )

        self._store.add_message(key, Role.USER, text)
        prompt = self.builder.compose_prompt(history, command.text)
        return PreparedTurn(key=key, command=command, history=history, stats=stats, prompt=prompt)

    def after_request(self, key: ConversationKey, answer: str) -> Message:
        """Record the assistant's reply for ``key``.

        Returns
        -------
        Message
            The stored reply.
        """
        message = self._store.add_message(key, Role.ASSISTANT, answer)
        logger.debug("Recorded assistant reply for %s (%d chars)", key, len(answer))
        return message

    def reset(self, key: ConversationKey) -> bool:
        """Forget the history for ``key``.  Returns True if anything was removed."""
        cleared = self._store.clear_history(key)
        logger.debug("Cleared history for %s: %s", key, cleared)
        return cleared

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _compute_stats(self, history: list[Message], text: str) -> ContextStats:
        """Return context stats, or empty stats if the pipeline fails."""
        try:
            return self.builder.stats(history, text)
        except Exception:  # noqa: BLE001
            logger.exception("Context stats failed; continuing without context")
            return ContextStats(
                total_messages=len(history),
                relevant_messages=0,
                included_messages=0,
                total_chars=0,
                utilization_percent=0.0,
            )

