"""Pipeline entry point: history + prompt -> context block.

Classes
-------
- ContextBuilder  — runs select, budget and format with one config
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from slack_llm_bot.config import ContextConfig
from slack_llm_bot.context.budget import truncate_to_budget
from slack_llm_bot.context.formatter import format_context
from slack_llm_bot.context.selector import select_messages
from slack_llm_bot.context.stats import ContextStats, compute_stats
from slack_llm_bot.conversation.message import Message

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = "{context}Current message: {prompt}\n\nProvide a helpful, concise response:"


class ContextBuilder:
    """Build LLM context blocks from a conversation history snapshot.

    The builder holds no state besides its configuration, so one instance
    can serve every conversation concurrently.

    Parameters
    ----------
    config:
        Selection and budget settings.  Defaults to ``ContextConfig()``.
    """

    def __init__(self, config: ContextConfig | None = None) -> None:
        self.config = config or ContextConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def select(self, history: Sequence[Message], prompt: str) -> list[Message]:
        """Return the selected and budgeted messages, oldest first."""
        selected = select_messages(history, prompt, self.config)
        return truncate_to_budget(
            selected, self.config.max_context_chars, self.config.message_overhead
        )

    def build(self, history: Sequence[Message], prompt: str) -> str:
        """Return the formatted context block for ``prompt``.

        Parameters
        ----------
        history:
            Conversation history, oldest first.
        prompt:
            The prompt the context is being built for.

        Returns
        -------
        str
            Context text to prepend to the prompt.  Empty string when the
            history is empty.
        """
        included = self.select(history, prompt)
        logger.debug("Context: %d messages from %d total", len(included), len(history))
        return format_context(included, self.config.min_recent_messages)

    def stats(self, history: Sequence[Message], prompt: str) -> ContextStats:
        """Return diagnostics for the context that ``build`` would produce."""
        return compute_stats(history, prompt, self.config)

    def compose_prompt(self, history: Sequence[Message], prompt: str) -> str:
        """Prepend the context block to ``prompt`` for sending to an LLM.

        A failure while building context is logged and the prompt is sent
        without context.
        """
        try:
            context = self.build(history, prompt)
        except Exception:  # noqa: BLE001
            logger.exception("Context building failed; sending prompt without context")
            context = ""
        return PROMPT_TEMPLATE.format(context=context, prompt=prompt)

    def __repr__(self) -> str:
        return f"ContextBuilder(config={self.config!r})"


def build_context(
    history: Sequence[Message],
    prompt: str,
    config: ContextConfig | None = None,
) -> str:
    """Shortcut for ``ContextBuilder(config).build(history, prompt)``."""
    return ContextBuilder(config).build(history, prompt)
