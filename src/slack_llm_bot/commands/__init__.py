"""Slash-command text parsing."""
from __future__ import annotations

from slack_llm_bot.commands.parser import DEFAULT_OPTIONS, ParsedCommand, parse_command, split_args

__all__ = [
    "DEFAULT_OPTIONS",
    "ParsedCommand",
    "parse_command",
    "split_args",
]
