"""Slash-command argument parsing.

Splits the raw text of a Slack slash command such as::

    /translate "see you tomorrow" --to es-ES --tone formal

into positional words and ``--flag value`` options.  Double-quoted runs
are kept together.  Apostrophes are ordinary characters, so text like
``what's up`` needs no quoting.

Classes
-------
- ParsedCommand  — positional text plus options
"""
from __future__ import annotations

import re

from pydantic import BaseModel, Field

DEFAULT_OPTIONS: dict[str, str] = {"to": "en-US", "tone": "neutral"}

_ARG_PATTERN = re.compile(r'(?:[^\s"]+|"[^"]*")+')


class ParsedCommand(BaseModel):
    """Result of ``parse_command``.

    Parameters
    ----------
    text:
        Positional words joined by single spaces.
    options:
        Option values keyed by flag name, including defaults for ``to`` and
        ``tone``.  A flag given without a value is ``True``.
    flags:
        Names of the options that appeared in the text, in order.
    """

    text: str = ""
    options: dict[str, str | bool] = Field(default_factory=lambda: dict(DEFAULT_OPTIONS))
    flags: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def target_language(self) -> str:
        """The ``--to`` option as a string."""
        return str(self.options.get("to") or DEFAULT_OPTIONS["to"])

    @property
    def tone(self) -> str:
        """The ``--tone`` option as a string."""
        return str(self.options.get("tone") or DEFAULT_OPTIONS["tone"])


def split_args(text: str) -> list[str]:
    """Split ``text`` on whitespace, keeping double-quoted runs together
    and removing the quotes."""
    return [token.replace('"', "") for token in _ARG_PATTERN.findall(text or "")]


def parse_command(text: str) -> ParsedCommand:
    """Parse slash-command text into positional text and options.

    Parameters
    ----------
    text:
        The raw command text Slack sends (without the command name).

    Returns
    -------
    ParsedCommand
    """
    tokens = split_args(text)
    positional: list[str] = []
    options: dict[str, str | bool] = dict(DEFAULT_OPTIONS)
    flags: list[str] = []

    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1

        if token == "--":
            positional.extend(tokens[index:])
            break
        if not token.startswith("--"):
            positional.append(token)
            continue

        name, sep, value = token[2:].partition("=")
        if name not in flags:
            flags.append(name)
        if sep:
            options[name] = value or DEFAULT_OPTIONS.get(name, "")
        elif index < len(tokens) and not tokens[index].startswith("--"):
            options[name] = tokens[index]
            index += 1
        elif name in DEFAULT_OPTIONS:
            # String options keep their default when the value is missing.
            options[name] = DEFAULT_OPTIONS[name]
        else:
            options[name] = True

    return ParsedCommand(text=" ".join(positional), options=options, flags=flags)
