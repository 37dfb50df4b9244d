"""CLI entry point for slack-llm-bot.

Invoked as::

    slack-llm-bot [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m slack_llm_bot.cli.main

Commands
--------
- version   — Show version information
- history   — Conversation store command group
- context   — Inspect the context the bot would send to the LLM

History sub-commands
--------------------
- history add      — Append a message to a conversation
- history show     — Display the recent messages of a conversation
- history list     — List conversations that have messages
- history count    — Count stored messages for a conversation
- history clear    — Delete a conversation's history
- history cleanup  — Delete messages older than N days
- history export   — Dump a conversation as JSON or YAML

Context sub-commands
--------------------
- context keywords — Show the keywords extracted from some text
- context build    — Print the context block for a prompt
- context stats    — Print context diagnostics for a prompt
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Literal, cast

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from slack_llm_bot import __version__
from slack_llm_bot.config import ContextConfig, StoreConfig
from slack_llm_bot.conversation.message import ConversationKey, Message
from slack_llm_bot.conversation.serializer import HistorySerializer
from slack_llm_bot.storage.base import ConversationStore

console = Console()

_ROLE_STYLES: dict[str, str] = {"user": "green", "assistant": "blue"}

# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def _make_store(storage: str, db_path: str | None) -> ConversationStore:
    """Instantiate the requested conversation store.

    Parameters
    ----------
    storage:
        Store name: ``"memory"`` or ``"sqlite"``.
    db_path:
        Path to the SQLite database (used when ``storage="sqlite"``).

    Returns
    -------
    ConversationStore
        A configured store instance.
    """
    from slack_llm_bot.storage.memory import InMemoryStore
    from slack_llm_bot.storage.sqlite import SQLiteStore

    if storage == "memory":
        return InMemoryStore()
    if storage == "sqlite":
        return SQLiteStore(db_path=Path(db_path) if db_path else None)
    console.print(f"[red]Unknown storage backend: {storage!r}[/red]")
    sys.exit(1)


def _make_config(max_context_chars: int | None, min_recent: int | None) -> ContextConfig:
    """Load the context config from the environment and apply CLI overrides."""
    config = ContextConfig.from_env()
    overrides: dict[str, int] = {}
    if max_context_chars is not None:
        overrides["max_context_chars"] = max_context_chars
    if min_recent is not None:
        overrides["min_recent_messages"] = min_recent
    if not overrides:
        return config
    return ContextConfig(**{**config.model_dump(), **overrides})


def _load_history(history_file: str | None) -> list[Message]:
    """Read a JSON or YAML history file; no file means an empty history."""
    if history_file is None:
        return []
    path = Path(history_file)
    fmt = "yaml" if path.suffix.lower() in {".yaml", ".yml"} else "json"
    return HistorySerializer().deserialize(path.read_text(encoding="utf-8"), fmt)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="slack-llm-bot")
def cli() -> None:
    """Slack LLM bot conversation and context tools"""


@cli.command(name="version")
def version_command() -> None:
    """Show version information."""
    console.print(f"[bold]slack-llm-bot[/bold] v{__version__}")


# ---------------------------------------------------------------------------
# history command group
# ---------------------------------------------------------------------------


@cli.group(name="history")
@click.option(
    "--storage",
    default="sqlite",
    show_default=True,
    type=click.Choice(["memory", "sqlite"], case_sensitive=False),
    help="Conversation store to use.",
)
@click.option(
    "--db-path",
    default=None,
    help="Path to SQLite database (sqlite store). Defaults to CONVERSATION_DB_PATH.",
)
@click.pass_context
def history_group(ctx: click.Context, storage: str, db_path: str | None) -> None:
    """Conversation store commands."""
    ctx.ensure_object(dict)
    store_config = StoreConfig.from_env()
    ctx.obj["store_config"] = store_config
    ctx.obj["store"] = _make_store(storage.lower(), db_path or store_config.db_path)


@history_group.command(name="add")
@click.argument("user_id")
@click.argument("channel_id")
@click.argument("role", type=click.Choice(["user", "assistant"], case_sensitive=False))
@click.argument("content")
@click.pass_context
def history_add(
    ctx: click.Context, user_id: str, channel_id: str, role: str, content: str
) -> None:
    """Append a message to the conversation USER_ID / CHANNEL_ID."""
    store: ConversationStore = ctx.obj["store"]
    key = ConversationKey(user_id=user_id, channel_id=channel_id)
    message = store.add_message(key, role.lower(), content)
    console.print(f"[green]Message added:[/green] {key} @ {message.timestamp}")


@history_group.command(name="show")
@click.argument("user_id")
@click.argument("channel_id")
@click.option("--limit", default=10, show_default=True, help="Maximum messages to show.")
@click.pass_context
def history_show(ctx: click.Context, user_id: str, channel_id: str, limit: int) -> None:
    """Display the most recent messages of a conversation."""
    store: ConversationStore = ctx.obj["store"]
    key = ConversationKey(user_id=user_id, channel_id=channel_id)
    messages = store.get_history(key, limit)

    if not messages:
        console.print(f"[yellow]No messages for {key}.[/yellow]")
        return

    for message in messages:
        style = _ROLE_STYLES.get(message.role.value, "white")
        header = f"[{style}]{message.role.label}[/{style}] | ts={message.timestamp}"
        console.print(Panel(Text(message.content), title=header, expand=False))


@history_group.command(name="list")
@click.pass_context
def history_list(ctx: click.Context) -> None:
    """List every conversation that has stored messages."""
    store: ConversationStore = ctx.obj["store"]
    keys = store.keys()

    if not keys:
        console.print("[yellow]No conversations found.[/yellow]")
        return

    table = Table(title="Conversations", show_lines=False)
    table.add_column("User", style="cyan")
    table.add_column("Channel", style="green")
    table.add_column("Messages", justify="right")
    for key in keys:
        table.add_row(key.user_id, key.channel_id, str(store.count_messages(key)))
    console.print(table)


@history_group.command(name="count")
@click.argument("user_id")
@click.argument("channel_id")
@click.pass_context
def history_count(ctx: click.Context, user_id: str, channel_id: str) -> None:
    """Print the number of stored messages for a conversation."""
    store: ConversationStore = ctx.obj["store"]
    key = ConversationKey(user_id=user_id, channel_id=channel_id)
    console.print(str(store.count_messages(key)))


@history_group.command(name="clear")
@click.argument("user_id")
@click.argument("channel_id")
@click.pass_context
def history_clear(ctx: click.Context, user_id: str, channel_id: str) -> None:
    """Delete every message of a conversation."""
    store: ConversationStore = ctx.obj["store"]
    key = ConversationKey(user_id=user_id, channel_id=channel_id)
    if store.clear_history(key):
        console.print(f"[green]History cleared:[/green] {key}")
    else:
        console.print(f"[yellow]Nothing to clear for {key}.[/yellow]")


@history_group.command(name="cleanup")
@click.option(
    "--days",
    default=None,
    type=click.IntRange(min=1),
    help="Keep messages newer than this many days. Defaults to DB_CLEANUP_DAYS (30).",
)
@click.pass_context
def history_cleanup(ctx: click.Context, days: int | None) -> None:
    """Delete messages older than the retention window."""
    store: ConversationStore = ctx.obj["store"]
    if days is None:
        days = ctx.obj["store_config"].cleanup_days
    deleted = store.cleanup_older_than(days)
    console.print(f"[green]Cleaned up {deleted} old messages.[/green]")


@history_group.command(name="export")
@click.argument("user_id")
@click.argument("channel_id")
@click.option("--limit", default=50, show_default=True, help="Maximum messages to export.")
@click.option(
    "--format",
    "fmt",
    default="json",
    show_default=True,
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    help="Output format.",
)
@click.option(
    "--output",
    "output_file",
    default=None,
    type=click.Path(dir_okay=False),
    help="Write to this file instead of stdout.",
)
@click.pass_context
def history_export(
    ctx: click.Context,
    user_id: str,
    channel_id: str,
    limit: int,
    fmt: str,
    output_file: str | None,
) -> None:
    """Dump a conversation's recent history as JSON or YAML."""
    store: ConversationStore = ctx.obj["store"]
    key = ConversationKey(user_id=user_id, channel_id=channel_id)
    fmt_name = cast(Literal["json", "yaml"], fmt.lower())
    document = HistorySerializer().serialize(store.get_history(key, limit), fmt_name)

    if output_file is None:
        click.echo(document)
        return

    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(document, encoding="utf-8")
    console.print(f"[green]Exported ({fmt}):[/green] {output_file}")


# ---------------------------------------------------------------------------
# context command group
# ---------------------------------------------------------------------------


@cli.group(name="context")
@click.option("--max-context-chars", default=None, type=int, help="Override MAX_CONTEXT_CHARS.")
@click.option("--min-recent", default=None, type=int, help="Override MIN_RECENT_MESSAGES.")
@click.pass_context
def context_group(
    ctx: click.Context, max_context_chars: int | None, min_recent: int | None
) -> None:
    """Inspect the context the bot would send with a prompt."""
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = _make_config(max_context_chars, min_recent)
    except ValidationError as exc:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        sys.exit(1)


@context_group.command(name="keywords")
@click.argument("text")
@click.pass_context
def context_keywords(ctx: click.Context, text: str) -> None:
    """Show the keywords extracted from TEXT."""
    from slack_llm_bot.context.keywords import extract_keywords

    config: ContextConfig = ctx.obj["config"]
    keywords = extract_keywords(text, config.min_keyword_length)
    if not keywords:
        console.print("[yellow]No keywords.[/yellow]")
        return
    console.print(", ".join(keywords))


@context_group.command(name="build")
@click.argument("prompt")
@click.option(
    "--history-file",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="JSON or YAML conversation history.",
)
@click.pass_context
def context_build(ctx: click.Context, prompt: str, history_file: str | None) -> None:
    """Print the context block that would precede PROMPT."""
    from slack_llm_bot.context.builder import ContextBuilder

    try:
        history = _load_history(history_file)
    except (ValueError, OSError) as exc:
        console.print(f"[red]Failed to load history:[/red] {escape(str(exc))}")
        sys.exit(1)

    context_block = ContextBuilder(ctx.obj["config"]).build(history, prompt)
    if not context_block:
        console.print("[yellow]No context (empty history).[/yellow]")
        return
    console.print(Panel(Text(context_block.rstrip()), title="Conversation Context", expand=True))


@context_group.command(name="stats")
@click.argument("prompt")
@click.option(
    "--history-file",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="JSON or YAML conversation history.",
)
@click.pass_context
def context_stats(ctx: click.Context, prompt: str, history_file: str | None) -> None:
    """Print selection and budget diagnostics for PROMPT."""
    from slack_llm_bot.context.builder import ContextBuilder

    try:
        history = _load_history(history_file)
    except (ValueError, OSError) as exc:
        console.print(f"[red]Failed to load history:[/red] {escape(str(exc))}")
        sys.exit(1)

    stats = ContextBuilder(ctx.obj["config"]).stats(history, prompt)

    table = Table(title="Context Stats", show_lines=False)
    table.add_column("Metric", style="bold cyan")
    table.add_column("Value", justify="right")
    table.add_row("total_messages", str(stats.total_messages))
    table.add_row("relevant_messages", str(stats.relevant_messages))
    table.add_row("included_messages", str(stats.included_messages))
    table.add_row("total_chars", str(stats.total_chars))
    table.add_row("utilization_percent", f"{stats.utilization_percent:.1f}")
    console.print(table)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


if __name__ == "__main__":
    cli()
