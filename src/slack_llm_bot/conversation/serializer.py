"""Conversation history serialization with schema versioning.

Supports JSON and YAML round-trips.  Every document embeds a schema
version; on load a bare list of messages is accepted as well.

Classes
-------
- HistorySerializer  — serialize/deserialize a list of Message
"""
from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Literal

import yaml

from slack_llm_bot.conversation.message import Message

SCHEMA_VERSION = "1.0"
_SUPPORTED_SCHEMA_VERSIONS: frozenset[str] = frozenset({SCHEMA_VERSION})


class SchemaVersionError(ValueError):
    """Raised when a serialised history uses an unsupported schema version."""

    def __init__(self, version: str) -> None:
        self.version = version
        supported = ", ".join(sorted(_SUPPORTED_SCHEMA_VERSIONS))
        super().__init__(
            f"Unsupported schema version {version!r}. "
            f"Supported versions: {supported}"
        )


class HistorySerializer:
    """Serialize and deserialize conversation histories.

    Loaded messages are re-sorted by timestamp so the result always reads
    oldest-first, whatever order the document listed them in.
    """

    # ------------------------------------------------------------------
    # JSON
    # ------------------------------------------------------------------

    def to_json(self, messages: Sequence[Message], *, indent: int = 2) -> str:
        """Serialise ``messages`` to a JSON document."""
        return json.dumps(self._document(messages), indent=indent, ensure_ascii=False)

    def from_json(self, raw: str) -> list[Message]:
        """Deserialize a history from JSON.

        Raises
        ------
        SchemaVersionError
            If the document declares an unsupported ``schema_version``.
        json.JSONDecodeError
            If ``raw`` is not valid JSON.
        pydantic.ValidationError
            If a message is malformed.
        """
        return self._deserialize(json.loads(raw))

    # ------------------------------------------------------------------
    # YAML
    # ------------------------------------------------------------------

    def to_yaml(self, messages: Sequence[Message]) -> str:
        """Serialise ``messages`` to a YAML document."""
        return yaml.dump(
            self._document(messages),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=True,
        )

    def from_yaml(self, raw: str) -> list[Message]:
        """Deserialize a history from YAML."""
        return self._deserialize(yaml.safe_load(raw))

    # ------------------------------------------------------------------
    # Format dispatch
    # ------------------------------------------------------------------

    def serialize(
        self, messages: Sequence[Message], format: Literal["json", "yaml"] = "json"
    ) -> str:
        """Serialize using the named format."""
        if format == "yaml":
            return self.to_yaml(messages)
        return self.to_json(messages)

    def deserialize(self, raw: str, format: Literal["json", "yaml"] = "json") -> list[Message]:
        """Deserialize using the named format."""
        if format == "yaml":
            return self.from_yaml(raw)
        return self.from_json(raw)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _document(messages: Sequence[Message]) -> dict[str, object]:
        return {
            "schema_version": SCHEMA_VERSION,
            "messages": [message.model_dump(mode="json") for message in messages],
        }

    @staticmethod
    def _deserialize(data: object) -> list[Message]:
        if data is None:
            return []
        if isinstance(data, dict):
            version = str(data.get("schema_version", ""))
            if version not in _SUPPORTED_SCHEMA_VERSIONS:
                raise SchemaVersionError(version)
            items = data.get("messages") or []
        elif isinstance(data, list):
            items = data
        else:
            raise ValueError(
                f"Expected a history document or a list of messages, got {type(data).__name__}."
            )

        messages = [Message.model_validate(item) for item in items]
        messages.sort(key=lambda message: message.timestamp)
        return messages
