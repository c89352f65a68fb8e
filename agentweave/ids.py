"""Identifiers for agents and broadcast topics."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

__all__ = [
    "InvalidIdentifierError",
    "is_valid_topic_type",
    "AgentId",
    "TopicId",
    "default_topic_id",
]

TOPIC_TYPE_PATTERN = r"^[\w\-\.\:=]+\Z"
_TOPIC_TYPE_RE = re.compile(TOPIC_TYPE_PATTERN)


class InvalidIdentifierError(ValueError):
    """Raised when an identifier field does not have the expected format."""

    def __init__(self, field: str, value: str, expected_format: str) -> None:
        super().__init__(
            f"Invalid format for {field}: {value!r} (expected {expected_format})"
        )
        self.field = field
        self.value = value
        self.expected_format = expected_format


def is_valid_topic_type(value: str) -> bool:
    """Return True if *value* is a valid CloudEvents-style topic type."""
    return bool(_TOPIC_TYPE_RE.match(value))


def _require_str(data: Mapping[str, Any], field: str) -> str:
    try:
        value = data[field]
    except KeyError:
        raise InvalidIdentifierError(field, "", "a string field") from None
    if not isinstance(value, str):
        raise InvalidIdentifierError(field, repr(value), "a string")
    return value


@dataclass(frozen=True)
class AgentId:
    """Identifies an agent instance by its type and key."""

    type: str
    key: str

    def __post_init__(self) -> None:
        if not isinstance(self.type, str):
            raise InvalidIdentifierError("type", repr(self.type), "a string")
        if not isinstance(self.key, str):
            raise InvalidIdentifierError("key", repr(self.key), "a string")

    def __str__(self) -> str:
        return f"{self.type}/{self.key}"

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "key": self.key}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AgentId:
        return cls(_require_str(data, "type"), _require_str(data, "key"))


@dataclass(frozen=True)
class TopicId:
    """Scope of a broadcast message: an event type and the context it came from."""

    type: str
    source: str

    def __post_init__(self) -> None:
        if not isinstance(self.type, str) or not is_valid_topic_type(self.type):
            raise InvalidIdentifierError("topic_type", str(self.type), TOPIC_TYPE_PATTERN)
        if not isinstance(self.source, str):
            raise InvalidIdentifierError("source", repr(self.source), "a string")

    def __str__(self) -> str:
        return f"{self.type}@{self.source}"

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "source": self.source}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TopicId:
        return cls(_require_str(data, "type"), _require_str(data, "source"))


def default_topic_id(topic_type: str = "default", source: str = "default") -> TopicId:
    """Build a TopicId, using "default" for any part not given."""
    return TopicId(topic_type, source)