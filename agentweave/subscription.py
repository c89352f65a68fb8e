"""Subscriptions that decide which agents receive a published message."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable

from agentweave.ids import AgentId, TopicId

__all__ = [
    "Subscription",
    "DefaultSubscription",
    "TypeSubscription",
    "TopicSubscription",
    "TypePrefixSubscription",
    "CombinedSubscription",
    "SubscriptionRegistry",
]


def _qualified_name(message_type: type) -> str:
    module = getattr(message_type, "__module__", "")
    qualname = getattr(message_type, "__qualname__", repr(message_type))
    return f"{module}.{qualname}" if module else qualname


class Subscription(ABC):
    """Decides whether a message on a topic is of interest."""

    @abstractmethod
    def matches(self, topic_id: TopicId, message_type: type) -> bool:
        """Return True if a message of *message_type* on *topic_id* matches."""

    @abstractmethod
    def description(self) -> str:
        """Human-readable description for debugging."""


@dataclass(frozen=True)
class DefaultSubscription(Subscription):
    """Matches every message."""

    def matches(self, topic_id: TopicId, message_type: type) -> bool:
        return True

    def description(self) -> str:
        return "DefaultSubscription (matches all messages)"


@dataclass(frozen=True)
class TypeSubscription(Subscription):
    """Matches messages of one exact type, on any topic."""

    message_type: type
    name: str | None = None

    def type_name(self) -> str:
        return self.name if self.name is not None else _qualified_name(self.message_type)

    def matches(self, topic_id: TopicId, message_type: type) -> bool:
        return message_type is self.message_type

    def description(self) -> str:
        return f"TypeSubscription({self.type_name()})"


@dataclass(frozen=True)
class TopicSubscription(Subscription):
    """Matches messages published to one topic, of any type."""

    topic_id: TopicId

    def matches(self, topic_id: TopicId, message_type: type) -> bool:
        return self.topic_id == topic_id

    def description(self) -> str:
        return f"TopicSubscription({self.topic_id})"


@dataclass(frozen=True)
class TypePrefixSubscription(Subscription):
    """Matches messages whose qualified type name starts with a prefix."""

    type_prefix: str

    def matches(self, topic_id: TopicId, message_type: type) -> bool:
        return _qualified_name(message_type).startswith(self.type_prefix)

    def description(self) -> str:
        return f"TypePrefixSubscription({self.type_prefix}*)"


@dataclass(frozen=True)
class CombinedSubscription(Subscription):
    """Combines subscriptions with AND (all must match) or OR (any may match)."""

    subscriptions: tuple[Subscription, ...]
    require_all: bool = True

    @classmethod
    def all_of(cls, subscriptions: Iterable[Subscription]) -> CombinedSubscription:
        return cls(tuple(subscriptions), require_all=True)

    @classmethod
    def any_of(cls, subscriptions: Iterable[Subscription]) -> CombinedSubscription:
        return cls(tuple(subscriptions), require_all=False)

    def matches(self, topic_id: TopicId, message_type: type) -> bool:
        results = (sub.matches(topic_id, message_type) for sub in self.subscriptions)
        return all(results) if self.require_all else any(results)

    def description(self) -> str:
        operator = " AND " if self.require_all else " OR "
        return "(" + operator.join(sub.description() for sub in self.subscriptions) + ")"


@dataclass
class SubscriptionRegistry:
    """Tracks the subscriptions held by each agent."""

    _subscriptions: dict[AgentId, list[Subscription]] = field(default_factory=dict)

    def subscribe(self, agent_id: AgentId, subscription: Subscription) -> None:
        self._subscriptions.setdefault(agent_id, []).append(subscription)

    def unsubscribe_all(self, agent_id: AgentId) -> None:
        self._subscriptions.pop(agent_id, None)

    def find_matching_agents(self, topic_id: TopicId, message_type: type) -> set[AgentId]:
        return {
            agent_id
            for agent_id, subs in self._subscriptions.items()
            if any(sub.matches(topic_id, message_type) for sub in subs)
        }

    def agent_subscriptions(self, agent_id: AgentId) -> list[str]:
        """Descriptions of the agent's subscriptions, in the order they were added."""
        return [sub.description() for sub in self._subscriptions.get(agent_id, [])]