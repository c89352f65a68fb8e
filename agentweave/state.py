"""Agent state: in-memory representation, persistence backends and a manager."""

from __future__ import annotations

import asyncio
import copy
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from agentweave.ids import AgentId

__all__ = [
    "StateError",
    "StateMetadata",
    "AgentState",
    "StateStore",
    "FileSystemStateStore",
    "StateManager",
]

STATE_VERSION = 1


class StateError(Exception):
    """Raised when agent state cannot be serialised, stored, loaded or validated."""


def _to_json_value(value: Any) -> Any:
    """Normalise *value* to its plain JSON form, raising StateError if impossible."""
    try:
        return json.loads(json.dumps(value))
    except (TypeError, ValueError) as exc:
        raise StateError(f"Failed to serialize state value: {exc}") from exc


@dataclass
class StateMetadata:
    """Metadata kept alongside an agent's state."""

    checksum: str | None = None
    custom: dict[str, str] = field(default_factory=dict)
    modification_count: int = 0

    def update_modified(self) -> None:
        """Record one more modification."""
        self.modification_count += 1

    def set_custom(self, key: str, value: str) -> None:
        """Set a custom metadata field and record the modification."""
        self.custom[str(key)] = str(value)
        self.update_modified()

    def to_dict(self) -> dict[str, Any]:
        return {
            "checksum": self.checksum,
            "custom": dict(self.custom),
            "modification_count": self.modification_count,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StateMetadata:
        try:
            checksum = data["checksum"]
            custom = data["custom"]
            count = data["modification_count"]
        except (KeyError, TypeError) as exc:
            raise StateError(f"Failed to deserialize state metadata: {exc!r}") from exc
        if checksum is not None and not isinstance(checksum, str):
            raise StateError("Failed to deserialize state metadata: checksum must be a string")
        if not isinstance(custom, Mapping) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in custom.items()
        ):
            raise StateError("Failed to deserialize state metadata: custom must map strings")
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise StateError(
                "Failed to deserialize state metadata: modification_count must be a non-negative integer"
            )
        return cls(checksum=checksum, custom=dict(custom), modification_count=count)


@dataclass
class AgentState:
    """The complete persisted state of one agent."""

    agent_id: AgentId
    state: dict[str, Any] = field(default_factory=dict)
    metadata: StateMetadata = field(default_factory=StateMetadata)
    version: int = STATE_VERSION

    def get(self, key: str, default: Any = None) -> Any:
        """Return a copy of the value stored under *key*, or *default*."""
        if key in self.state:
            return copy.deepcopy(self.state[key])
        return default

    def set(self, key: str, value: Any) -> None:
        """Store *value*, which must be JSON-serialisable, under *key*."""
        self.state[key] = _to_json_value(value)
        self.metadata.update_modified()

    def remove(self, key: str) -> Any:
        """Remove *key* and return its value, or None if it was absent."""
        if key not in self.state:
            return None
        value = self.state.pop(key)
        self.metadata.update_modified()
        return value

    def __contains__(self, key: object) -> bool:
        return key in self.state

    def keys(self) -> list[str]:
        return list(self.state)

    def clear(self) -> None:
        self.state.clear()
        self.metadata.update_modified()

    def validate(self) -> None:
        """Raise StateError if the state does not belong to a well-formed agent id."""
        if not self.agent_id.type or not self.agent_id.key:
            raise StateError("Invalid agent ID in state")

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent_id": self.agent_id.to_dict(),
            "state": copy.deepcopy(self.state),
            "metadata": self.metadata.to_dict(),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AgentState:
        try:
            agent_id = AgentId.from_dict(data["agent_id"])
            state = data["state"]
            metadata = StateMetadata.from_dict(data["metadata"])
            version = data["version"]
        except StateError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise StateError(f"Failed to deserialize state: {exc!r}") from exc
        if not isinstance(state, Mapping):
            raise StateError("Failed to deserialize state: state must be an object")
        if isinstance(version, bool) or not isinstance(version, int) or version < 0:
            raise StateError("Failed to deserialize state: version must be a non-negative integer")
        return cls(agent_id=agent_id, state=dict(state), metadata=metadata, version=version)


class StateStore(ABC):
    """A backend that persists agent state."""

    @abstractmethod
    async def save_state(self, state: AgentState) -> None:
        """Persist *state*."""

    @abstractmethod
    async def load_state(self, agent_id: AgentId) -> AgentState | None:
        """Return the stored state for *agent_id*, or None if there is none."""

    @abstractmethod
    async def delete_state(self, agent_id: AgentId) -> bool:
        """Delete stored state; return True if something was deleted."""

    @abstractmethod
    async def list_agents(self) -> list[AgentId]:
        """Return the ids of all agents with stored state."""

    @abstractmethod
    async def exists(self, agent_id: AgentId) -> bool:
        """Return True if state is stored for *agent_id*."""


class FileSystemStateStore(StateStore):
    """Stores each agent's state as a JSON file named ``<type>_<key>.json``."""

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    def _state_path(self, agent_id: AgentId) -> Path:
        return self.base_dir / f"{agent_id.type}_{agent_id.key}.json"

    def _write(self, state: AgentState) -> None:
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StateError(f"Failed to create state directory: {exc}") from exc
        try:
            text = json.dumps(state.to_dict(), indent=2)
        except (TypeError, ValueError) as exc:
            raise StateError(f"Failed to serialize state: {exc}") from exc
        try:
            self._state_path(state.agent_id).write_text(text, encoding="utf-8")
        except OSError as exc:
            raise StateError(f"Failed to write state file: {exc}") from exc

    def _read(self, agent_id: AgentId) -> AgentState | None:
        path = self._state_path(agent_id)
        if not path.exists():
            return None
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StateError(f"Failed to read state file: {exc}") from exc
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise StateError(f"Failed to deserialize state: {exc}") from exc
        if not isinstance(data, Mapping):
            raise StateError("Failed to deserialize state: expected a JSON object")
        state = AgentState.from_dict(data)
        state.validate()
        return state

    def _delete(self, agent_id: AgentId) -> bool:
        path = self._state_path(agent_id)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as exc:
            raise StateError(f"Failed to delete state file: {exc}") from exc
        return True

    def _list(self) -> list[AgentId]:
        if not self.base_dir.exists():
            return []
        try:
            entries = sorted(self.base_dir.iterdir())
        except OSError as exc:
            raise StateError(f"Failed to read state directory: {exc}") from exc
        agents = []
        for path in entries:
            if not (path.is_file() and path.suffix == ".json"):
                continue
            # The key may itself contain underscores, so split at the first one.
            agent_type, sep, key = path.stem.partition("_")
            if sep and agent_type and key:
                agents.append(AgentId(agent_type, key))
        return agents

    async def save_state(self, state: AgentState) -> None:
        await asyncio.to_thread(self._write, state)

    async def load_state(self, agent_id: AgentId) -> AgentState | None:
        return await asyncio.to_thread(self._read, agent_id)

    async def delete_state(self, agent_id: AgentId) -> bool:
        return await asyncio.to_thread(self._delete, agent_id)

    async def list_agents(self) -> list[AgentId]:
        return await asyncio.to_thread(self._list)

    async def exists(self, agent_id: AgentId) -> bool:
        return await asyncio.to_thread(self._state_path(agent_id).exists)


class StateManager:
    """High-level access to agent state held in a StateStore."""

    def __init__(self, store: StateStore) -> None:
        self.store = store

    async def save_agent_state(self, agent_id: AgentId, state: Mapping[str, Any]) -> None:
        agent_state = AgentState(agent_id, {k: _to_json_value(v) for k, v in state.items()})
        agent_state.validate()
        await self.store.save_state(agent_state)

    async def load_agent_state(self, agent_id: AgentId) -> dict[str, Any] | None:
        agent_state = await self.store.load_state(agent_id)
        return None if agent_state is None else agent_state.state

    async def delete_agent_state(self, agent_id: AgentId) -> bool:
        return await self.store.delete_state(agent_id)

    async def has_state(self, agent_id: AgentId) -> bool:
        return await self.store.exists(agent_id)

    async def list_agents(self) -> list[AgentId]:
        return await self.store.list_agents()