import json

import pytest

from agentweave.ids import AgentId
from agentweave.state import (
    AgentState,
    FileSystemStateStore,
    StateError,
    StateManager,
    StateMetadata,
)


def test_agent_state_operations():
    state = AgentState(AgentId("test", "agent"))
    state.set("counter", 42)
    state.set("name", "test_agent")

    assert state.get("counter") == 42
    assert state.get("name") == "test_agent"

    removed = state.remove("counter")
    assert removed == 42
    assert "counter" not in state


def test_get_missing_returns_default():
    state = AgentState(AgentId("test", "agent"))
    assert state.get("missing") is None
    assert state.get("missing", 7) == 7


def test_set_normalises_to_json_form():
    state = AgentState(AgentId("test", "agent"))
    state.set("pair", (1, 2))
    assert state.get("pair") == [1, 2]


def test_set_rejects_unserialisable_value():
    state = AgentState(AgentId("test", "agent"))
    with pytest.raises(StateError):
        state.set("bad", object())
    assert state.keys() == []
    assert state.metadata.modification_count == 0


def test_modification_count_tracks_changes():
    state = AgentState(AgentId("test", "agent"))
    assert state.metadata.modification_count == 0
    state.set("a", 1)
    state.set("b", 2)
    assert state.remove("missing") is None
    assert state.metadata.modification_count == 2
    state.remove("a")
    assert state.metadata.modification_count == 3
    state.clear()
    assert state.keys() == []
    assert state.metadata.modification_count == 4


def test_metadata_set_custom():
    metadata = StateMetadata()
    metadata.set_custom("owner", "team")
    assert metadata.custom == {"owner": "team"}
    assert metadata.modification_count == 1


def test_keys_in_insertion_order():
    state = AgentState(AgentId("test", "agent"))
    state.set("x", 1)
    state.set("y", 2)
    assert state.keys() == ["x", "y"]


@pytest.mark.parametrize("agent_id", [AgentId("", "key"), AgentId("type", "")])
def test_validate_rejects_empty_id_parts(agent_id):
    with pytest.raises(StateError):
        AgentState(agent_id).validate()


def test_to_dict_round_trip():
    state = AgentState(AgentId("test", "agent"), {"v": {"n": [1, 2]}})
    state.metadata.set_custom("k", "v")
    data = state.to_dict()
    assert data["version"] == 1
    assert data["agent_id"] == {"type": "test", "key": "agent"}
    restored = AgentState.from_dict(json.loads(json.dumps(data)))
    assert restored == state


def test_from_dict_missing_field_raises():
    with pytest.raises(StateError):
        AgentState.from_dict({"agent_id": {"type": "a", "key": "b"}, "state": {}})


@pytest.mark.asyncio
async def test_filesystem_state_store(tmp_path):
    store = FileSystemStateStore(tmp_path / "state")
    agent_id = AgentId("test", "fs_agent")
    state = AgentState(agent_id, {"test_key": "test_value"})

    await store.save_state(state)
    assert await store.exists(agent_id)
    assert (tmp_path / "state" / "test_fs_agent.json").is_file()

    loaded = await store.load_state(agent_id)
    assert loaded is not None
    assert loaded.agent_id == agent_id
    assert loaded.state.get("test_key") == "test_value"

    agents = await store.list_agents()
    assert agent_id in agents

    assert await store.delete_state(agent_id)
    assert not await store.exists(agent_id)
    assert not await store.delete_state(agent_id)


@pytest.mark.asyncio
async def test_load_missing_returns_none(tmp_path):
    store = FileSystemStateStore(tmp_path)
    assert await store.load_state(AgentId("a", "b")) is None


@pytest.mark.asyncio
async def test_list_agents_missing_dir_is_empty(tmp_path):
    store = FileSystemStateStore(tmp_path / "nowhere")
    assert await store.list_agents() == []


@pytest.mark.asyncio
async def test_list_agents_ignores_non_json_files(tmp_path):
    store = FileSystemStateStore(tmp_path)
    await store.save_state(AgentState(AgentId("alpha", "one_two")))
    (tmp_path / "notes.txt").write_text("x")
    (tmp_path / "nounderscore.json").write_text("{}")
    assert await store.list_agents() == [AgentId("alpha", "one_two")]


@pytest.mark.asyncio
async def test_load_corrupt_file_raises(tmp_path):
    store = FileSystemStateStore(tmp_path)
    (tmp_path / "bad_agent.json").write_text("not json")
    with pytest.raises(StateError):
        await store.load_state(AgentId("bad", "agent"))


@pytest.mark.asyncio
async def test_state_manager(tmp_path):
    manager = StateManager(FileSystemStateStore(tmp_path))
    agent_id = AgentId("test", "manager_agent")
    state_data = {"value": 123}

    await manager.save_agent_state(agent_id, state_data)
    assert await manager.has_state(agent_id)
    assert await manager.load_agent_state(agent_id) == state_data
    assert await manager.list_agents() == [agent_id]

    assert await manager.delete_agent_state(agent_id)
    assert not await manager.has_state(agent_id)
    assert await manager.load_agent_state(agent_id) is None


@pytest.mark.asyncio
async def test_state_manager_rejects_invalid_id(tmp_path):
    manager = StateManager(FileSystemStateStore(tmp_path))
    with pytest.raises(StateError):
        await manager.save_agent_state(AgentId("", "x"), {"a": 1})
    assert await manager.list_agents() == []