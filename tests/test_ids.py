import json

import pytest

from agentweave.ids import (
    AgentId,
    InvalidIdentifierError,
    TopicId,
    default_topic_id,
    is_valid_topic_type,
)


def test_topic_id_creation():
    topic = TopicId("user.message", "session_1")
    assert topic.type == "user.message"
    assert topic.source == "session_1"


@pytest.mark.parametrize(
    "topic_type", ["user.message", "user-message", "user_message", "user:message", "user=message"]
)
def test_topic_id_valid_types(topic_type):
    assert TopicId(topic_type, "source").type == topic_type
    assert is_valid_topic_type(topic_type)


@pytest.mark.parametrize("topic_type", ["user message", "user@message", "", "line\n"])
def test_topic_id_invalid_types(topic_type):
    assert not is_valid_topic_type(topic_type)
    with pytest.raises(InvalidIdentifierError) as info:
        TopicId(topic_type, "source")
    assert info.value.field == "topic_type"
    assert info.value.value == topic_type


def test_topic_id_display():
    assert str(TopicId("user.message", "session_1")) == "user.message@session_1"


def test_default_topic_id():
    default_topic = default_topic_id()
    assert default_topic.type == "default"
    assert default_topic.source == "default"

    custom = default_topic_id("user.input", "session_1")
    assert custom.type == "user.input"
    assert custom.source == "session_1"


def test_default_topic_id_rejects_invalid_type():
    with pytest.raises(InvalidIdentifierError):
        default_topic_id("bad type")


def test_topic_id_serialization_round_trip():
    topic = TopicId("user.message", "session_1")
    encoded = json.dumps(topic.to_dict())
    assert json.loads(encoded) == {"type": "user.message", "source": "session_1"}
    assert TopicId.from_dict(json.loads(encoded)) == topic


def test_topic_id_from_dict_missing_field():
    with pytest.raises(InvalidIdentifierError):
        TopicId.from_dict({"type": "user.message"})


def test_topic_id_hashable_and_equal():
    a = TopicId("t", "s")
    b = TopicId("t", "s")
    assert a == b
    assert len({a, b}) == 1


def test_agent_id_display_and_round_trip():
    agent = AgentId("test_agent", "instance_1")
    assert str(agent) == "test_agent/instance_1"
    assert agent.to_dict() == {"type": "test_agent", "key": "instance_1"}
    assert AgentId.from_dict(agent.to_dict()) == agent


def test_agent_id_rejects_non_string():
    with pytest.raises(InvalidIdentifierError):
        AgentId("test", 5)