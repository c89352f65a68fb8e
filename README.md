# agentweave

Building blocks for agent-based systems. The package has five modules:

- `agentweave.ids` holds the identifiers `AgentId` and `TopicId`.
- `agentweave.subscription` decides which agents a published message concerns.
- `agentweave.state` holds agent state and stores it as JSON files.
- `agentweave.json_utils` pulls JSON out of free text and reshapes JSON values.
- `agentweave.schema_utils` describes JSON Schemas as type trees and validates data against them.

## Installation

```
pip install agentweave
```

`jsonschema` is the only dependency.

## Identifiers (`agentweave.ids`)

- `AgentId(type, key)` is a frozen dataclass. `str()` gives `"type/key"`.
- `TopicId(type, source)` is a frozen dataclass. `str()` gives `"type@source"`. The topic type must match `^[\w\-\.\:=]+\Z`. Otherwise `InvalidIdentifierError` (a `ValueError`) is raised. You can use `is_valid_topic_type(value)` to check a string beforehand.
- Both classes have `to_dict()` and `from_dict(data)`. Both use the keys `type` and `key`/`source`.
- `default_topic_id(topic_type="default", source="default")` builds a `TopicId` and fills in `"default"` for any part you leave out.

## Subscriptions (`agentweave.subscription`)

Every subscription has `matches(topic_id, message_type)` and `description()`. In the table, `message_type` is a Python class.

| Class | Matches |
|---|---|
| `DefaultSubscription()` | every message |
| `TypeSubscription(message_type, name=None)` | exactly that class, on any topic. `type_name()` returns `name`, or the class's `module.qualname` |
| `TopicSubscription(topic_id)` | messages on that topic, of any type |
| `TypePrefixSubscription(type_prefix)` | classes whose `module.qualname` starts with the prefix |
| `CombinedSubscription.all_of(subs)` / `.any_of(subs)` | all / any of the given subscriptions |

`SubscriptionRegistry` records subscriptions per agent:

```python
from agentweave.ids import AgentId, TopicId
from agentweave.subscription import SubscriptionRegistry, TopicSubscription

registry = SubscriptionRegistry()
agent = AgentId("assistant", "instance_1")
topic = TopicId("user.message", "session_1")

registry.subscribe(agent, TopicSubscription(topic))
registry.find_matching_agents(topic, str)   # {AgentId(type='assistant', key='instance_1')}
registry.agent_subscriptions(agent)         # ['TopicSubscription(user.message@session_1)']
registry.unsubscribe_all(agent)
```

## Agent state (`agentweave.state`)

`AgentState(agent_id, state={}, metadata=StateMetadata(), version=1)` is a key/value store for one agent:

- `set(key, value)` accepts only values that can be serialised to JSON. It stores the value's plain JSON form, so a tuple becomes a list. Otherwise it raises `StateError`.
- `get(key, default=None)` returns a copy of the stored value.
- `remove(key)` returns the removed value, or `None` if the key was absent.
- `keys()`, `clear()` and `key in state` work as you would expect.
- `set`, a successful `remove`, and `clear` each increase `metadata.modification_count`.
- `validate()` raises `StateError` if the agent type or key is empty.
- `to_dict()` and `from_dict(data)` convert to and from a plain dict.

`StateMetadata` has a `checksum`, a `custom` string map and a `modification_count`. `set_custom(key, value)` sets a custom field and counts it as a modification.

`StateStore` is the abstract, asynchronous storage interface. Its methods are `save_state`, `load_state`, `delete_state`, `list_agents` and `exists`. `FileSystemStateStore(base_dir)` implements it:

- Each agent's state goes in its own file, `<type>_<key>.json`, as indented JSON.
- The directory is created on the first save.
- Loaded files are validated.
- `list_agents()` rebuilds ids from the file names by splitting at the first underscore. An agent type that itself contains an underscore is therefore read back wrongly.
- Failures raise `StateError`.

`StateManager(store)` works on plain dicts on top of any store:

```python
import asyncio
from agentweave.ids import AgentId
from agentweave.state import FileSystemStateStore, StateManager

async def main():
    manager = StateManager(FileSystemStateStore("state-dir"))
    agent = AgentId("assistant", "instance_1")
    await manager.save_agent_state(agent, {"counter": 42})
    print(await manager.has_state(agent))          # True
    print(await manager.load_agent_state(agent))   # {'counter': 42}
    print(await manager.delete_agent_state(agent)) # True

asyncio.run(main())
```

## JSON helpers (`agentweave.json_utils`)

`extract_json_from_str(content)` returns a list of parsed values:

- Each fenced code block that names no language, or names `json`, is parsed.
- If the text has no code block at all, the whole trimmed text is parsed.
- Errors are raised as subclasses of `JsonExtractionError` (a `ValueError`):
  - `JsonParseError` for malformed JSON. `NaN` and `Infinity` are rejected.
  - `InvalidLanguageError` when a block names another language. The language is available as `.language`.
  - `NoJsonFoundError` for blank input.

```python
from agentweave.json_utils import extract_json_from_str, flatten_json, merge_json_objects

extract_json_from_str("Here it is:\n```json\n{\"name\": \"test\"}\n```\n")  # [{'name': 'test'}]
merge_json_objects({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})  # {'a': 1, 'b': {'c': 2, 'd': 3}}
flatten_json({"a": {"b": {"c": 1}}, "d": 2})                   # {'a.b.c': 1, 'd': 2}
```

Other helpers in the module:

- `extract_single_json_from_str` returns the first value found.
- `is_valid_json` checks whether a whole string is JSON.
- `pretty_print_json` formats a value as indented JSON.
- `merge_json_objects` and `flatten_json` never modify their inputs. `flatten_json(value, prefix=None)` puts a value that is not an object under `prefix`, or under `"value"` if no prefix is given.

## JSON Schema helpers (`agentweave.schema_utils`)

`schema_to_struct(schema, name)` (or `JsonSchemaProcessor().process_schema`) returns a tree of `SchemaInfo` values:

- `PrimitiveInfo`
- `ObjectInfo` (name, property type strings, required names)
- `ArrayInfo`
- `EnumInfo`
- `UnionInfo` (for `oneOf`/`anyOf`)

Features of the conversion:

- Local `$ref`s (`#/...`) are resolved and `allOf` is merged.
- `type_string()` gives a Python annotation, for example `str`, `int`, `float`, `bool`, `None`, `list[str]`, `datetime.datetime` or `uuid.UUID`. Objects and unions give their name.
- Unsupported types, external references and malformed compositions raise `SchemaToStructError`.

```python
from agentweave.schema_utils import schema_to_struct, validate_json_against_schema

schema = {
    "type": "object",
    "properties": {"name": {"type": "string"}, "age": {"type": "integer"}},
    "required": ["name"],
}
info = schema_to_struct(schema, "Person")
info.properties    # {'name': 'str', 'age': 'int'}
validate_json_against_schema(schema, {"name": "Alice", "age": 30})  # returns None
```

`validate_json_against_schema(schema, data)` raises `SchemaValidationError` in two cases:

- The schema itself is invalid.
- The data does not conform. The individual messages are in `.errors`.

## What this package does not do

There is no agent runtime. Nothing in the package runs agents, queues messages or delivers them. `SubscriptionRegistry` only tells you which agents match; calling them is up to you. There are no tool-calling agents and no command-line program. State storage is limited to the JSON-file store described above.

## Running the tests

```
pip install agentweave[test]
pytest
```