"""Describe JSON Schemas as type structures and validate data against them."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

__all__ = [
    "SchemaToStructError",
    "SchemaValidationError",
    "SchemaInfo",
    "PrimitiveInfo",
    "ObjectInfo",
    "ArrayInfo",
    "EnumInfo",
    "UnionInfo",
    "JsonSchemaProcessor",
    "schema_to_struct",
    "validate_json_against_schema",
]

_ANY = "Any"

_STRING_FORMATS = {
    "email": "str",
    "uri": "str",
    "url": "str",
    "date-time": "datetime.datetime",
    "date": "datetime.date",
    "time": "datetime.time",
    "uuid": "uuid.UUID",
}


class SchemaToStructError(ValueError):
    """A schema uses a feature that is unsupported or is malformed."""


class SchemaValidationError(ValueError):
    """A schema could not be compiled, or data does not conform to it."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


class SchemaInfo(ABC):
    """Type information extracted from a JSON Schema."""

    @abstractmethod
    def type_string(self) -> str:
        """The type annotation this information stands for."""


@dataclass
class PrimitiveInfo(SchemaInfo):
    """A scalar or otherwise opaque type."""

    type_name: str

    def type_string(self) -> str:
        return self.type_name


@dataclass
class ObjectInfo(SchemaInfo):
    """An object with named properties, each mapped to its type string."""

    name: str
    properties: dict[str, str] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)

    def type_string(self) -> str:
        return self.name


@dataclass
class ArrayInfo(SchemaInfo):
    """A homogeneous list."""

    item_type: SchemaInfo

    def type_string(self) -> str:
        return f"list[{self.item_type.type_string()}]"


@dataclass
class EnumInfo(SchemaInfo):
    """A string restricted to a fixed set of values."""

    variants: list[str] = field(default_factory=list)

    def type_string(self) -> str:
        return "str"


@dataclass
class UnionInfo(SchemaInfo):
    """A oneOf/anyOf union of alternative schemas."""

    name: str
    variants: list[SchemaInfo] = field(default_factory=list)
    union_type: str = "oneOf"

    def type_string(self) -> str:
        return self.name


def _lookup(schema: Any, key: str) -> Any:
    """Return ``(True, value)`` style lookup as a sentinel-free helper."""
    if isinstance(schema, dict) and key in schema:
        return schema[key]
    return _MISSING


_MISSING = object()


class JsonSchemaProcessor:
    """Turns JSON Schemas into SchemaInfo trees, resolving local references."""

    def process_schema(self, schema: Any, name: str) -> SchemaInfo:
        """Describe *schema* as a structure called *name*."""
        return self._process(schema, name, schema)

    def _process(self, schema: Any, name: str, root: Any) -> SchemaInfo:
        ref = _lookup(schema, "$ref")
        if isinstance(ref, str):
            return self._resolve_reference(ref, root, name)

        all_of = _lookup(schema, "allOf")
        if all_of is not _MISSING:
            return self._all_of(all_of, name, root)

        for union_type in ("oneOf", "anyOf"):
            alternatives = _lookup(schema, union_type)
            if alternatives is not _MISSING:
                return self._union(alternatives, name, root, union_type)

        schema_type = _lookup(schema, "type")
        if schema_type is _MISSING:
            if _lookup(schema, "properties") is not _MISSING:
                return self._object(schema, name, root)
            return PrimitiveInfo(_ANY)

        if schema_type == "object":
            return self._object(schema, name, root)
        if schema_type == "array":
            return self._array(schema, name, root)
        if schema_type == "string":
            return self._string(schema)
        if schema_type in ("number", "integer"):
            return PrimitiveInfo("int" if schema_type == "integer" else "float")
        if schema_type == "boolean":
            return PrimitiveInfo("bool")
        if schema_type == "null":
            return PrimitiveInfo("None")
        raise SchemaToStructError(
            f"Unsupported schema feature: Unsupported type: {json.dumps(schema_type)}"
        )

    def _resolve_reference(self, ref: str, root: Any, name: str) -> SchemaInfo:
        if not ref.startswith("#/"):
            raise SchemaToStructError(
                f"Unsupported schema feature: External references not supported: {ref}"
            )
        current = root
        for part in ref[2:].split("/"):
            current = _lookup(current, part)
            if current is _MISSING:
                raise SchemaToStructError(
                    f"Invalid schema format: Reference not found: {ref}"
                )
        return self._process(current, name, root)

    def _all_of(self, schemas: Any, name: str, root: Any) -> SchemaInfo:
        if not isinstance(schemas, list):
            raise SchemaToStructError("Invalid schema format: allOf must be an array")
        properties: dict[str, str] = {}
        required: list[str] = []
        for sub in schemas:
            info = self._process(sub, name, root)
            if isinstance(info, ObjectInfo):
                properties.update(info.properties)
                required.extend(info.required)
        return ObjectInfo(name, properties, required)

    def _union(self, schemas: Any, name: str, root: Any, union_type: str) -> SchemaInfo:
        if not isinstance(schemas, list):
            raise SchemaToStructError(
                f"Invalid schema format: {union_type} must be an array"
            )
        variants = [
            self._process(sub, f"{name}Variant{index}", root)
            for index, sub in enumerate(schemas)
        ]
        return UnionInfo(name, variants, union_type)

    def _object(self, schema: Any, name: str, root: Any) -> SchemaInfo:
        properties = _lookup(schema, "properties")
        if not isinstance(properties, dict):
            properties = {}
        required = _lookup(schema, "required")
        required_names = (
            [item for item in required if isinstance(item, str)]
            if isinstance(required, list)
            else []
        )
        processed = {
            prop_name: self._process(prop_schema, f"{name}_{prop_name}", root).type_string()
            for prop_name, prop_schema in properties.items()
        }
        return ObjectInfo(name, processed, required_names)

    def _array(self, schema: Any, name: str, root: Any) -> SchemaInfo:
        items = _lookup(schema, "items")
        if items is _MISSING:
            return ArrayInfo(PrimitiveInfo(_ANY))
        return ArrayInfo(self._process(items, f"{name}Item", root))

    @staticmethod
    def _string(schema: Any) -> SchemaInfo:
        values = _lookup(schema, "enum")
        if isinstance(values, list):
            return EnumInfo([value for value in values if isinstance(value, str)])
        fmt = _lookup(schema, "format")
        if isinstance(fmt, str):
            return PrimitiveInfo(_STRING_FORMATS.get(fmt, "str"))
        return PrimitiveInfo("str")


def schema_to_struct(schema: Any, name: str) -> SchemaInfo:
    """Describe *schema* as a structure called *name*."""
    return JsonSchemaProcessor().process_schema(schema, name)


def validate_json_against_schema(schema: Any, data: Any) -> None:
    """Raise SchemaValidationError unless *data* conforms to *schema*."""
    if not isinstance(schema, (dict, bool)):
        raise SchemaValidationError(
            "Schema compilation error: schema must be an object or a boolean"
        )
    validator_cls = validator_for(schema)
    try:
        validator_cls.check_schema(schema)
    except SchemaError as exc:
        raise SchemaValidationError(f"Schema compilation error: {exc.message}") from exc
    messages = [error.message for error in validator_cls(schema).iter_errors(data)]
    if messages:
        raise SchemaValidationError(
            "Validation failed: " + "; ".join(messages), messages
        )