"""Helpers for pulling JSON out of free text and reshaping JSON values."""

from __future__ import annotations

import copy
import json
import re
from typing import Any

__all__ = [
    "JsonExtractionError",
    "JsonParseError",
    "InvalidLanguageError",
    "NoJsonFoundError",
    "extract_json_from_str",
    "extract_single_json_from_str",
    "is_valid_json",
    "pretty_print_json",
    "merge_json_objects",
    "flatten_json",
]

_CODE_BLOCK_RE = re.compile(r"```(?:\s*([\w\+\-]+))?\n([\s\S]*?)```")


class JsonExtractionError(ValueError):
    """Base class for failures while extracting JSON from text."""


class JsonParseError(JsonExtractionError):
    """The text that should hold JSON is not well-formed JSON."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"JSON parsing error: {cause}")
        self.cause = cause


class InvalidLanguageError(JsonExtractionError):
    """A fenced code block names a language other than JSON."""

    def __init__(self, language: str) -> None:
        super().__init__(f"Expected JSON object, but found language: {language}")
        self.language = language


class NoJsonFoundError(JsonExtractionError):
    """The input holds no JSON content at all."""

    def __init__(self) -> None:
        super().__init__("No JSON content found in the input string")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def _loads(text: str) -> Any:
    """Strict JSON parse: no NaN or Infinity literals."""
    return json.loads(text, parse_constant=_reject_constant)


def _parse(text: str) -> Any:
    try:
        return _loads(text)
    except ValueError as exc:
        raise JsonParseError(exc) from exc


def extract_json_from_str(content: str) -> list[Any]:
    """Extract JSON values from *content*.

    Fenced code blocks (with no language or the language ``json``) are parsed
    one by one; without any code block the whole text is parsed as JSON.
    """
    matches = list(_CODE_BLOCK_RE.finditer(content))
    if not matches:
        trimmed = content.strip()
        if not trimmed:
            raise NoJsonFoundError()
        return [_parse(trimmed)]

    results = []
    for match in matches:
        language = (match.group(1) or "").strip()
        if language and language.lower() != "json":
            raise InvalidLanguageError(language)
        results.append(_parse(match.group(2)))
    return results


def extract_single_json_from_str(content: str) -> Any:
    """Return the first JSON value found in *content*."""
    results = extract_json_from_str(content)
    if not results:
        raise NoJsonFoundError()
    return results[0]


def is_valid_json(content: str) -> bool:
    """Return True if *content* as a whole is a valid JSON document."""
    try:
        _loads(content)
    except ValueError:
        return False
    return True


def pretty_print_json(value: Any) -> str:
    """Format *value* as indented JSON text."""
    return json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False)


def merge_json_objects(base: Any, overlay: Any) -> Any:
    """Merge *overlay* onto *base*, recursing where both sides are objects.

    Where either side is not an object, the overlay value wins. Neither input
    is modified.
    """
    if not (isinstance(base, dict) and isinstance(overlay, dict)):
        return copy.deepcopy(overlay)
    result = copy.deepcopy(base)
    for key, value in overlay.items():
        if key in result:
            result[key] = merge_json_objects(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def flatten_json(value: Any, prefix: str | None = None) -> dict[str, Any]:
    """Flatten nested objects into one object with dot-separated keys.

    A value that is not an object becomes a single entry under *prefix*, or
    under ``"value"`` when no prefix is given.
    """
    if not isinstance(value, dict):
        return {prefix if prefix is not None else "value": copy.deepcopy(value)}

    result: dict[str, Any] = {}
    for key, item in value.items():
        new_key = f"{prefix}.{key}" if prefix is not None else key
        if isinstance(item, dict):
            result.update(flatten_json(item, new_key))
        else:
            result[new_key] = copy.deepcopy(item)
    return result