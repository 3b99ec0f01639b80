"""
Field path addressing and in-place writes for content documents.

Paths use either bracket indexes (``modules[0].title``) or dot indexes
(``modules.0.title``); both normalise to the same segment list.
"""

import json
import re
from dataclasses import dataclass
from typing import Any

_BRACKET_INDEX = re.compile(r"\[(\d+)\]")


class PathResolutionError(Exception):
    """A field path does not resolve to a writable location in the document."""

    def __init__(self, segment: str, path: str, reason: str = "missing or null"):
        self.segment = segment
        self.path = path
        super().__init__(f"Path traversal failed at key '{segment}' in path '{path}' ({reason})")


@dataclass(frozen=True)
class LiteralText:
    """A new field value written verbatim as a string."""

    value: str


@dataclass(frozen=True)
class StructuredValue:
    """A new field value that parsed as JSON (object, array, number, boolean or null)."""

    value: Any


FieldValue = LiteralText | StructuredValue


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not a JSON value")


def parse_field_value(raw: Any) -> FieldValue:
    """
    Decide how a submitted value is written.

    Strings are parsed as JSON once; if that fails they are kept as literal
    text. NaN and Infinity are not JSON and stay literal. Non-string
    submissions are already structured.
    """
    if not isinstance(raw, str):
        return StructuredValue(raw)
    try:
        return StructuredValue(json.loads(raw, parse_constant=_reject_constant))
    except (json.JSONDecodeError, ValueError):
        return LiteralText(raw)


def parse_field_path(path: str) -> list[str]:
    """Split a field path into segments, turning ``[N]`` into ``.N``."""
    normalized = _BRACKET_INDEX.sub(r".\1", path or "")
    if normalized.startswith("."):
        normalized = normalized[1:]
    if not normalized:
        raise PathResolutionError("", path or "", reason="empty path")
    return normalized.split(".")


def _list_index(segment: str, path: str) -> int:
    if not segment.isdigit():
        raise PathResolutionError(segment, path, reason="not an array index")
    return int(segment)


def _descend(current: Any, segment: str, path: str) -> Any:
    if isinstance(current, dict):
        child = current.get(segment)
    elif isinstance(current, list):
        index = _list_index(segment, path)
        child = current[index] if index < len(current) else None
    else:
        raise PathResolutionError(segment, path, reason="parent is not an object or array")

    if child is None:
        raise PathResolutionError(segment, path)
    return child


def set_nested_value(document: dict, path: str, value: FieldValue) -> None:
    """
    Write ``value`` at ``path`` inside ``document`` (in place).

    Every segment but the last must already exist and be non-null. The last
    segment may name a new object key, an existing array slot, or the slot
    just past the end of an array (append).

    Raises:
        PathResolutionError: if the path cannot be resolved.
    """
    segments = parse_field_path(path)
    current: Any = document
    for segment in segments[:-1]:
        current = _descend(current, segment, path)

    final = segments[-1]
    payload = value.value

    if isinstance(current, dict):
        current[final] = payload
    elif isinstance(current, list):
        index = _list_index(final, path)
        if index < len(current):
            current[index] = payload
        elif index == len(current):
            current.append(payload)
        else:
            raise PathResolutionError(final, path, reason="array index out of range")
    else:
        raise PathResolutionError(final, path, reason="parent is not an object or array")
