"""
Structural diff between an original and a transformed content document.

Produces a flat list of DiffEntry records addressed by field path
(``a.b[1]``). Values are compared by their display form: representation-only
differences (e.g. 1 vs 1.0) are not reported.
"""

import json
from dataclasses import dataclass
from typing import Any

from brandswap.services.content_tree import CIRCULAR_REFERENCE_MARKER, MISSING

NOT_SET = "(not set)"
EMPTY = "(empty)"
EMPTY_STRING = "(empty string)"


@dataclass(frozen=True)
class DiffEntry:
    """One before/after change at a field path."""

    field: str
    before: str
    after: str
    brandkit_approved: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"field": self.field, "before": self.before, "after": self.after}
        if self.brandkit_approved is not None:
            data["brandkit_approved"] = self.brandkit_approved
        return data


def format_value_for_diff(value: Any) -> str:
    """Render a value the way it is shown to the operator in a diff."""
    if value is MISSING:
        return NOT_SET
    if value is None:
        return EMPTY
    if isinstance(value, str):
        return EMPTY_STRING if not value.strip() else value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list) and not value:
        return "[]"
    if isinstance(value, dict) and not value:
        return "{}"
    if isinstance(value, (list, dict)):
        try:
            return json.dumps(value, indent=2, ensure_ascii=False, default=str)
        except ValueError:
            # json refuses self-referencing containers
            return CIRCULAR_REFERENCE_MARKER
    return str(value)


def _child_path(parent: str, key: Any) -> str:
    return f"{parent}.{key}" if parent else str(key)


def diff_documents(original: Any, updated: Any, path: str = "") -> list[DiffEntry]:
    """
    Recursively compare ``original`` and ``updated``.

    Lists are compared element-wise (the shorter side padded with MISSING),
    dicts over the union of keys (original's keys first, then keys only present
    in ``updated``). Anything else that differs yields a single entry at
    ``path``, which covers additions, removals and type changes.
    """
    if original is updated:
        return []

    before = format_value_for_diff(original)
    after = format_value_for_diff(updated)
    if before == after:
        return []

    if isinstance(original, list) and isinstance(updated, list):
        diffs: list[DiffEntry] = []
        for i in range(max(len(original), len(updated))):
            old = original[i] if i < len(original) else MISSING
            new = updated[i] if i < len(updated) else MISSING
            diffs.extend(diff_documents(old, new, f"{path}[{i}]"))
        return diffs

    if isinstance(original, dict) and isinstance(updated, dict):
        diffs = []
        keys = list(original.keys()) + [key for key in updated.keys() if key not in original]
        for key in keys:
            diffs.extend(
                diff_documents(
                    original.get(key, MISSING),
                    updated.get(key, MISSING),
                    _child_path(path, key),
                )
            )
        return diffs

    return [DiffEntry(field=path, before=before, after=after)]
