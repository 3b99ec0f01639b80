"""
Find every string leaf in an entry that contains a query (case-insensitive).
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class ScanMatch:
    entry_uid: str
    field: str
    before: str
    title: str = "(no title)"
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "entryUid": self.entry_uid,
            "field": self.field,
            "before": self.before,
            "title": self.title,
            "updated_at": self.updated_at,
        }


def scan_document(node: Any, query: str, entry_uid: str, path: str = "") -> list[ScanMatch]:
    """Return one match per string leaf of ``node`` containing ``query``."""
    matches: list[ScanMatch] = []
    _scan(node, query.lower(), entry_uid, path, matches, set())
    return matches


def _scan(node: Any, needle: str, entry_uid: str, path: str, matches: list[ScanMatch], seen: set[int]) -> None:
    if node is None:
        return
    if isinstance(node, str):
        if needle in node.lower():
            matches.append(ScanMatch(entry_uid=entry_uid, field=path, before=node))
        return
    if not isinstance(node, (list, dict)) or id(node) in seen:
        return
    seen.add(id(node))

    if isinstance(node, list):
        for index, item in enumerate(node):
            _scan(item, needle, entry_uid, f"{path}[{index}]", matches, seen)
    else:
        for key, child in node.items():
            _scan(child, needle, entry_uid, f"{path}.{key}" if path else str(key), matches, seen)


def scan_entries(entries: list[dict[str, Any]], query: str) -> list[ScanMatch]:
    """Scan entries and enrich each match with its entry's title and update time."""
    results: list[ScanMatch] = []
    for entry in entries:
        uid = entry.get("uid", "")
        for match in scan_document(entry, query, uid):
            match.title = entry.get("title") or "(no title)"
            match.updated_at = entry.get("updated_at")
            results.append(match)
    return results
