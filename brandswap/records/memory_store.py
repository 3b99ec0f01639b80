# brandswap/records/memory_store.py
"""
In-memory record store for development and testing.

Mimics the Contentstack store's behaviour (deep copies in and out, uid is
never overwritten by a persist) but keeps everything in a dict.
NOT for production use.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any

from brandswap.records.base import ContentTypeSummary, RecordNotFoundError, RecordStore

logger = logging.getLogger(__name__)


class InMemoryRecordStore(RecordStore):
    """
    Dict-backed record store.

    Seed format (JSON file or ``content_types`` argument):
        {
          "blog_post": {
            "title": "Blog Post",
            "description": "...",
            "entries": [{"uid": "e1", "title": "...", ...}]
          }
        }
    """

    def __init__(
        self,
        content_types: dict[str, dict[str, Any]] | None = None,
        seed_path: str | None = None,
    ):
        if content_types is None and seed_path:
            content_types = json.loads(Path(seed_path).read_text(encoding="utf-8"))
            logger.info(f"In-memory record store seeded from {seed_path}")

        self._types: dict[str, dict[str, Any]] = {}
        self._entries: dict[str, dict[str, dict[str, Any]]] = {}
        for type_uid, definition in (content_types or {}).items():
            self.add_type(type_uid, definition.get("title", type_uid), definition.get("description"))
            for entry in definition.get("entries", []):
                self.add_entry(type_uid, entry)

    @property
    def name(self) -> str:
        return "memory"

    def add_type(self, type_uid: str, title: str, description: str | None = None) -> None:
        self._types[type_uid] = {"uid": type_uid, "title": title, "description": description}
        self._entries.setdefault(type_uid, {})

    def add_entry(self, type_uid: str, entry: dict[str, Any]) -> None:
        if type_uid not in self._types:
            self.add_type(type_uid, type_uid)
        self._entries[type_uid][entry["uid"]] = copy.deepcopy(entry)

    def get_entry(self, type_uid: str, entry_uid: str) -> dict[str, Any] | None:
        """Direct read for inspection (returns a copy)."""
        entry = self._entries.get(type_uid, {}).get(entry_uid)
        return copy.deepcopy(entry) if entry is not None else None

    async def list_types(self) -> list[ContentTypeSummary]:
        summaries = []
        for type_uid, meta in self._types.items():
            field_names: set[str] = set()
            for entry in self._entries[type_uid].values():
                field_names.update(entry.keys())
            summaries.append(
                ContentTypeSummary(
                    uid=type_uid,
                    title=meta["title"],
                    description=meta["description"],
                    field_count=len(field_names),
                )
            )
        return summaries

    async def list_entries(self, type_uid: str) -> list[dict[str, Any]]:
        return [copy.deepcopy(entry) for entry in self._entries.get(type_uid, {}).values()]

    async def fetch_by_ids(self, type_uid: str, entry_uids: list[str]) -> list[dict[str, Any]]:
        if not entry_uids:
            return []
        entries = self._entries.get(type_uid, {})
        return [copy.deepcopy(entries[uid]) for uid in entry_uids if uid in entries]

    async def persist(self, type_uid: str, entry_uid: str, document: dict[str, Any]) -> dict[str, Any]:
        entries = self._entries.get(type_uid, {})
        if entry_uid not in entries:
            raise RecordNotFoundError(f"Entry with UID {entry_uid} not found in content type {type_uid}")

        stored = entries[entry_uid]
        for key, value in document.items():
            if key != "uid":
                stored[key] = copy.deepcopy(value)
        return copy.deepcopy(stored)
