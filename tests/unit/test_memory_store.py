# tests/unit/test_memory_store.py
"""
Unit tests for the in-memory record store.
"""

import json

import pytest

from brandswap.records.base import RecordNotFoundError
from brandswap.records.memory_store import InMemoryRecordStore


class TestInMemoryRecordStore:
    @pytest.mark.asyncio
    async def test_list_types_counts_fields(self, memory_store):
        types = await memory_store.list_types()
        assert [t.uid for t in types] == ["blog_post"]
        # uid, title, updated_at, created_at, body, seo, views
        assert types[0].field_count == 7

    @pytest.mark.asyncio
    async def test_fetch_returns_copies(self, memory_store):
        entries = await memory_store.fetch_by_ids("blog_post", ["blt001"])
        entries[0]["title"] = "mutated"
        assert memory_store.get_entry("blog_post", "blt001")["title"] == "Climbing Everest"

    @pytest.mark.asyncio
    async def test_fetch_preserves_request_order_and_skips_unknown(self, memory_store):
        entries = await memory_store.fetch_by_ids("blog_post", ["blt002", "ghost", "blt001"])
        assert [e["uid"] for e in entries] == ["blt002", "blt001"]

    @pytest.mark.asyncio
    async def test_fetch_empty(self, memory_store):
        assert await memory_store.fetch_by_ids("blog_post", []) == []

    @pytest.mark.asyncio
    async def test_persist_keeps_uid(self, memory_store):
        stored = await memory_store.persist("blog_post", "blt001", {"uid": "other", "title": "New"})
        assert stored["uid"] == "blt001"
        assert stored["title"] == "New"

    @pytest.mark.asyncio
    async def test_persist_unknown_entry(self, memory_store):
        with pytest.raises(RecordNotFoundError):
            await memory_store.persist("blog_post", "ghost", {"title": "x"})

    @pytest.mark.asyncio
    async def test_seed_file(self, tmp_path):
        seed = tmp_path / "seed.json"
        seed.write_text(json.dumps({"page": {"title": "Page", "entries": [{"uid": "p1", "title": "Home"}]}}))

        store = InMemoryRecordStore(seed_path=str(seed))
        entries = await store.list_entries("page")
        assert entries == [{"uid": "p1", "title": "Home"}]

    @pytest.mark.asyncio
    async def test_unknown_type_is_empty(self, memory_store):
        assert await memory_store.list_entries("nope") == []
