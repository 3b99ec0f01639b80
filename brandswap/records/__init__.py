# brandswap/records/__init__.py
"""
Record store abstraction for content entries.

Entries live in a headless CMS (Contentstack); this module provides a clean
async interface for listing, fetching and persisting them.
"""

from brandswap.records.base import (
    ContentTypeSummary,
    RecordNotFoundError,
    RecordStore,
    RecordStoreError,
)
from brandswap.records.contentstack_store import ContentstackRecordStore
from brandswap.records.factory import (
    get_record_store,
    reset_record_store,
    set_record_store,
)
from brandswap.records.memory_store import InMemoryRecordStore

__all__ = [
    "RecordStore",
    "RecordStoreError",
    "RecordNotFoundError",
    "ContentTypeSummary",
    "ContentstackRecordStore",
    "InMemoryRecordStore",
    "get_record_store",
    "set_record_store",
    "reset_record_store",
]
