# brandswap/records/factory.py
"""
Factory function for creating the record store.
"""

import logging
from typing import Optional

from brandswap.config import Settings, get_settings
from brandswap.records.base import RecordStore

logger = logging.getLogger(__name__)

# Global singleton instance
_record_store: Optional[RecordStore] = None


def get_record_store(settings: Optional[Settings] = None) -> RecordStore:
    """
    Get or create the record store instance.

    Args:
        settings: Settings to build from (default: cached application settings)

    Returns:
        RecordStore instance (singleton)

    Environment:
        RECORD_STORE_PROVIDER: 'contentstack' (default) or 'memory'
    """
    global _record_store

    if _record_store is not None:
        return _record_store

    settings = settings or get_settings()
    name = settings.RECORD_STORE_PROVIDER

    if name == "contentstack":
        from brandswap.records.contentstack_store import ContentstackRecordStore

        _record_store = ContentstackRecordStore(
            api_key=settings.CONTENTSTACK_API_KEY,
            management_token=settings.CONTENTSTACK_MANAGEMENT_TOKEN,
            base_url=settings.CONTENTSTACK_BASE_URL,
            timeout=settings.CONTENTSTACK_TIMEOUT_SECONDS,
        )
    elif name == "memory":
        from brandswap.records.memory_store import InMemoryRecordStore

        _record_store = InMemoryRecordStore(seed_path=settings.MEMORY_STORE_SEED_PATH)
    else:
        raise ValueError(f"Unknown record store provider: {name}. Available: contentstack, memory")

    logger.info(f"Record store initialized: {_record_store.name}")
    return _record_store


def set_record_store(store: RecordStore) -> None:
    """
    Set a custom record store (useful for testing).
    """
    global _record_store
    _record_store = store


def reset_record_store() -> None:
    """
    Reset the record store singleton (for testing).
    """
    global _record_store
    _record_store = None


async def close_record_store() -> None:
    """
    Close the record store's client (if one was created) and reset the singleton.
    """
    global _record_store
    if _record_store is not None:
        await _record_store.close()
    _record_store = None
