# brandswap/records/base.py
"""
Record store interface for structured content entries.

Design principles:
- Entries are returned as full nested JSON documents, never summaries
- The core only holds transient copies during a request
- Every fetch goes to the store; there is no entry cache (last-fetch-wins)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


class RecordStoreError(Exception):
    """The record store is unreachable or rejected a request."""


class RecordNotFoundError(RecordStoreError):
    """The requested entry does not exist or is not accessible."""


@dataclass
class ContentTypeSummary:
    """A content type as listed to the operator."""

    uid: str
    title: str
    description: str | None
    field_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "uid": self.uid,
            "title": self.title,
            "description": self.description,
            "schema": f"{self.field_count} fields",
        }


class RecordStore(ABC):
    """
    Abstract interface for a content record store.

    Implementations must return entries as plain dicts carrying at least
    ``uid`` and, when the content type has one, ``title``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Store name (e.g., 'contentstack', 'memory')."""
        pass

    @abstractmethod
    async def list_types(self) -> list[ContentTypeSummary]:
        """List all content types in the stack."""
        pass

    @abstractmethod
    async def list_entries(self, type_uid: str) -> list[dict[str, Any]]:
        """List all entries of a content type."""
        pass

    @abstractmethod
    async def fetch_by_ids(self, type_uid: str, entry_uids: list[str]) -> list[dict[str, Any]]:
        """
        Fetch specific entries by UID.

        Returns:
            Matching entries (an empty list for an empty ``entry_uids``)
        """
        pass

    @abstractmethod
    async def persist(self, type_uid: str, entry_uid: str, document: dict[str, Any]) -> dict[str, Any]:
        """
        Write an entry back to the store.

        Returns:
            The stored entry as acknowledged by the store

        Raises:
            RecordStoreError: if the write is rejected
        """
        pass

    async def close(self) -> None:
        """Release client resources."""
        return None
