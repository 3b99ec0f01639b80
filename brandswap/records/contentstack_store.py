# brandswap/records/contentstack_store.py
"""
Contentstack Management API record store.

API Documentation: https://www.contentstack.com/docs/developers/apis/content-management-api
"""

import json
import logging
from typing import Any

import httpx

from brandswap.logging_config import log_store_operation
from brandswap.records.base import ContentTypeSummary, RecordStore, RecordStoreError
from brandswap.services.resilience import with_retry

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Pull the most specific error description out of a Contentstack error body."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}: {response.text[:200]}"

    if isinstance(body, dict):
        if body.get("errors"):
            return json.dumps(body["errors"])
        if body.get("error_message"):
            return str(body["error_message"])
    return f"HTTP {response.status_code}"


class ContentstackRecordStore(RecordStore):
    """
    Record store backed by a Contentstack stack.

    Reads page through results (100 entries per request, the API maximum) and
    are retried on transport errors. Writes are never retried.
    """

    DEFAULT_BASE_URL = "https://api.contentstack.io/v3"
    PAGE_SIZE = 100

    def __init__(
        self,
        api_key: str,
        management_token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the Contentstack store.

        Args:
            api_key: Stack API key
            management_token: Management token with entry read/write scope
            base_url: Region-specific Management API base URL
            timeout: HTTP request timeout in seconds
            client: Preconfigured client (tests inject one with a mock transport)
        """
        if not api_key or not management_token:
            logger.warning("Contentstack credentials are not configured; requests will be rejected by the API")

        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = {
            "api_key": api_key,
            "authorization": management_token,
            "Content-Type": "application/json",
        }

    @property
    def name(self) -> str:
        return "contentstack"

    @with_retry(max_attempts=3, retry_exceptions=(httpx.TransportError,))
    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        response = await self.client.get(f"{self.base_url}{path}", params=params, headers=self._headers)
        if response.is_error:
            raise RecordStoreError(_error_message(response))
        return response.json()

    async def _get_all_entries(self, type_uid: str, query: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        entries: list[dict[str, Any]] = []
        skip = 0
        while True:
            params: dict[str, Any] = {"limit": self.PAGE_SIZE, "skip": skip}
            if query:
                params["query"] = json.dumps(query)

            try:
                data = await self._get(f"/content_types/{type_uid}/entries", params=params)
            except httpx.HTTPError as e:
                raise RecordStoreError(f"Contentstack request failed: {e}") from e

            page = data.get("entries") or []
            entries.extend(page)
            if len(page) < self.PAGE_SIZE:
                return entries
            skip += self.PAGE_SIZE

    async def list_types(self) -> list[ContentTypeSummary]:
        with log_store_operation("list_types", "*"):
            try:
                data = await self._get("/content_types")
            except httpx.HTTPError as e:
                raise RecordStoreError(f"Contentstack request failed: {e}") from e

        return [
            ContentTypeSummary(
                uid=ct.get("uid", ""),
                title=ct.get("title", ""),
                description=ct.get("description"),
                field_count=len(ct.get("schema") or []),
            )
            for ct in data.get("content_types") or []
        ]

    async def list_entries(self, type_uid: str) -> list[dict[str, Any]]:
        with log_store_operation("list_entries", type_uid):
            return await self._get_all_entries(type_uid)

    async def fetch_by_ids(self, type_uid: str, entry_uids: list[str]) -> list[dict[str, Any]]:
        if not entry_uids:
            return []
        with log_store_operation("fetch_by_ids", type_uid):
            return await self._get_all_entries(type_uid, {"uid": {"$in": list(entry_uids)}})

    async def persist(self, type_uid: str, entry_uid: str, document: dict[str, Any]) -> dict[str, Any]:
        payload = {"entry": {key: value for key, value in document.items() if key != "uid"}}
        try:
            body = json.dumps(payload, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise RecordStoreError(f"Entry {entry_uid} is not valid JSON: {e}") from e

        with log_store_operation("persist", type_uid, entry_uid):
            try:
                response = await self.client.put(
                    f"{self.base_url}/content_types/{type_uid}/entries/{entry_uid}",
                    content=body.encode("utf-8"),
                    headers=self._headers,
                )
            except httpx.HTTPError as e:
                raise RecordStoreError(f"Failed to update entry {entry_uid}: {e}") from e

            if response.is_error:
                raise RecordStoreError(_error_message(response))

        return response.json().get("entry", {})

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "ContentstackRecordStore":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
