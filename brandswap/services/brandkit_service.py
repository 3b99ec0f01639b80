"""
Brandkit policy client.

Fetches approved/banned term rules from the Brandkit API, falling back to a
local JSON ruleset when the API is unconfigured or failing. Rules are cached
for a short TTL; each preview/apply request takes one immutable snapshot.
"""

import json
import logging
from pathlib import Path
from typing import Any

import httpx
from cachetools import TTLCache

from brandswap.services.policy import PolicyRuleset

logger = logging.getLogger(__name__)

_RULES_CACHE_KEY = "rules"


class BrandkitService:
    """
    Client for the Brandkit policy service.

    Args:
        api_url: Brandkit base URL (None disables the remote service)
        api_key: Bearer token
        brandkit_id: Brandkit to read rules for
        rules_path: Local fallback ruleset
        timeout: HTTP timeout for rule fetches, in seconds
        cache_ttl_seconds: How long fetched rules are reused (0 disables caching)
        client: Preconfigured HTTP client (tests inject one with a mock transport)
    """

    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        brandkit_id: str | None = None,
        rules_path: str | Path = "brandkit.json",
        timeout: float = 7.0,
        cache_ttl_seconds: int = 300,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_url = api_url.rstrip("/") if api_url else None
        self.api_key = api_key
        self.brandkit_id = brandkit_id
        self.rules_path = Path(rules_path)
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self._cache: TTLCache | None = TTLCache(maxsize=4, ttl=cache_ttl_seconds) if cache_ttl_seconds > 0 else None

    @property
    def remote_configured(self) -> bool:
        return bool(self.api_url and self.api_key and self.brandkit_id)

    @property
    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}

    async def get_rules(self) -> PolicyRuleset:
        """
        Return the current ruleset.

        Never raises: API failures fall back to the local file, and an
        unreadable file yields an empty ruleset.
        """
        if self._cache is not None:
            cached = self._cache.get(_RULES_CACHE_KEY)
            if cached is not None:
                return cached

        if self.remote_configured:
            rules = await self._get_rules_from_api()
        else:
            logger.info("Brandkit API credentials not found. Using local ruleset file.")
            rules = self._get_rules_from_file()

        if self._cache is not None:
            self._cache[_RULES_CACHE_KEY] = rules
        return rules

    async def _get_rules_from_api(self) -> PolicyRuleset:
        try:
            logger.info("Attempting to fetch rules from Brandkit API...")
            response = await self.client.get(
                f"{self.api_url}/rules/{self.brandkit_id}",
                headers=self._auth_headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            rules = PolicyRuleset.from_dict(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Brandkit API failed ({e}). Falling back to local ruleset file.")
            return self._get_rules_from_file()

        logger.info("Successfully fetched rules from Brandkit API.")
        return rules

    def _get_rules_from_file(self) -> PolicyRuleset:
        try:
            data = json.loads(self.rules_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Fallback failed: could not read or parse {self.rules_path}: {e}")
            return PolicyRuleset()
        return PolicyRuleset.from_dict(data)

    def invalidate_rules_cache(self) -> None:
        """Drop cached rules so the next request refetches them."""
        if self._cache is not None:
            self._cache.clear()

    async def validate(self, term: str, replacement: str) -> dict[str, Any]:
        """
        Validate a single term/replacement pair with the Brandkit API.

        Advisory only and independent of the bulk classifier. Unlike
        get_rules() there is no file fallback.
        """
        if not self.api_url:
            logger.warning("Cannot validate replacement: Brandkit API URL is not configured.")
            return {"approved": True, "message": "Brandkit API not configured; validation skipped."}

        payload = {"brandkit_id": self.brandkit_id, "original": term, "replacement": replacement}
        try:
            response = await self.client.post(
                f"{self.api_url}/validate",
                json=payload,
                headers=self._auth_headers,
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Brandkit API error (validate): {e}")
            return {"approved": False, "message": "Brandkit validation failed"}

        if not isinstance(data, dict):
            return {"approved": False, "message": "Brandkit validation failed"}
        data.setdefault("approved", False)
        data.setdefault("message", "")
        return data

    async def close(self) -> None:
        await self.client.aclose()
