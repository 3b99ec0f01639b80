# brandswap/dependencies.py
"""
FastAPI dependencies for the service collaborators.

Each collaborator is built once from Settings and reused across requests.
Tests replace them with app.dependency_overrides or clear them with reset_services().
"""

import logging
from typing import Optional

from fastapi import Depends

from brandswap.config import Settings, get_settings
from brandswap.llm import get_refinement_provider
from brandswap.records.base import RecordStore
from brandswap.records.factory import close_record_store
from brandswap.records.factory import get_record_store as _get_record_store
from brandswap.services.applicator import ChangeApplicator
from brandswap.services.brandkit_service import BrandkitService
from brandswap.services.preview_service import PreviewService
from brandswap.services.refiner import RefinementAdapter

logger = logging.getLogger(__name__)

_brandkit_service: Optional[BrandkitService] = None
_refinement_adapter: Optional[RefinementAdapter] = None


def get_record_store() -> RecordStore:
    return _get_record_store()


def get_brandkit_service(settings: Settings = Depends(get_settings)) -> BrandkitService:
    global _brandkit_service

    if _brandkit_service is None:
        _brandkit_service = BrandkitService(
            api_url=settings.BRANDKIT_API_URL,
            api_key=settings.BRANDKIT_API_KEY,
            brandkit_id=settings.BRANDKIT_ID,
            rules_path=settings.BRANDKIT_RULES_PATH,
            timeout=settings.BRANDKIT_TIMEOUT_SECONDS,
            cache_ttl_seconds=settings.BRANDKIT_CACHE_TTL_SECONDS,
        )
    return _brandkit_service


def get_refinement_adapter(settings: Settings = Depends(get_settings)) -> RefinementAdapter:
    """
    Build the refinement adapter.

    Raises:
        RefinementConfigError: if the configured provider has no API key
    """
    global _refinement_adapter

    if _refinement_adapter is None:
        if settings.REFINEMENT_PROVIDER == "openai":
            api_key, model = settings.OPENAI_API_KEY, settings.OPENAI_MODEL
        else:
            api_key, model = settings.GEMINI_API_KEY, settings.GEMINI_MODEL

        provider = get_refinement_provider(
            settings.REFINEMENT_PROVIDER,
            api_key=api_key,
            model=model,
            temperature=settings.REFINEMENT_TEMPERATURE,
        )
        _refinement_adapter = RefinementAdapter(provider, max_concurrency=settings.REFINEMENT_MAX_CONCURRENCY)
    return _refinement_adapter


def get_preview_service(
    record_store: RecordStore = Depends(get_record_store),
    brandkit: BrandkitService = Depends(get_brandkit_service),
    refiner: RefinementAdapter = Depends(get_refinement_adapter),
) -> PreviewService:
    return PreviewService(record_store=record_store, brandkit=brandkit, refiner=refiner)


def get_scan_service(
    record_store: RecordStore = Depends(get_record_store),
    brandkit: BrandkitService = Depends(get_brandkit_service),
) -> PreviewService:
    return PreviewService(record_store=record_store, brandkit=brandkit)


def get_change_applicator(
    record_store: RecordStore = Depends(get_record_store),
    brandkit: BrandkitService = Depends(get_brandkit_service),
) -> ChangeApplicator:
    return ChangeApplicator(record_store=record_store, brandkit=brandkit)


def reset_services() -> None:
    """Forget the cached collaborators without closing them."""
    global _brandkit_service, _refinement_adapter
    _brandkit_service = None
    _refinement_adapter = None


async def close_services() -> None:
    """Close pooled HTTP clients and reset the singletons."""
    global _brandkit_service, _refinement_adapter

    if _brandkit_service is not None:
        await _brandkit_service.close()
    if _refinement_adapter is not None:
        await _refinement_adapter.close()
    await close_record_store()

    _brandkit_service = None
    _refinement_adapter = None
