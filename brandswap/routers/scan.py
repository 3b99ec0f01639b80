# brandswap/routers/scan.py
"""
Scan endpoint.

GET /scan?contentTypeUid=article&query=Gemini&entryUids=uid1&entryUids=uid2
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from brandswap.dependencies import get_scan_service
from brandswap.records.base import RecordStoreError
from brandswap.schemas.content import ScanMatchItem, ScanResponse
from brandswap.services.preview_service import PreviewService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scan", tags=["scan"])


@router.get("", response_model=ScanResponse)
async def scan(
    content_type_uid: str | None = Query(None, alias="contentTypeUid"),
    query: str | None = Query(None),
    entry_uids: list[str] | None = Query(None, alias="entryUids"),
    service: PreviewService = Depends(get_scan_service),
) -> ScanResponse:
    """
    Find every text field of the selected entries that contains the query.

    Matching is case-insensitive. Only the selected entries are fetched.
    """
    if not content_type_uid or not query or not entry_uids:
        raise HTTPException(status_code=400, detail="contentTypeUid, query, and entryUids are required")

    try:
        matches = await service.scan(content_type_uid, query, entry_uids)
    except RecordStoreError as e:
        logger.error(f"Scan error: {e}")
        raise HTTPException(status_code=502, detail="Failed to scan entries")

    items = [ScanMatchItem.model_validate(match.to_dict()) for match in matches]
    return ScanResponse(query=query, total_matches=len(items), matches=items)
