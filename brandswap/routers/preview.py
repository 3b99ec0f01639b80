# brandswap/routers/preview.py
"""
Preview endpoint.

GET /preview?contentTypeUid=&query=&replaceWith=&entryUids=&smart=true
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from brandswap.dependencies import get_preview_service
from brandswap.records.base import RecordStoreError
from brandswap.schemas.replace import PreviewResponse
from brandswap.services.preview_service import PreviewService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/preview", tags=["preview"])


@router.get("", response_model=PreviewResponse)
async def preview(
    content_type_uid: str | None = Query(None, alias="contentTypeUid"),
    query: str | None = Query(None),
    replace_with: str | None = Query(None, alias="replaceWith"),
    entry_uids: list[str] | None = Query(None, alias="entryUids"),
    smart: bool = Query(False, description="Run the contextual refinement pass after replacement"),
    service: PreviewService = Depends(get_preview_service),
) -> PreviewResponse:
    """
    Preview what a find-and-replace would change in the selected entries.

    Nothing is written. Each change is flagged with brandkit_approved=false
    when the new value contains a banned term. Entries without changes are
    omitted.
    """
    if not content_type_uid or not query or not replace_with or not entry_uids:
        raise HTTPException(
            status_code=400,
            detail="contentTypeUid, query, replaceWith, and entryUids are required",
        )

    try:
        report = await service.preview(content_type_uid, query, replace_with, entry_uids, smart=smart)
    except RecordStoreError as e:
        logger.error(f"Preview error: {e}")
        raise HTTPException(status_code=502, detail="Failed to generate preview")

    return PreviewResponse.model_validate(report.to_dict())
