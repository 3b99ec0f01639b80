# brandswap/routers/content.py
"""
Content browsing endpoints.

GET /content-types - List content types in the stack
GET /entries       - List entries of a content type
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from brandswap.dependencies import get_record_store
from brandswap.records.base import RecordStore, RecordStoreError
from brandswap.schemas.content import ContentTypeItem, ContentTypeListResponse, EntryItem, EntryListResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["content"])


@router.get("/content-types", response_model=ContentTypeListResponse)
async def list_content_types(
    record_store: RecordStore = Depends(get_record_store),
) -> ContentTypeListResponse:
    """List every content type with its field count."""
    try:
        content_types = await record_store.list_types()
    except RecordStoreError as e:
        logger.error(f"Error fetching content types: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch content types")

    items = [ContentTypeItem.model_validate(ct.to_dict()) for ct in content_types]
    return ContentTypeListResponse(total=len(items), content_types=items)


@router.get("/entries", response_model=EntryListResponse)
async def list_entries(
    content_type_uid: str | None = Query(None, alias="contentTypeUid"),
    record_store: RecordStore = Depends(get_record_store),
) -> EntryListResponse:
    """List entries of a content type (uid, title and timestamps only)."""
    if not content_type_uid:
        raise HTTPException(status_code=400, detail="contentTypeUid is required")

    try:
        entries = await record_store.list_entries(content_type_uid)
    except RecordStoreError as e:
        logger.error(f"Error fetching entries: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch entries")

    items = [
        EntryItem(
            uid=entry.get("uid", ""),
            title=entry.get("title") or "(no title)",
            updated_at=entry.get("updated_at"),
            created_at=entry.get("created_at"),
        )
        for entry in entries
    ]
    return EntryListResponse(total=len(items), entries=items)
