# brandswap/schemas/__init__.py
"""
Request and response schemas for the HTTP API.
"""

from brandswap.schemas.content import (
    ContentTypeItem,
    ContentTypeListResponse,
    EntryItem,
    EntryListResponse,
    ScanMatchItem,
    ScanResponse,
)
from brandswap.schemas.replace import (
    ApplyRequest,
    ApplyResponse,
    ChangeRequestItem,
    PreviewResponse,
    ValidateRequest,
    ValidateResponse,
)

__all__ = [
    "ApplyRequest",
    "ApplyResponse",
    "ChangeRequestItem",
    "ContentTypeItem",
    "ContentTypeListResponse",
    "EntryItem",
    "EntryListResponse",
    "PreviewResponse",
    "ScanMatchItem",
    "ScanResponse",
    "ValidateRequest",
    "ValidateResponse",
]
