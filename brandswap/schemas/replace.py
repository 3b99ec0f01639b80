# brandswap/schemas/replace.py
"""
Schemas for preview, apply and validate endpoints.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from brandswap.schemas.content import CamelModel

# -----------------------------------------------------------------------------
# Preview
# -----------------------------------------------------------------------------


class ChangeItem(BaseModel):
    """One before/after change at a field path."""

    field: str = Field(..., description="Field path, e.g. 'seo.meta_title' or 'tags[2]'")
    before: str
    after: str
    brandkit_approved: bool = Field(..., description="False if the new value contains a banned term")


class EntryPreviewItem(CamelModel):
    entry_uid: str
    title: str
    changes: list[ChangeItem] = Field(default_factory=list)


class PreviewResponse(CamelModel):
    """GET /preview"""

    query: str
    replace_with: str
    mode: str = Field(..., description="smart|traditional")
    total_changes: int
    preview: list[EntryPreviewItem] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Apply
# -----------------------------------------------------------------------------


class ChangeRequestItem(CamelModel):
    """
    A field edit selected by the operator.

    Malformed items are tolerated here and dropped during grouping.
    """

    entry_uid: str | None = None
    field: str | None = None
    new_value: Any = Field(None, description="New value; JSON text is parsed, anything else is written as text")


class ApplyRequest(CamelModel):
    """POST /apply"""

    content_type_uid: str | None = None
    changes: list[ChangeRequestItem] | None = None


class SkippedFieldItem(BaseModel):
    field: str
    reason: str


class ApplyResultItem(CamelModel):
    entry_uid: str
    title: str
    status: str = Field(..., description="updated|failed")
    changes_applied: int | None = None
    error: str | None = None
    skipped_fields: list[SkippedFieldItem] = Field(default_factory=list)


class ApplyResponse(CamelModel):
    message: str
    total_processed: int
    total_updated: int
    total_failed: int
    results: list[ApplyResultItem] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Validate
# -----------------------------------------------------------------------------


class ValidateRequest(CamelModel):
    query: str | None = None
    replace_with: str | None = None


class ValidateResponse(BaseModel):
    approved: bool
    message: str = ""

    model_config = ConfigDict(extra="allow")
