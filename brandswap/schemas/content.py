# brandswap/schemas/content.py
"""
Schemas for content listing and scan endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing field names in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContentTypeItem(BaseModel):
    uid: str
    title: str
    description: str | None = None
    schema_: str = Field(..., alias="schema", description="Field count, e.g. '7 fields'")

    model_config = ConfigDict(populate_by_name=True)


class ContentTypeListResponse(CamelModel):
    """GET /content-types"""

    total: int
    content_types: list[ContentTypeItem] = Field(default_factory=list)


class EntryItem(BaseModel):
    uid: str
    title: str = Field("(no title)")
    updated_at: str | None = None
    created_at: str | None = None


class EntryListResponse(CamelModel):
    """GET /entries"""

    total: int
    entries: list[EntryItem] = Field(default_factory=list)


class ScanMatchItem(BaseModel):
    entry_uid: str = Field(..., alias="entryUid")
    field: str = Field(..., description="Field path, e.g. 'modules[0].body'")
    before: str = Field(..., description="Current value of the matching field")
    title: str
    updated_at: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class ScanResponse(CamelModel):
    """GET /scan"""

    query: str
    total_matches: int
    matches: list[ScanMatchItem] = Field(default_factory=list)
