"""Pydantic DTOs for the category taxonomy."""

from datetime import datetime

from pydantic import BaseModel, Field

_SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CategoryCreate(BaseModel):
    """Schema for creating a category. The slug is derived from the name when omitted."""

    name: str = Field(..., min_length=2, max_length=100, examples=["Hadith Methodology"])
    slug: str | None = Field(None, min_length=2, max_length=50, pattern=_SLUG_PATTERN)
    parent_id: str | None = None


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=100)
    slug: str | None = Field(None, min_length=2, max_length=50, pattern=_SLUG_PATTERN)


class CategoryReparent(BaseModel):
    """``new_parent_id = None`` moves the category to the root level."""

    new_parent_id: str | None


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    is_system: bool
    parent_id: str | None
    depth: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CategoryDetailResponse(CategoryResponse):
    parent_name: str | None = None


class CategoryTreeNode(BaseModel):
    id: str
    name: str
    slug: str
    is_system: bool
    depth: int
    children: list["CategoryTreeNode"] = []

    model_config = {"from_attributes": True}


class CategoryAdminResponse(CategoryResponse):
    parent_name: str | None
    descendant_count: int
    revision_count: int


class SubtreeDeletionResponse(BaseModel):
    deleted_count: int
    reassigned_count: int

    model_config = {"from_attributes": True}
