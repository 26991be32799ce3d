"""Shared response shapes."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class CategoryRefResponse(BaseModel):
    id: str
    name: str
    slug: str

    model_config = {"from_attributes": True}


class PageResponse(BaseModel, Generic[T]):
    """Keyset page: pass ``next_cursor`` back to fetch the following page."""

    items: list[T]
    next_cursor: str | None = None
    has_more: bool = False


class ToggleResponse(BaseModel):
    active: bool
    count: int

    model_config = {"from_attributes": True}


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: dict = {}
