"""Pydantic DTOs for feeds and public article reads."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from editorial.application.schemas.common import CategoryRefResponse
from editorial.domain.entities import FeedSort
from editorial.domain.timestamps import to_utc


class FeedQuery(BaseModel):
    """Query parameters of the public feed."""

    sort: FeedSort = FeedSort.NEW
    query: str | None = Field(None, max_length=200)
    category: str | None = Field(None, description="Category id or slug; includes its subtree")
    author_id: str | None = None
    published_from: datetime | None = None
    published_to: datetime | None = None
    cursor: str | None = Field(None, max_length=512)
    limit: int | None = Field(None, ge=1, le=100)

    @field_validator("published_from", "published_to")
    @classmethod
    def _normalise_bound(cls, value: datetime | None) -> datetime | None:
        return to_utc(value)

    @model_validator(mode="after")
    def _check_range(self) -> "FeedQuery":
        if self.published_from and self.published_to and self.published_from > self.published_to:
            raise ValueError("published_from must not be after published_to")
        return self


class FeedItemResponse(BaseModel):
    id: str
    slug: str
    author_id: str
    title: str
    summary: str
    categories: list[CategoryRefResponse]
    like_count: int
    save_count: int
    view_count: int
    first_published_at: datetime
    last_published_at: datetime
    is_updated: bool
    has_liked: bool | None = None
    has_saved: bool | None = None

    model_config = {"from_attributes": True}


class SavedItemResponse(BaseModel):
    item: FeedItemResponse
    saved_at: datetime

    model_config = {"from_attributes": True}


class PublishedArticleResponse(BaseModel):
    item: FeedItemResponse
    revision_id: str
    content: str
    bibliography: str | None
    has_pending_update: bool

    model_config = {"from_attributes": True}


class ViewRequest(BaseModel):
    viewer_key: str = Field(..., min_length=1, max_length=100)
    day: date | None = None
