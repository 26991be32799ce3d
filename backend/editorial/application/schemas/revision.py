"""Pydantic DTOs for articles, revisions and the review pipeline."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from editorial.application.schemas.common import CategoryRefResponse
from editorial.domain.entities import ReviewAction, RevisionStatus


def _dedupe(values: list[str] | None) -> list[str] | None:
    if values is None:
        return None
    return list(dict.fromkeys(values))


class ArticleCreate(BaseModel):
    """Schema for creating a new article together with its first draft."""

    title: str = Field(..., min_length=5, max_length=200, examples=["Getting Started"])
    summary: str = Field("", max_length=500)
    content: str = Field(..., min_length=100, max_length=100_000)
    bibliography: str | None = Field(None, max_length=10_000)
    category_ids: list[str] = Field(..., min_length=1)

    _dedupe_categories = field_validator("category_ids")(_dedupe)


class RevisionUpdate(BaseModel):
    """Schema for patching a revision: all fields optional.

    A supplied ``category_ids`` replaces the whole set.
    """

    title: str | None = Field(None, min_length=5, max_length=200)
    summary: str | None = Field(None, max_length=500)
    content: str | None = Field(None, min_length=100, max_length=100_000)
    bibliography: str | None = Field(None, max_length=10_000)
    category_ids: list[str] | None = Field(None, min_length=1)

    _dedupe_categories = field_validator("category_ids")(_dedupe)


class ReviewFeedback(BaseModel):
    feedback_text: str = Field(..., min_length=10, max_length=5000)


class ReviewEventResponse(BaseModel):
    id: str
    reviewer_id: str
    action: ReviewAction
    feedback_text: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class RevisionDetailResponse(BaseModel):
    """Full revision as returned to its author or a reviewer."""

    id: str
    article_id: str
    article_slug: str
    author_id: str
    status: RevisionStatus
    title: str
    summary: str
    content: str
    bibliography: str | None
    categories: list[CategoryRefResponse]
    created_at: datetime
    updated_at: datetime
    review_history: list[ReviewEventResponse]
    last_review: ReviewEventResponse | None
    is_new_article: bool
    current_published_title: str | None

    model_config = {"from_attributes": True}


class MyRevisionResponse(BaseModel):
    id: str
    article_id: str
    title: str
    status: RevisionStatus
    has_unread_feedback: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RevisionHistoryResponse(BaseModel):
    id: str
    status: RevisionStatus
    title: str
    is_published: bool
    created_at: datetime
    published_at: datetime | None

    model_config = {"from_attributes": True}


class ReviewQueueItemResponse(BaseModel):
    id: str
    article_id: str
    article_slug: str
    author_id: str
    title: str
    summary: str
    status: RevisionStatus
    categories: list[CategoryRefResponse]
    submitted_at: datetime
    previous_feedback_count: int
    is_update: bool

    model_config = {"from_attributes": True}


class PublishQueueItemResponse(BaseModel):
    id: str
    article_id: str
    author_id: str
    title: str
    summary: str
    categories: list[CategoryRefResponse]
    approved_at: datetime
    approved_by: str | None
    is_update: bool

    model_config = {"from_attributes": True}


class PublishResponse(BaseModel):
    id: str
    slug: str
    published_revision_id: str
    first_published_at: datetime
    last_published_at: datetime

    model_config = {"from_attributes": True}
