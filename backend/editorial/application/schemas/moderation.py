"""Pydantic DTOs for moderation and the audit ledger."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from editorial.domain.entities import ArticleStatus, AuditAction, AuditTargetType
from editorial.domain.timestamps import to_utc


class BanRequest(BaseModel):
    reason: str = Field(..., min_length=10, max_length=500)


class RemovalRequest(BaseModel):
    reason: str = Field(..., min_length=10, max_length=500)


class UserBanResponse(BaseModel):
    user_id: str
    banned_by: str
    reason: str
    banned_at: datetime

    model_config = {"from_attributes": True}


class ArticleStatusResponse(BaseModel):
    id: str
    slug: str
    status: ArticleStatus

    model_config = {"from_attributes": True}


class AuditLogQuery(BaseModel):
    action: AuditAction | None = None
    target_type: AuditTargetType | None = None
    target_id: str | None = None
    actor_id: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    cursor: str | None = Field(None, max_length=512)
    limit: int | None = Field(None, ge=1, le=100)

    @field_validator("start", "end")
    @classmethod
    def _normalise_bound(cls, value: datetime | None) -> datetime | None:
        return to_utc(value)


class AdminArticleQuery(BaseModel):
    status: ArticleStatus | None = None
    author_id: str | None = None
    query: str | None = Field(None, max_length=200)
    cursor: str | None = Field(None, max_length=512)
    limit: int | None = Field(None, ge=1, le=100)

    @field_validator("query")
    @classmethod
    def _strip_query(cls, value: str | None) -> str | None:
        return (value or "").strip() or None


class AdminArticleResponse(BaseModel):
    id: str
    slug: str
    author_id: str
    status: ArticleStatus
    title: str
    summary: str
    like_count: int
    save_count: int
    view_count: int
    created_at: datetime
    last_published_at: datetime | None
    author_banned: bool

    model_config = {"from_attributes": True}


class AuditLogEntryResponse(BaseModel):
    id: str
    actor_id: str | None
    action: AuditAction
    target_type: AuditTargetType | None
    target_id: str | None
    reason: str | None
    meta: dict[str, Any]
    created_at: datetime

    model_config = {"from_attributes": True}
