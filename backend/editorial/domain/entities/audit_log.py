"""Append-only audit ledger entries."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from editorial.domain.timestamps import to_utc


class AuditAction(str, Enum):
    """Every state-changing action recorded in the ledger."""

    ARTICLE_CREATED = "ARTICLE_CREATED"
    ARTICLE_REMOVED = "ARTICLE_REMOVED"
    ARTICLE_RESTORED = "ARTICLE_RESTORED"

    REV_DRAFT_STARTED = "REV_DRAFT_STARTED"
    REV_SUBMITTED = "REV_SUBMITTED"
    REV_WITHDRAWN = "REV_WITHDRAWN"
    REV_FEEDBACK = "REV_FEEDBACK"
    REV_APPROVED = "REV_APPROVED"
    REV_PUBLISHED = "REV_PUBLISHED"

    CATEGORY_CREATED = "CATEGORY_CREATED"
    CATEGORY_UPDATED = "CATEGORY_UPDATED"
    CATEGORY_REPARENTED = "CATEGORY_REPARENTED"
    CATEGORY_DELETED_SUBTREE = "CATEGORY_DELETED_SUBTREE"

    USER_BANNED = "USER_BANNED"
    USER_UNBANNED = "USER_UNBANNED"


class AuditTargetType(str, Enum):
    ARTICLE = "article"
    REVISION = "revision"
    CATEGORY = "category"
    USER = "user"


@dataclass(frozen=True)
class AuditLogEntry:
    """A single immutable ledger row."""

    actor_id: str | None
    action: AuditAction
    target_type: AuditTargetType | None = None
    target_id: str | None = None
    reason: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class AuditLogFilter:
    """Query filter for the ledger; every field is optional."""

    action: AuditAction | None = None
    target_type: AuditTargetType | None = None
    target_id: str | None = None
    actor_id: str | None = None
    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        self.start = to_utc(self.start)
        self.end = to_utc(self.end)
