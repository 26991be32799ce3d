"""Article aggregate: the published unit of content."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


class ArticleStatus(str, Enum):
    """Administrative visibility of an article (not the revision lifecycle)."""

    PUBLISHED = "PUBLISHED"
    REMOVED = "REMOVED"


@dataclass
class Article:
    """Core domain entity for an authored article.

    ``published_revision_id`` is set iff the article has ever been published;
    visibility in feeds is gated by it, not by ``status``.
    """

    author_id: str
    slug: str
    status: ArticleStatus = ArticleStatus.PUBLISHED
    published_revision_id: str | None = None
    first_published_at: datetime | None = None
    last_published_at: datetime | None = None
    like_count: int = 0
    save_count: int = 0
    view_count: int = 0
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def has_been_published(self) -> bool:
        return self.published_revision_id is not None

    @property
    def is_updated(self) -> bool:
        """True once a later revision has replaced the first published one."""
        return (
            self.first_published_at is not None
            and self.last_published_at is not None
            and self.first_published_at != self.last_published_at
        )

    def mark_published(self, revision_id: str, now: datetime) -> None:
        """Point the article at a newly published revision."""
        self.published_revision_id = revision_id
        if self.first_published_at is None:
            self.first_published_at = now
        self.last_published_at = now


@dataclass(frozen=True)
class AdminArticleFilter:
    """Moderation listing filter; removed articles are included unless filtered out."""

    status: ArticleStatus | None = None
    author_id: str | None = None
    text: str | None = None


@dataclass
class AdminArticleItem:
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
    author_banned: bool = False
