"""Read models for revision listings: review/publish queues and author views."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from editorial.domain.entities.feed import CategoryRef
from editorial.domain.entities.revision import ReviewEvent, RevisionStatus


class QueueSort(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"


@dataclass
class RevisionQueueFilter:
    statuses: frozenset[RevisionStatus]
    author_id: str | None = None
    category_id: str | None = None


@dataclass
class RevisionListRow:
    """Raw listing row returned by the repository before shaping."""

    id: str
    article_id: str
    article_slug: str
    author_id: str
    title: str
    summary: str
    status: RevisionStatus
    categories: list[CategoryRef]
    article_is_published: bool
    created_at: datetime
    updated_at: datetime
    status_changed_at: datetime
    feedback_count: int = 0
    latest_review: ReviewEvent | None = None
    latest_approval: ReviewEvent | None = None


@dataclass
class ReviewQueueItem:
    id: str
    article_id: str
    article_slug: str
    author_id: str
    title: str
    summary: str
    status: RevisionStatus
    categories: list[CategoryRef]
    submitted_at: datetime
    previous_feedback_count: int
    is_update: bool


@dataclass
class PublishQueueItem:
    id: str
    article_id: str
    author_id: str
    title: str
    summary: str
    categories: list[CategoryRef]
    approved_at: datetime
    approved_by: str | None
    is_update: bool


@dataclass
class MyRevisionItem:
    id: str
    article_id: str
    title: str
    status: RevisionStatus
    has_unread_feedback: bool
    created_at: datetime
    updated_at: datetime


@dataclass
class RevisionDetail:
    """A revision with everything an editor or reviewer needs to act on it."""

    id: str
    article_id: str
    article_slug: str
    author_id: str
    status: RevisionStatus
    title: str
    summary: str
    content: str
    bibliography: str | None
    categories: list[CategoryRef]
    created_at: datetime
    updated_at: datetime
    review_history: list[ReviewEvent] = field(default_factory=list)
    is_new_article: bool = True
    current_published_title: str | None = None

    @property
    def last_review(self) -> ReviewEvent | None:
        return self.review_history[0] if self.review_history else None


@dataclass
class RevisionHistoryItem:
    id: str
    status: RevisionStatus
    title: str
    is_published: bool
    created_at: datetime
    published_at: datetime | None
