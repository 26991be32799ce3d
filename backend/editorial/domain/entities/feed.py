"""Read models and query filters for the published-content feeds."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from editorial.domain.exceptions import ValidationError
from editorial.domain.timestamps import to_utc


class FeedSort(str, Enum):
    NEW = "new"
    POPULAR = "popular"


@dataclass(frozen=True)
class CategoryRef:
    id: str
    name: str
    slug: str


@dataclass(frozen=True)
class FeedFilter:
    """Explicit feed filter, assembled one dimension at a time.

    ``category_ids`` holds an already-expanded subtree (closure lookup);
    ``followed_by`` restricts the feed to authors that user follows.
    """

    text: str | None = None
    category_ids: frozenset[str] | None = None
    author_id: str | None = None
    followed_by: str | None = None
    published_from: datetime | None = None
    published_to: datetime | None = None

    def with_text(self, text: str | None) -> "FeedFilter":
        cleaned = (text or "").strip()
        return replace(self, text=cleaned or None)

    def with_categories(self, category_ids: set[str] | frozenset[str]) -> "FeedFilter":
        return replace(self, category_ids=frozenset(category_ids))

    def with_author(self, author_id: str | None) -> "FeedFilter":
        return replace(self, author_id=author_id)

    def with_followed_by(self, user_id: str) -> "FeedFilter":
        return replace(self, followed_by=user_id)

    def with_published_range(
        self, start: datetime | None, end: datetime | None
    ) -> "FeedFilter":
        return replace(self, published_from=to_utc(start), published_to=to_utc(end))

    def validate(self) -> "FeedFilter":
        if self.text is not None and len(self.text) > 200:
            raise ValidationError("Search text must be at most 200 characters")
        if self.category_ids is not None and not self.category_ids:
            raise ValidationError("Category filter expanded to an empty set")
        if (
            self.published_from is not None
            and self.published_to is not None
            and self.published_from > self.published_to
        ):
            raise ValidationError("published_from must not be after published_to")
        return self


@dataclass(frozen=True)
class FeedAnchor:
    """Sort-key values of the last row on the previous page.

    ``like_count`` is only set for popularity ordering and is the anchor
    row's count as read when the cursor is decoded, not the count the
    client saw.
    """

    last_published_at: datetime
    id: str
    like_count: int | None = None


@dataclass
class FeedItem:
    """One eligible published article as shown in a feed."""

    id: str
    slug: str
    author_id: str
    title: str
    summary: str
    categories: list[CategoryRef]
    like_count: int
    save_count: int
    view_count: int
    first_published_at: datetime
    last_published_at: datetime
    has_liked: bool | None = None
    has_saved: bool | None = None

    @property
    def is_updated(self) -> bool:
        return self.first_published_at != self.last_published_at


@dataclass
class PublishedArticle:
    """Full public read of an article's currently published revision."""

    item: FeedItem
    revision_id: str
    content: str
    bibliography: str | None
    has_pending_update: bool


@dataclass
class SavedFeedItem:
    item: FeedItem
    saved_at: datetime
