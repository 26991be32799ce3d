"""Port for read-only queries over published, visible content."""

from abc import ABC, abstractmethod

from editorial.application.pagination import CursorPosition
from editorial.domain.entities import FeedAnchor, FeedFilter, FeedItem, FeedSort, SavedFeedItem


class FeedRepository(ABC):

    @abstractmethod
    async def list_feed(
        self,
        feed_filter: FeedFilter,
        sort: FeedSort,
        after: FeedAnchor | None,
        limit: int,
        viewer_id: str | None = None,
    ) -> list[FeedItem]:
        """Eligible articles in ``sort`` order strictly after ``after``.

        Eligible means: status PUBLISHED, author not banned, and a published
        revision exists.
        """
        ...

    @abstractmethod
    async def current_like_count(self, article_id: str) -> int | None:
        """Like count of the anchor row as of now; None if the article is gone."""
        ...

    @abstractmethod
    async def list_saved(
        self,
        user_id: str,
        after: CursorPosition | None,
        limit: int,
    ) -> list[SavedFeedItem]:
        """The user's saved, still-eligible articles by save time descending."""
        ...
