"""Feed & pagination engine over published, visible content."""

import logging

from editorial.application.interfaces import FeedRepository
from editorial.application.pagination import CursorPosition, Page, build_page, decode_cursor
from editorial.application.schemas import FeedQuery
from editorial.application.services.category_service import CategoryService
from editorial.domain.auth import AuthContext
from editorial.domain.entities import FeedAnchor, FeedFilter, FeedItem, FeedSort, SavedFeedItem
from editorial.domain.exceptions import InvalidCursorError

logger = logging.getLogger(__name__)


class FeedService:
    """Keyset-paginated feeds.

    Popularity pages are ranked approximately under concurrent likes: the
    anchor's like count is re-read when the cursor is decoded, so a page
    boundary follows the anchor row's current position rather than a
    snapshot. Items can shift across pages while likes change; recency
    pages have no such drift.
    """

    def __init__(
        self,
        repository: FeedRepository,
        category_service: CategoryService,
        default_limit: int = 20,
        max_limit: int = 50,
    ):
        self._repo = repository
        self._categories = category_service
        self._default_limit = default_limit
        self._max_limit = max_limit

    async def get_feed(self, query: FeedQuery, viewer: AuthContext | None = None) -> Page[FeedItem]:
        feed_filter = (
            FeedFilter()
            .with_text(query.query)
            .with_author(query.author_id)
            .with_published_range(query.published_from, query.published_to)
        )
        if query.category:
            feed_filter = feed_filter.with_categories(
                await self._categories.descendants(query.category)
            )
        return await self._page(feed_filter.validate(), query.sort, query.cursor, query.limit, viewer)

    async def get_following_feed(
        self,
        ctx: AuthContext,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Page[FeedItem]:
        """Recency feed restricted to authors the caller follows."""
        feed_filter = FeedFilter().with_followed_by(ctx.user_id)
        return await self._page(feed_filter, FeedSort.NEW, cursor, limit, ctx)

    async def list_saved(
        self,
        ctx: AuthContext,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Page[SavedFeedItem]:
        size = self._clamp(limit)
        after = decode_cursor(cursor) if cursor else None
        rows = await self._repo.list_saved(ctx.user_id, after, size + 1)
        return build_page(rows, size, lambda s: CursorPosition(s.saved_at, s.item.id))

    async def _page(
        self,
        feed_filter: FeedFilter,
        sort: FeedSort,
        cursor: str | None,
        limit: int | None,
        viewer: AuthContext | None,
    ) -> Page[FeedItem]:
        size = self._clamp(limit)
        anchor = await self._decode_anchor(cursor, sort) if cursor else None
        rows = await self._repo.list_feed(
            feed_filter,
            sort,
            anchor,
            size + 1,
            viewer_id=viewer.user_id if viewer else None,
        )
        logger.debug("Feed page sort=%s size=%d fetched=%d", sort.value, size, len(rows))
        return build_page(rows, size, lambda i: CursorPosition(i.last_published_at, i.id))

    async def _decode_anchor(self, cursor: str, sort: FeedSort) -> FeedAnchor:
        position = decode_cursor(cursor)
        if sort != FeedSort.POPULAR:
            return FeedAnchor(last_published_at=position.timestamp, id=position.id)

        like_count = await self._repo.current_like_count(position.id)
        if like_count is None:
            raise InvalidCursorError("anchor article no longer exists")
        return FeedAnchor(
            last_published_at=position.timestamp,
            id=position.id,
            like_count=like_count,
        )

    def _clamp(self, limit: int | None) -> int:
        return max(1, min(limit or self._default_limit, self._max_limit))
