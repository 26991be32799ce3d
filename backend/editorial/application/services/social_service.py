"""Likes, saves, follows and view tracking."""

import logging
from datetime import date, datetime, timezone

from editorial.application.interfaces import (
    Counter,
    ModerationRepository,
    SocialRepository,
)
from editorial.application.pagination import CursorPosition, Page, build_page, decode_cursor
from editorial.application.services.article_service import ArticleService
from editorial.domain.auth import AuthContext
from editorial.domain.entities import FollowEdge, ToggleResult
from editorial.domain.exceptions import ConflictError, ForbiddenError

logger = logging.getLogger(__name__)


class SocialService:
    """Toggle-style interactions; calling any of them twice converges.

    A counter moves only when the join row was actually inserted or deleted,
    in the same transaction as the row change.
    """

    def __init__(
        self,
        social_repository: SocialRepository,
        moderation_repository: ModerationRepository,
        article_service: ArticleService,
        default_limit: int = 20,
        max_limit: int = 50,
    ):
        self._social = social_repository
        self._moderation = moderation_repository
        self._articles = article_service
        self._default_limit = default_limit
        self._max_limit = max_limit

    async def like(self, ctx: AuthContext, article_id: str) -> ToggleResult:
        ctx.require_active()
        article = await self._articles.get_visible_article(article_id)
        if await self._social.add_like(ctx.user_id, article.id):
            count = await self._social.adjust_counter(article.id, Counter.LIKES, 1)
        else:
            count = article.like_count
        return ToggleResult(active=True, count=count)

    async def unlike(self, ctx: AuthContext, article_id: str) -> ToggleResult:
        ctx.require_active()
        article = await self._articles.get_visible_article(article_id)
        if await self._social.remove_like(ctx.user_id, article.id):
            count = await self._social.adjust_counter(article.id, Counter.LIKES, -1)
        else:
            count = article.like_count
        return ToggleResult(active=False, count=count)

    async def save(self, ctx: AuthContext, article_id: str) -> ToggleResult:
        ctx.require_active()
        article = await self._articles.get_visible_article(article_id)
        if await self._social.add_save(ctx.user_id, article.id):
            count = await self._social.adjust_counter(article.id, Counter.SAVES, 1)
        else:
            count = article.save_count
        return ToggleResult(active=True, count=count)

    async def unsave(self, ctx: AuthContext, article_id: str) -> ToggleResult:
        ctx.require_active()
        article = await self._articles.get_visible_article(article_id)
        if await self._social.remove_save(ctx.user_id, article.id):
            count = await self._social.adjust_counter(article.id, Counter.SAVES, -1)
        else:
            count = article.save_count
        return ToggleResult(active=False, count=count)

    async def follow(self, ctx: AuthContext, user_id: str) -> ToggleResult:
        """Follow another user; the result count is their follower count."""
        ctx.require_active()
        if user_id == ctx.user_id:
            raise ConflictError("You cannot follow yourself")
        if await self._moderation.get_ban(user_id) is not None:
            raise ForbiddenError("This user is banned", {"user_id": user_id})
        await self._social.add_follow(ctx.user_id, user_id)
        return ToggleResult(active=True, count=await self._social.follower_count(user_id))

    async def unfollow(self, ctx: AuthContext, user_id: str) -> ToggleResult:
        ctx.require_active()
        await self._social.remove_follow(ctx.user_id, user_id)
        return ToggleResult(active=False, count=await self._social.follower_count(user_id))

    async def is_following(self, ctx: AuthContext, user_id: str) -> bool:
        return await self._social.is_following(ctx.user_id, user_id)

    async def list_followers(
        self,
        user_id: str,
        cursor: str | None = None,
        limit: int | None = None,
        viewer: AuthContext | None = None,
    ) -> Page[FollowEdge]:
        """Users following ``user_id``, most recent first. Empty for banned users."""
        return await self._follow_page(self._social.list_followers, user_id, cursor, limit, viewer)

    async def list_following(
        self,
        user_id: str,
        cursor: str | None = None,
        limit: int | None = None,
        viewer: AuthContext | None = None,
    ) -> Page[FollowEdge]:
        return await self._follow_page(self._social.list_following, user_id, cursor, limit, viewer)

    async def _follow_page(self, fetch, user_id, cursor, limit, viewer) -> Page[FollowEdge]:
        size = min(limit or self._default_limit, self._max_limit)
        after = decode_cursor(cursor) if cursor else None
        if await self._moderation.get_ban(user_id) is not None:
            return Page()

        page = build_page(
            await fetch(user_id, after, size + 1),
            size,
            lambda e: CursorPosition(e.followed_at, e.user_id),
        )
        if viewer is not None and page.items:
            followed = await self._social.following_among(
                viewer.user_id, [e.user_id for e in page.items]
            )
            for edge in page.items:
                edge.viewer_follows = edge.user_id in followed
        return page

    async def track_view(self, article_id: str, viewer_key: str, day: date | None = None) -> bool:
        """Count at most one view per viewer key per day. Returns True if counted."""
        article = await self._articles.get_visible_article(article_id)
        day = day or datetime.now(timezone.utc).date()
        if not await self._social.add_view(article.id, viewer_key, day):
            return False
        await self._social.adjust_counter(article.id, Counter.VIEWS, 1)
        logger.debug("View counted for %s on %s", article.id, day)
        return True
