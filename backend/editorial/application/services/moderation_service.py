"""Administrative moderation: user bans and article removal."""

import logging

from editorial.application.interfaces import ArticleRepository, ModerationRepository
from editorial.application.pagination import CursorPosition, Page, build_page, decode_cursor
from editorial.application.services.audit_service import AuditService
from editorial.domain.auth import AuthContext
from editorial.domain.entities import (
    AdminArticleFilter,
    AdminArticleItem,
    Article,
    ArticleStatus,
    AuditAction,
    AuditTargetType,
    UserBan,
)
from editorial.domain.exceptions import ConflictError, EntityNotFoundError, ValidationError

logger = logging.getLogger(__name__)


class ModerationService:
    def __init__(
        self,
        article_repository: ArticleRepository,
        moderation_repository: ModerationRepository,
        audit: AuditService,
        default_limit: int = 20,
        max_limit: int = 50,
    ):
        self._articles = article_repository
        self._moderation = moderation_repository
        self._audit = audit
        self._default_limit = default_limit
        self._max_limit = max_limit

    async def is_banned(self, user_id: str) -> bool:
        return await self._moderation.get_ban(user_id) is not None

    async def ban_user(self, ctx: AuthContext, user_id: str, reason: str) -> UserBan:
        ctx.require_admin()
        if user_id == ctx.user_id:
            raise ValidationError("You cannot ban yourself")
        ban = UserBan(user_id=user_id, banned_by=ctx.user_id, reason=reason)
        if not await self._moderation.add_ban(ban):
            raise ConflictError("User is already banned", {"user_id": user_id})

        await self._audit.record(
            ctx.user_id, AuditAction.USER_BANNED, AuditTargetType.USER, user_id, reason=reason
        )
        logger.warning("User %s banned by %s", user_id, ctx.user_id)
        return ban

    async def unban_user(self, ctx: AuthContext, user_id: str) -> None:
        ctx.require_admin()
        if not await self._moderation.remove_ban(user_id):
            raise ConflictError("User is not banned", {"user_id": user_id})
        await self._audit.record(
            ctx.user_id, AuditAction.USER_UNBANNED, AuditTargetType.USER, user_id
        )
        logger.info("User %s unbanned by %s", user_id, ctx.user_id)

    async def list_articles(
        self,
        ctx: AuthContext,
        article_filter: AdminArticleFilter,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Page[AdminArticleItem]:
        """Admin listing of published and removed articles, newest first."""
        ctx.require_admin()
        size = min(limit or self._default_limit, self._max_limit)
        after = decode_cursor(cursor) if cursor else None
        rows = await self._articles.list_for_admin(article_filter, after, size + 1)
        return build_page(rows, size, lambda a: CursorPosition(a.created_at, a.id))

    async def remove_article(self, ctx: AuthContext, article_id: str, reason: str) -> Article:
        return await self._set_article_status(
            ctx, article_id, ArticleStatus.REMOVED, AuditAction.ARTICLE_REMOVED, reason
        )

    async def restore_article(self, ctx: AuthContext, article_id: str) -> Article:
        return await self._set_article_status(
            ctx, article_id, ArticleStatus.PUBLISHED, AuditAction.ARTICLE_RESTORED, None
        )

    async def _set_article_status(
        self,
        ctx: AuthContext,
        article_id: str,
        target: ArticleStatus,
        action: AuditAction,
        reason: str | None,
    ) -> Article:
        ctx.require_admin()
        article = await self._articles.get_by_id(article_id)
        if article is None:
            raise EntityNotFoundError("Article", article_id)

        expected = (
            ArticleStatus.PUBLISHED if target == ArticleStatus.REMOVED else ArticleStatus.REMOVED
        )
        if not await self._articles.set_status(article_id, expected, target):
            raise ConflictError(
                f"Article is already {target.value}",
                {"article_id": article_id, "status": target.value},
            )
        article.status = target

        await self._audit.record(
            ctx.user_id, action, AuditTargetType.ARTICLE, article_id, reason=reason,
            meta={"slug": article.slug},
        )
        logger.info("Article %s → %s by %s", article.slug, target.value, ctx.user_id)
        return article
