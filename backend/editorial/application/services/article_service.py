"""Public reads of published articles."""

from editorial.application.interfaces import (
    ArticleRepository,
    CategoryRepository,
    ModerationRepository,
    RevisionRepository,
    SocialRepository,
)
from editorial.domain.auth import AuthContext
from editorial.domain.entities import Article, ArticleStatus, FeedItem, PublishedArticle
from editorial.domain.exceptions import ContentRestrictedError, EntityNotFoundError


class ArticleService:
    """Resolves an article slug to the content readers are allowed to see."""

    def __init__(
        self,
        article_repository: ArticleRepository,
        revision_repository: RevisionRepository,
        category_repository: CategoryRepository,
        social_repository: SocialRepository,
        moderation_repository: ModerationRepository,
    ):
        self._articles = article_repository
        self._revisions = revision_repository
        self._categories = category_repository
        self._social = social_repository
        self._moderation = moderation_repository

    async def get_visible_article(self, article_id: str) -> Article:
        """Load an article that is published, not removed and not by a banned author."""
        article = await self._articles.get_by_id(article_id)
        if article is None:
            raise EntityNotFoundError("Article", article_id)
        await self._ensure_visible(article)
        return article

    async def get_article_by_slug(
        self, slug: str, viewer: AuthContext | None = None
    ) -> PublishedArticle:
        article = await self._articles.get_by_slug(slug)
        if article is None:
            raise EntityNotFoundError("Article", slug)
        await self._ensure_visible(article)

        revision = await self._revisions.get_by_id(article.published_revision_id)
        if revision is None:
            raise EntityNotFoundError("Revision", article.published_revision_id)

        has_liked = has_saved = None
        if viewer is not None:
            has_liked = await self._social.has_liked(viewer.user_id, article.id)
            has_saved = await self._social.has_saved(viewer.user_id, article.id)

        item = FeedItem(
            id=article.id,
            slug=article.slug,
            author_id=article.author_id,
            title=revision.title,
            summary=revision.summary,
            categories=await self._categories.get_refs(revision.category_ids),
            like_count=article.like_count,
            save_count=article.save_count,
            view_count=article.view_count,
            first_published_at=article.first_published_at,
            last_published_at=article.last_published_at,
            has_liked=has_liked,
            has_saved=has_saved,
        )
        return PublishedArticle(
            item=item,
            revision_id=revision.id,
            content=revision.content,
            bibliography=revision.bibliography,
            has_pending_update=await self._revisions.has_pending(article.id),
        )

    async def _ensure_visible(self, article: Article) -> None:
        if not article.has_been_published:
            raise EntityNotFoundError("Article", article.slug)
        if article.status == ArticleStatus.REMOVED:
            raise ContentRestrictedError(
                "This article has been removed", {"article_id": article.id}
            )
        if await self._moderation.get_ban(article.author_id) is not None:
            raise ContentRestrictedError(
                "This article's author is banned", {"article_id": article.id}
            )
