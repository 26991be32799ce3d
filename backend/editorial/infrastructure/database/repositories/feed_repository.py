"""Read-only keyset queries over published content."""

from sqlalchemy import and_, exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from editorial.application.interfaces import FeedRepository
from editorial.application.pagination import CursorPosition
from editorial.domain.entities import (
    ArticleStatus,
    FeedAnchor,
    FeedFilter,
    FeedItem,
    FeedSort,
    RevisionStatus,
    SavedFeedItem,
)
from editorial.infrastructure.database.models import (
    ArticleLikeModel,
    ArticleModel,
    ArticleSaveModel,
    FollowModel,
    RevisionCategoryModel,
    RevisionModel,
    UserBanModel,
)
from editorial.infrastructure.database.repositories._common import (
    as_utc,
    escape_like,
    load_category_refs,
)


def _eligible(stmt):
    """Published article, not removed, author not banned, published revision present."""
    return stmt.join(
        RevisionModel, RevisionModel.id == ArticleModel.published_revision_id
    ).where(
        ArticleModel.status == ArticleStatus.PUBLISHED.value,
        ArticleModel.published_revision_id.is_not(None),
        RevisionModel.status == RevisionStatus.PUBLISHED.value,
        ~exists().where(UserBanModel.user_id == ArticleModel.author_id),
    )


def _apply_filter(stmt, feed_filter: FeedFilter):
    if feed_filter.text:
        pattern = f"%{escape_like(feed_filter.text)}%"
        stmt = stmt.where(
            or_(
                RevisionModel.title.ilike(pattern, escape="\\"),
                RevisionModel.summary.ilike(pattern, escape="\\"),
            )
        )
    if feed_filter.category_ids is not None:
        stmt = stmt.where(
            exists().where(
                RevisionCategoryModel.revision_id == ArticleModel.published_revision_id,
                RevisionCategoryModel.category_id.in_(sorted(feed_filter.category_ids)),
            )
        )
    if feed_filter.author_id:
        stmt = stmt.where(ArticleModel.author_id == feed_filter.author_id)
    if feed_filter.followed_by:
        stmt = stmt.where(
            ArticleModel.author_id.in_(
                select(FollowModel.followed_id).where(FollowModel.follower_id == feed_filter.followed_by)
            )
        )
    if feed_filter.published_from is not None:
        stmt = stmt.where(ArticleModel.last_published_at >= feed_filter.published_from)
    if feed_filter.published_to is not None:
        stmt = stmt.where(ArticleModel.last_published_at <= feed_filter.published_to)
    return stmt


def _apply_order(stmt, sort: FeedSort, after: FeedAnchor | None):
    published, aid, likes = ArticleModel.last_published_at, ArticleModel.id, ArticleModel.like_count

    if sort == FeedSort.POPULAR:
        if after is not None:
            count = after.like_count if after.like_count is not None else 0
            stmt = stmt.where(
                or_(
                    likes < count,
                    and_(likes == count, published < after.last_published_at),
                    and_(likes == count, published == after.last_published_at, aid < after.id),
                )
            )
        return stmt.order_by(likes.desc(), published.desc(), aid.desc())

    if after is not None:
        stmt = stmt.where(
            or_(
                published < after.last_published_at,
                and_(published == after.last_published_at, aid < after.id),
            )
        )
    return stmt.order_by(published.desc(), aid.desc())


class SQLAlchemyFeedRepository(FeedRepository):

    def __init__(self, session: AsyncSession):
        self._session = session

    async def list_feed(
        self,
        feed_filter: FeedFilter,
        sort: FeedSort,
        after: FeedAnchor | None,
        limit: int,
        viewer_id: str | None = None,
    ) -> list[FeedItem]:
        stmt = _eligible(select(ArticleModel, RevisionModel.title, RevisionModel.summary))
        stmt = _apply_order(_apply_filter(stmt, feed_filter), sort, after).limit(limit)
        rows = (await self._session.execute(stmt.execution_options(populate_existing=True))).all()
        return await self._to_items(rows, viewer_id)

    async def current_like_count(self, article_id: str) -> int | None:
        result = await self._session.execute(
            select(ArticleModel.like_count).where(ArticleModel.id == article_id)
        )
        return result.scalar_one_or_none()

    async def list_saved(
        self,
        user_id: str,
        after: CursorPosition | None,
        limit: int,
    ) -> list[SavedFeedItem]:
        saved_at, aid = ArticleSaveModel.created_at, ArticleSaveModel.article_id
        stmt = _eligible(
            select(ArticleModel, RevisionModel.title, RevisionModel.summary, saved_at)
            .join(ArticleSaveModel, ArticleSaveModel.article_id == ArticleModel.id)
        ).where(ArticleSaveModel.user_id == user_id)
        if after is not None:
            stmt = stmt.where(or_(saved_at < after.timestamp, and_(saved_at == after.timestamp, aid < after.id)))
        stmt = stmt.order_by(saved_at.desc(), aid.desc()).limit(limit)

        rows = (await self._session.execute(stmt.execution_options(populate_existing=True))).all()
        items = await self._to_items([row[:3] for row in rows], user_id)
        return [SavedFeedItem(item=item, saved_at=as_utc(row[3])) for item, row in zip(items, rows)]

    async def _to_items(self, rows, viewer_id: str | None) -> list[FeedItem]:
        articles = [article for article, _title, _summary in rows]
        categories = await load_category_refs(
            self._session, [a.published_revision_id for a in articles]
        )
        liked = await self._viewer_ids(ArticleLikeModel, viewer_id, articles)
        saved = await self._viewer_ids(ArticleSaveModel, viewer_id, articles)

        return [
            FeedItem(
                id=article.id,
                slug=article.slug,
                author_id=article.author_id,
                title=title,
                summary=summary,
                categories=categories.get(article.published_revision_id, []),
                like_count=article.like_count,
                save_count=article.save_count,
                view_count=article.view_count,
                first_published_at=as_utc(article.first_published_at),
                last_published_at=as_utc(article.last_published_at),
                has_liked=(article.id in liked) if viewer_id else None,
                has_saved=(article.id in saved) if viewer_id else None,
            )
            for article, title, summary in rows
        ]

    async def _viewer_ids(self, model, viewer_id: str | None, articles) -> set[str]:
        if not viewer_id or not articles:
            return set()
        result = await self._session.execute(
            select(model.article_id).where(
                model.user_id == viewer_id,
                model.article_id.in_([a.id for a in articles]),
            )
        )
        return set(result.scalars().all())
