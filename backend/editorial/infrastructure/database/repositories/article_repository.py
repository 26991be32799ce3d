"""Concrete article repository backed by SQLAlchemy."""

from sqlalchemy import and_, exists, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from editorial.application.interfaces import ArticleRepository
from editorial.application.pagination import CursorPosition
from editorial.domain.entities import AdminArticleFilter, AdminArticleItem, Article, ArticleStatus
from editorial.infrastructure.database.models import ArticleModel, RevisionModel, UserBanModel
from editorial.infrastructure.database.repositories._common import as_utc, escape_like


class SQLAlchemyArticleRepository(ArticleRepository):
    """Implements the ArticleRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ArticleModel) -> Article:
        """Map ORM model → domain entity."""
        return Article(
            id=model.id,
            author_id=model.author_id,
            slug=model.slug,
            status=ArticleStatus(model.status),
            published_revision_id=model.published_revision_id,
            first_published_at=as_utc(model.first_published_at),
            last_published_at=as_utc(model.last_published_at),
            like_count=model.like_count,
            save_count=model.save_count,
            view_count=model.view_count,
            created_at=as_utc(model.created_at),
        )

    def _to_model(self, entity: Article) -> ArticleModel:
        """Map domain entity → ORM model (for creation)."""
        return ArticleModel(
            id=entity.id,
            author_id=entity.author_id,
            slug=entity.slug,
            status=entity.status.value,
            published_revision_id=entity.published_revision_id,
            first_published_at=entity.first_published_at,
            last_published_at=entity.last_published_at,
            like_count=entity.like_count,
            save_count=entity.save_count,
            view_count=entity.view_count,
            created_at=entity.created_at,
        )

    async def get_by_id(self, article_id: str) -> Article | None:
        result = await self._session.get(ArticleModel, article_id, populate_existing=True)
        return self._to_entity(result) if result else None

    async def get_by_slug(self, slug: str) -> Article | None:
        stmt = (
            select(ArticleModel)
            .where(ArticleModel.slug == slug)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def slug_exists(self, slug: str) -> bool:
        result = await self._session.execute(select(exists().where(ArticleModel.slug == slug)))
        return bool(result.scalar())

    async def create(self, article: Article) -> Article:
        model = self._to_model(article)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def save_publication(self, article: Article) -> Article:
        await self._session.execute(
            update(ArticleModel)
            .where(ArticleModel.id == article.id)
            .values(
                published_revision_id=article.published_revision_id,
                first_published_at=article.first_published_at,
                last_published_at=article.last_published_at,
            )
            .execution_options(synchronize_session=False)
        )
        refreshed = await self.get_by_id(article.id)
        if refreshed is None:
            raise ValueError(f"Article {article.id} not found in database")
        return refreshed

    async def set_status(
        self, article_id: str, expected: ArticleStatus, target: ArticleStatus
    ) -> bool:
        result = await self._session.execute(
            update(ArticleModel)
            .where(ArticleModel.id == article_id, ArticleModel.status == expected.value)
            .values(status=target.value)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def list_for_admin(
        self,
        article_filter: AdminArticleFilter,
        after: CursorPosition | None,
        limit: int,
    ) -> list[AdminArticleItem]:
        created, aid = ArticleModel.created_at, ArticleModel.id
        author_banned = exists().where(UserBanModel.user_id == ArticleModel.author_id).correlate(ArticleModel)
        stmt = select(
            ArticleModel, RevisionModel.title, RevisionModel.summary, author_banned.label("author_banned")
        ).join(RevisionModel, RevisionModel.id == ArticleModel.published_revision_id)

        if article_filter.status is not None:
            stmt = stmt.where(ArticleModel.status == article_filter.status.value)
        if article_filter.author_id:
            stmt = stmt.where(ArticleModel.author_id == article_filter.author_id)
        if article_filter.text:
            pattern = f"%{escape_like(article_filter.text)}%"
            stmt = stmt.where(
                or_(
                    RevisionModel.title.ilike(pattern, escape="\\"),
                    RevisionModel.summary.ilike(pattern, escape="\\"),
                )
            )
        if after is not None:
            stmt = stmt.where(or_(created < after.timestamp, and_(created == after.timestamp, aid < after.id)))

        result = await self._session.execute(
            stmt.order_by(created.desc(), aid.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return [
            AdminArticleItem(
                id=model.id,
                slug=model.slug,
                author_id=model.author_id,
                status=ArticleStatus(model.status),
                title=title,
                summary=summary,
                like_count=model.like_count,
                save_count=model.save_count,
                view_count=model.view_count,
                created_at=as_utc(model.created_at),
                last_published_at=as_utc(model.last_published_at),
                author_banned=bool(banned),
            )
            for model, title, summary, banned in result.all()
        ]
