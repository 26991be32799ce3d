"""Join-row toggles and atomic counter updates backed by SQLAlchemy."""

from datetime import date, datetime, timezone

from sqlalchemy import and_, delete, exists, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from editorial.application.interfaces import Counter, SocialRepository
from editorial.application.pagination import CursorPosition
from editorial.domain.entities import FollowEdge
from editorial.infrastructure.database.models import (
    ArticleLikeModel,
    ArticleModel,
    ArticleSaveModel,
    ArticleViewModel,
    FollowModel,
)
from editorial.infrastructure.database.repositories._common import as_utc, insert_ignore


class SQLAlchemySocialRepository(SocialRepository):
    """Inserts use ON CONFLICT DO NOTHING so repeated toggles converge."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _insert(self, model, **values) -> bool:
        result = await self._session.execute(insert_ignore(self._session, model).values(**values))
        return result.rowcount == 1

    async def _delete(self, model, *criteria) -> bool:
        result = await self._session.execute(
            delete(model).where(*criteria).execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def _exists(self, *criteria) -> bool:
        result = await self._session.execute(select(exists().where(*criteria)))
        return bool(result.scalar())

    async def add_like(self, user_id: str, article_id: str) -> bool:
        return await self._insert(
            ArticleLikeModel, user_id=user_id, article_id=article_id, created_at=datetime.now(timezone.utc)
        )

    async def remove_like(self, user_id: str, article_id: str) -> bool:
        return await self._delete(
            ArticleLikeModel, ArticleLikeModel.user_id == user_id, ArticleLikeModel.article_id == article_id
        )

    async def has_liked(self, user_id: str, article_id: str) -> bool:
        return await self._exists(
            ArticleLikeModel.user_id == user_id, ArticleLikeModel.article_id == article_id
        )

    async def add_save(self, user_id: str, article_id: str) -> bool:
        return await self._insert(
            ArticleSaveModel, user_id=user_id, article_id=article_id, created_at=datetime.now(timezone.utc)
        )

    async def remove_save(self, user_id: str, article_id: str) -> bool:
        return await self._delete(
            ArticleSaveModel, ArticleSaveModel.user_id == user_id, ArticleSaveModel.article_id == article_id
        )

    async def has_saved(self, user_id: str, article_id: str) -> bool:
        return await self._exists(
            ArticleSaveModel.user_id == user_id, ArticleSaveModel.article_id == article_id
        )

    async def add_follow(self, follower_id: str, followed_id: str) -> bool:
        return await self._insert(
            FollowModel,
            follower_id=follower_id,
            followed_id=followed_id,
            created_at=datetime.now(timezone.utc),
        )

    async def remove_follow(self, follower_id: str, followed_id: str) -> bool:
        return await self._delete(
            FollowModel, FollowModel.follower_id == follower_id, FollowModel.followed_id == followed_id
        )

    async def follower_count(self, user_id: str) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(FollowModel).where(FollowModel.followed_id == user_id)
        )
        return int(result.scalar_one())

    async def is_following(self, follower_id: str, followed_id: str) -> bool:
        return await self._exists(
            FollowModel.follower_id == follower_id, FollowModel.followed_id == followed_id
        )

    async def following_among(self, follower_id: str, user_ids: list[str]) -> set[str]:
        if not user_ids:
            return set()
        result = await self._session.execute(
            select(FollowModel.followed_id).where(
                FollowModel.follower_id == follower_id, FollowModel.followed_id.in_(user_ids)
            )
        )
        return set(result.scalars().all())

    async def _list_follows(self, owner, other, user_id: str, after: CursorPosition | None, limit: int):
        ts = FollowModel.created_at
        stmt = select(other, ts).where(owner == user_id)
        if after is not None:
            stmt = stmt.where(or_(ts < after.timestamp, and_(ts == after.timestamp, other < after.id)))
        result = await self._session.execute(stmt.order_by(ts.desc(), other.desc()).limit(limit))
        return [FollowEdge(user_id=uid, followed_at=as_utc(at)) for uid, at in result.all()]

    async def list_followers(
        self, user_id: str, after: CursorPosition | None, limit: int
    ) -> list[FollowEdge]:
        return await self._list_follows(
            FollowModel.followed_id, FollowModel.follower_id, user_id, after, limit
        )

    async def list_following(
        self, user_id: str, after: CursorPosition | None, limit: int
    ) -> list[FollowEdge]:
        return await self._list_follows(
            FollowModel.follower_id, FollowModel.followed_id, user_id, after, limit
        )

    async def add_view(self, article_id: str, viewer_key: str, day: date) -> bool:
        return await self._insert(
            ArticleViewModel, article_id=article_id, viewer_key=viewer_key, viewed_on=day
        )

    async def adjust_counter(self, article_id: str, counter: Counter, delta: int) -> int:
        column = getattr(ArticleModel, counter.value)
        stmt = update(ArticleModel).where(ArticleModel.id == article_id)
        if delta < 0:
            stmt = stmt.where(column >= -delta)
        await self._session.execute(
            stmt.values({column: column + delta}).execution_options(synchronize_session=False)
        )
        result = await self._session.execute(select(column).where(ArticleModel.id == article_id))
        return int(result.scalar_one())
