"""User ban lookup backed by SQLAlchemy."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from editorial.application.interfaces import ModerationRepository
from editorial.domain.entities import UserBan
from editorial.infrastructure.database.models import UserBanModel
from editorial.infrastructure.database.repositories._common import as_utc, insert_ignore


class SQLAlchemyModerationRepository(ModerationRepository):

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_ban(self, user_id: str) -> UserBan | None:
        result = await self._session.execute(
            select(UserBanModel.user_id, UserBanModel.banned_by, UserBanModel.reason, UserBanModel.banned_at)
            .where(UserBanModel.user_id == user_id)
        )
        row = result.first()
        if row is None:
            return None
        return UserBan(user_id=row.user_id, banned_by=row.banned_by, reason=row.reason, banned_at=as_utc(row.banned_at))

    async def add_ban(self, ban: UserBan) -> bool:
        result = await self._session.execute(
            insert_ignore(self._session, UserBanModel).values(
                user_id=ban.user_id,
                banned_by=ban.banned_by,
                reason=ban.reason,
                banned_at=ban.banned_at,
            )
        )
        return result.rowcount == 1

    async def remove_ban(self, user_id: str) -> bool:
        result = await self._session.execute(
            delete(UserBanModel)
            .where(UserBanModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
