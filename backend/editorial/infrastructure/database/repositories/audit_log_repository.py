"""Append-only audit ledger backed by SQLAlchemy."""

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from editorial.application.interfaces import AuditLogRepository
from editorial.application.pagination import CursorPosition
from editorial.domain.entities import AuditAction, AuditLogEntry, AuditLogFilter, AuditTargetType
from editorial.infrastructure.database.models import AuditLogModel
from editorial.infrastructure.database.repositories._common import as_utc


class SQLAlchemyAuditLogRepository(AuditLogRepository):

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: AuditLogModel) -> AuditLogEntry:
        return AuditLogEntry(
            id=model.id,
            actor_id=model.actor_id,
            action=AuditAction(model.action),
            target_type=AuditTargetType(model.target_type) if model.target_type else None,
            target_id=model.target_id,
            reason=model.reason,
            meta=dict(model.meta or {}),
            created_at=as_utc(model.created_at),
        )

    async def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        model = AuditLogModel(
            id=entry.id,
            actor_id=entry.actor_id,
            action=entry.action.value,
            target_type=entry.target_type.value if entry.target_type else None,
            target_id=entry.target_id,
            reason=entry.reason,
            meta=entry.meta,
            created_at=entry.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return entry

    async def query(
        self,
        log_filter: AuditLogFilter,
        after: CursorPosition | None,
        limit: int,
    ) -> list[AuditLogEntry]:
        ts, eid = AuditLogModel.created_at, AuditLogModel.id
        stmt = select(AuditLogModel)
        if log_filter.action is not None:
            stmt = stmt.where(AuditLogModel.action == log_filter.action.value)
        if log_filter.target_type is not None:
            stmt = stmt.where(AuditLogModel.target_type == log_filter.target_type.value)
        if log_filter.target_id is not None:
            stmt = stmt.where(AuditLogModel.target_id == log_filter.target_id)
        if log_filter.actor_id is not None:
            stmt = stmt.where(AuditLogModel.actor_id == log_filter.actor_id)
        if log_filter.start is not None:
            stmt = stmt.where(ts >= log_filter.start)
        if log_filter.end is not None:
            stmt = stmt.where(ts <= log_filter.end)
        if after is not None:
            stmt = stmt.where(or_(ts < after.timestamp, and_(ts == after.timestamp, eid < after.id)))

        result = await self._session.execute(stmt.order_by(ts.desc(), eid.desc()).limit(limit))
        return [self._to_entity(m) for m in result.scalars().all()]
