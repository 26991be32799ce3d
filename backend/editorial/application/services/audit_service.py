"""Audit ledger: append-only record of every state-changing action."""

import logging
from typing import Any

from editorial.application.interfaces import AuditLogRepository
from editorial.application.pagination import CursorPosition, Page, build_page, decode_cursor
from editorial.domain.auth import AuthContext
from editorial.domain.entities import AuditAction, AuditLogEntry, AuditLogFilter, AuditTargetType
from editorial.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)


class AuditService:
    """Writes and queries ledger entries.

    ``record`` runs inside the caller's transaction; if it raises, the
    action it describes is rolled back with it.
    """

    def __init__(self, repository: AuditLogRepository, default_limit: int = 50, max_limit: int = 100):
        self._repo = repository
        self._default_limit = default_limit
        self._max_limit = max_limit

    async def record(
        self,
        actor_id: str | None,
        action: AuditAction,
        target_type: AuditTargetType | None = None,
        target_id: str | None = None,
        reason: str | None = None,
        meta: dict[str, Any] | None = None,
    ) -> AuditLogEntry:
        entry = AuditLogEntry(
            actor_id=actor_id,
            action=action,
            target_type=target_type,
            target_id=target_id,
            reason=reason,
            meta=dict(meta or {}),
        )
        saved = await self._repo.append(entry)
        logger.debug("Audit %s by %s on %s:%s", action.value, actor_id, target_type, target_id)
        return saved

    async def query(
        self,
        ctx: AuthContext,
        log_filter: AuditLogFilter,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Page[AuditLogEntry]:
        """Admin-only listing, newest first."""
        ctx.require_admin()
        if log_filter.start and log_filter.end and log_filter.start > log_filter.end:
            raise ValidationError("start must not be after end")

        size = min(limit or self._default_limit, self._max_limit)
        after = decode_cursor(cursor) if cursor else None
        rows = await self._repo.query(log_filter, after, size + 1)
        return build_page(rows, size, lambda e: CursorPosition(e.created_at, e.id))
