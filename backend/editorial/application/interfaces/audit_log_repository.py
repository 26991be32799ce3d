"""Port for the append-only audit ledger. There is deliberately no update or delete."""

from abc import ABC, abstractmethod

from editorial.application.pagination import CursorPosition
from editorial.domain.entities import AuditLogEntry, AuditLogFilter


class AuditLogRepository(ABC):

    @abstractmethod
    async def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        """Write one entry. Failures propagate and abort the enclosing transaction."""
        ...

    @abstractmethod
    async def query(
        self,
        log_filter: AuditLogFilter,
        after: CursorPosition | None,
        limit: int,
    ) -> list[AuditLogEntry]:
        """Entries ordered by (created_at, id) descending."""
        ...
