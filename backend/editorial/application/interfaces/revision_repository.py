"""Port for revision and review-event persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from editorial.application.pagination import CursorPosition
from editorial.domain.entities import (
    QueueSort,
    ReviewEvent,
    Revision,
    RevisionListRow,
    RevisionQueueFilter,
    RevisionStatus,
)


class RevisionRepository(ABC):
    """Revisions, their category associations, and review events."""

    @abstractmethod
    async def get_by_id(self, revision_id: str) -> Revision | None:
        """Load a revision with its category ids."""
        ...

    @abstractmethod
    async def get_latest_for_article(self, article_id: str) -> Revision | None:
        ...

    @abstractmethod
    async def find_live_for_article(self, article_id: str) -> Revision | None:
        """Return the article's single non-terminal revision, if any."""
        ...

    @abstractmethod
    async def list_for_article(self, article_id: str) -> list[Revision]:
        """All revisions of an article, newest first."""
        ...

    @abstractmethod
    async def has_pending(self, article_id: str) -> bool:
        """True if a revision is in review or approved."""
        ...

    @abstractmethod
    async def insert_live(self, revision: Revision) -> bool:
        """Insert a live revision and its categories unless the article already has one.

        Backed by a storage-level uniqueness guard; returns False instead of
        inserting when another live revision exists.
        """
        ...

    @abstractmethod
    async def update_content(self, revision: Revision) -> Revision:
        ...

    @abstractmethod
    async def replace_categories(self, revision_id: str, category_ids: list[str]) -> None:
        """Replace the full category set (delete-then-insert)."""
        ...

    @abstractmethod
    async def delete(self, revision_id: str) -> bool:
        """Hard delete a revision together with its category associations."""
        ...

    @abstractmethod
    async def transition(
        self,
        revision_id: str,
        expected: RevisionStatus,
        target: RevisionStatus,
        at: datetime,
    ) -> bool:
        """Compare-and-set the status. Returns False if it was no longer ``expected``."""
        ...

    @abstractmethod
    async def add_review_event(self, event: ReviewEvent) -> ReviewEvent:
        ...

    @abstractmethod
    async def list_review_events(self, revision_id: str) -> list[ReviewEvent]:
        """Review events of a revision, newest first."""
        ...

    @abstractmethod
    async def list_queue(
        self,
        queue_filter: RevisionQueueFilter,
        sort: QueueSort,
        after: CursorPosition | None,
        limit: int,
    ) -> list[RevisionListRow]:
        """Revisions ordered by (status_changed_at, id) in the ``sort`` direction."""
        ...

    @abstractmethod
    async def list_by_author(
        self,
        author_id: str,
        status: RevisionStatus | None,
        after: CursorPosition | None,
        limit: int,
    ) -> list[RevisionListRow]:
        """The author's revisions ordered by (updated_at, id) descending."""
        ...
