"""Revision and review-event entities."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


class RevisionStatus(str, Enum):
    """Lifecycle states of a revision. Values are persisted as-is."""

    DRAFT = "DRAFT"
    IN_REVIEW = "IN_REVIEW"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"
    APPROVED = "APPROVED"
    WITHDRAWN = "WITHDRAWN"
    PUBLISHED = "PUBLISHED"

    @property
    def is_terminal(self) -> bool:
        return self in (RevisionStatus.PUBLISHED, RevisionStatus.WITHDRAWN)

    @property
    def is_live(self) -> bool:
        return not self.is_terminal


class ReviewAction(str, Enum):
    """Kinds of reviewer action recorded against a revision."""

    FEEDBACK = "FEEDBACK"
    APPROVE = "APPROVE"


@dataclass
class ReviewEvent:
    """Immutable record of a reviewer decision."""

    revision_id: str
    reviewer_id: str
    action: ReviewAction
    feedback_text: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class Revision:
    """One version of an article's content; the unit the state machine governs.

    The owning author is always the article's author; it is not cached here.
    """

    article_id: str
    title: str
    content: str
    summary: str = ""
    bibliography: str | None = None
    category_ids: list[str] = field(default_factory=list)
    status: RevisionStatus = RevisionStatus.DRAFT
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    # Bumped on every status transition; updated_at only tracks content edits.
    status_changed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def update(
        self,
        title: str | None = None,
        summary: str | None = None,
        content: str | None = None,
        bibliography: str | None = None,
    ) -> None:
        """Apply a partial content update and refresh updated_at.

        ``None`` leaves a field unchanged; an empty bibliography clears it.
        """
        if title is not None:
            self.title = title
        if summary is not None:
            self.summary = summary
        if content is not None:
            self.content = content
        if bibliography is not None:
            self.bibliography = bibliography or None
        self.updated_at = datetime.now(timezone.utc)

    def clone_as_draft(self) -> "Revision":
        """Start a fresh draft from this revision's content and categories."""
        return Revision(
            article_id=self.article_id,
            title=self.title,
            summary=self.summary,
            content=self.content,
            bibliography=self.bibliography,
            category_ids=list(self.category_ids),
        )
