"""SQLAlchemy ORM models for revisions, their categories and review events."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from editorial.domain.state_machine import LIVE_STATUSES
from editorial.infrastructure.database.base import Base, utcnow

_LIVE_STATUS_SQL = ", ".join(f"'{s.value}'" for s in sorted(LIVE_STATUSES, key=lambda s: s.value))
LIVE_REVISION_PREDICATE = text(f"status IN ({_LIVE_STATUS_SQL})")


class RevisionModel(Base):
    """ORM model: maps to the 'revisions' table.

    The partial unique index allows at most one live revision per article;
    it is the source of truth for that rule.
    """

    __tablename__ = "revisions"
    __table_args__ = (
        Index(
            "uq_revisions_one_live_per_article",
            "article_id",
            unique=True,
            sqlite_where=LIVE_REVISION_PREDICATE,
            postgresql_where=LIVE_REVISION_PREDICATE,
        ),
        Index("ix_revisions_status_changed", "status", "status_changed_at", "id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    article_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("articles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(30), nullable=False)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False)
    bibliography: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    status_changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<RevisionModel(id={self.id}, status={self.status})>"


class RevisionCategoryModel(Base):
    __tablename__ = "revision_categories"

    revision_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("revisions.id", ondelete="CASCADE"), primary_key=True
    )
    category_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True, index=True
    )


class ReviewEventModel(Base):
    __tablename__ = "review_events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    revision_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("revisions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reviewer_id: Mapped[str] = mapped_column(String(36), nullable=False)
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    feedback_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
