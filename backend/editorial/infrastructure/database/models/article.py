"""SQLAlchemy ORM model for the Article aggregate."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from editorial.domain.entities import ArticleStatus
from editorial.infrastructure.database.base import Base, utcnow


class ArticleModel(Base):
    """ORM model: maps to the 'articles' table.

    Counters are non-negative at the storage level; decrements are also
    guarded in the update statement.
    """

    __tablename__ = "articles"
    __table_args__ = (
        CheckConstraint("like_count >= 0", name="ck_articles_like_count_non_negative"),
        CheckConstraint("save_count >= 0", name="ck_articles_save_count_non_negative"),
        CheckConstraint("view_count >= 0", name="ck_articles_view_count_non_negative"),
        Index("ix_articles_feed_recent", "status", "last_published_at", "id"),
        Index("ix_articles_feed_popular", "status", "like_count", "last_published_at", "id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    author_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(220), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ArticleStatus.PUBLISHED.value
    )
    # No FK: revisions reference articles, and this pointer closes the cycle.
    published_revision_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    first_published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    save_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<ArticleModel(id={self.id}, slug='{self.slug}')>"
