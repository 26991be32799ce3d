"""SQLAlchemy ORM models for likes, saves, follows, views and bans.

Each join table's primary key is the uniqueness guard for its toggle.
"""

from datetime import date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from editorial.infrastructure.database.base import Base, utcnow


class ArticleLikeModel(Base):
    __tablename__ = "article_likes"

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    article_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("articles.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class ArticleSaveModel(Base):
    __tablename__ = "article_saves"
    __table_args__ = (Index("ix_article_saves_user_created", "user_id", "created_at", "article_id"),)

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    article_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("articles.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class FollowModel(Base):
    __tablename__ = "follows"
    __table_args__ = (
        CheckConstraint("follower_id <> followed_id", name="ck_follows_not_self"),
        Index("ix_follows_followed_created", "followed_id", "created_at"),
        Index("ix_follows_follower_created", "follower_id", "created_at"),
    )

    follower_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    followed_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class ArticleViewModel(Base):
    __tablename__ = "article_views"

    article_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("articles.id", ondelete="CASCADE"), primary_key=True
    )
    viewer_key: Mapped[str] = mapped_column(String(100), primary_key=True)
    viewed_on: Mapped[date] = mapped_column(Date, primary_key=True)


class UserBanModel(Base):
    __tablename__ = "user_bans"

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    banned_by: Mapped[str] = mapped_column(String(36), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    banned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
