"""Concrete revision repository backed by SQLAlchemy."""

from datetime import datetime

from sqlalchemy import and_, delete, exists, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from editorial.application.interfaces import RevisionRepository
from editorial.application.pagination import CursorPosition
from editorial.domain.entities import (
    QueueSort,
    ReviewAction,
    ReviewEvent,
    Revision,
    RevisionListRow,
    RevisionQueueFilter,
    RevisionStatus,
)
from editorial.domain.state_machine import LIVE_STATUSES, PENDING_STATUSES
from editorial.infrastructure.database.models import (
    ArticleModel,
    ReviewEventModel,
    RevisionCategoryModel,
    RevisionModel,
)
from editorial.infrastructure.database.repositories._common import (
    as_utc,
    insert_ignore,
    load_category_refs,
)

_LIVE_VALUES = [s.value for s in LIVE_STATUSES]


class SQLAlchemyRevisionRepository(RevisionRepository):
    """Implements the RevisionRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: RevisionModel, category_ids: list[str]) -> Revision:
        """Map ORM model → domain entity."""
        return Revision(
            id=model.id,
            article_id=model.article_id,
            title=model.title,
            summary=model.summary,
            content=model.content,
            bibliography=model.bibliography,
            category_ids=category_ids,
            status=RevisionStatus(model.status),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            status_changed_at=as_utc(model.status_changed_at),
        )

    def _event_to_entity(self, model: ReviewEventModel) -> ReviewEvent:
        return ReviewEvent(
            id=model.id,
            revision_id=model.revision_id,
            reviewer_id=model.reviewer_id,
            action=ReviewAction(model.action),
            feedback_text=model.feedback_text,
            created_at=as_utc(model.created_at),
        )

    async def _category_ids(self, revision_id: str) -> list[str]:
        result = await self._session.execute(
            select(RevisionCategoryModel.category_id)
            .where(RevisionCategoryModel.revision_id == revision_id)
            .order_by(RevisionCategoryModel.category_id)
        )
        return list(result.scalars().all())

    async def _first(self, stmt) -> Revision | None:
        result = await self._session.execute(stmt.execution_options(populate_existing=True))
        model = result.scalars().first()
        if model is None:
            return None
        return self._to_entity(model, await self._category_ids(model.id))

    # ── Lookups ──────────────────────────────────────────────────────

    async def get_by_id(self, revision_id: str) -> Revision | None:
        return await self._first(select(RevisionModel).where(RevisionModel.id == revision_id))

    async def get_latest_for_article(self, article_id: str) -> Revision | None:
        return await self._first(
            select(RevisionModel)
            .where(RevisionModel.article_id == article_id)
            .order_by(RevisionModel.created_at.desc(), RevisionModel.id.desc())
            .limit(1)
        )

    async def find_live_for_article(self, article_id: str) -> Revision | None:
        return await self._first(
            select(RevisionModel).where(
                RevisionModel.article_id == article_id,
                RevisionModel.status.in_(_LIVE_VALUES),
            )
        )

    async def list_for_article(self, article_id: str) -> list[Revision]:
        result = await self._session.execute(
            select(RevisionModel)
            .where(RevisionModel.article_id == article_id)
            .order_by(RevisionModel.created_at.desc(), RevisionModel.id.desc())
            .execution_options(populate_existing=True)
        )
        models = result.scalars().all()
        return [self._to_entity(m, await self._category_ids(m.id)) for m in models]

    async def has_pending(self, article_id: str) -> bool:
        result = await self._session.execute(
            select(
                exists().where(
                    RevisionModel.article_id == article_id,
                    RevisionModel.status.in_([s.value for s in PENDING_STATUSES]),
                )
            )
        )
        return bool(result.scalar())

    # ── Writes ───────────────────────────────────────────────────────

    async def insert_live(self, revision: Revision) -> bool:
        stmt = insert_ignore(self._session, RevisionModel).values(
            id=revision.id,
            article_id=revision.article_id,
            status=revision.status.value,
            title=revision.title,
            summary=revision.summary,
            content=revision.content,
            bibliography=revision.bibliography,
            created_at=revision.created_at,
            updated_at=revision.updated_at,
            status_changed_at=revision.status_changed_at,
        )
        result = await self._session.execute(stmt)
        if result.rowcount != 1:
            return False
        await self.replace_categories(revision.id, revision.category_ids)
        return True

    async def update_content(self, revision: Revision) -> Revision:
        await self._session.execute(
            update(RevisionModel)
            .where(RevisionModel.id == revision.id)
            .values(
                title=revision.title,
                summary=revision.summary,
                content=revision.content,
                bibliography=revision.bibliography,
                updated_at=revision.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        refreshed = await self.get_by_id(revision.id)
        if refreshed is None:
            raise ValueError(f"Revision {revision.id} not found in database")
        return refreshed

    async def replace_categories(self, revision_id: str, category_ids: list[str]) -> None:
        await self._session.execute(
            delete(RevisionCategoryModel).where(RevisionCategoryModel.revision_id == revision_id)
        )
        if category_ids:
            await self._session.execute(
                insert(RevisionCategoryModel),
                [{"revision_id": revision_id, "category_id": cid} for cid in dict.fromkeys(category_ids)],
            )

    async def delete(self, revision_id: str) -> bool:
        await self._session.execute(
            delete(RevisionCategoryModel).where(RevisionCategoryModel.revision_id == revision_id)
        )
        await self._session.execute(
            delete(ReviewEventModel).where(ReviewEventModel.revision_id == revision_id)
        )
        result = await self._session.execute(
            delete(RevisionModel).where(RevisionModel.id == revision_id)
        )
        return result.rowcount == 1

    async def transition(
        self,
        revision_id: str,
        expected: RevisionStatus,
        target: RevisionStatus,
        at: datetime,
    ) -> bool:
        result = await self._session.execute(
            update(RevisionModel)
            .where(RevisionModel.id == revision_id, RevisionModel.status == expected.value)
            .values(status=target.value, status_changed_at=at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def add_review_event(self, event: ReviewEvent) -> ReviewEvent:
        model = ReviewEventModel(
            id=event.id,
            revision_id=event.revision_id,
            reviewer_id=event.reviewer_id,
            action=event.action.value,
            feedback_text=event.feedback_text,
            created_at=event.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._event_to_entity(model)

    async def list_review_events(self, revision_id: str) -> list[ReviewEvent]:
        result = await self._session.execute(
            select(ReviewEventModel)
            .where(ReviewEventModel.revision_id == revision_id)
            .order_by(ReviewEventModel.created_at.desc(), ReviewEventModel.id.desc())
        )
        return [self._event_to_entity(m) for m in result.scalars().all()]

    # ── Listings ─────────────────────────────────────────────────────

    async def list_queue(
        self,
        queue_filter: RevisionQueueFilter,
        sort: QueueSort,
        after: CursorPosition | None,
        limit: int,
    ) -> list[RevisionListRow]:
        ts, rid = RevisionModel.status_changed_at, RevisionModel.id
        stmt = (
            select(RevisionModel, ArticleModel)
            .join(ArticleModel, ArticleModel.id == RevisionModel.article_id)
            .where(RevisionModel.status.in_([s.value for s in queue_filter.statuses]))
        )
        if queue_filter.author_id:
            stmt = stmt.where(ArticleModel.author_id == queue_filter.author_id)
        if queue_filter.category_id:
            stmt = stmt.where(
                exists().where(
                    RevisionCategoryModel.revision_id == RevisionModel.id,
                    RevisionCategoryModel.category_id == queue_filter.category_id,
                )
            )

        if sort == QueueSort.OLDEST:
            if after is not None:
                stmt = stmt.where(or_(ts > after.timestamp, and_(ts == after.timestamp, rid > after.id)))
            stmt = stmt.order_by(ts.asc(), rid.asc())
        else:
            if after is not None:
                stmt = stmt.where(or_(ts < after.timestamp, and_(ts == after.timestamp, rid < after.id)))
            stmt = stmt.order_by(ts.desc(), rid.desc())

        return await self._list_rows(stmt.limit(limit))

    async def list_by_author(
        self,
        author_id: str,
        status: RevisionStatus | None,
        after: CursorPosition | None,
        limit: int,
    ) -> list[RevisionListRow]:
        ts, rid = RevisionModel.updated_at, RevisionModel.id
        stmt = (
            select(RevisionModel, ArticleModel)
            .join(ArticleModel, ArticleModel.id == RevisionModel.article_id)
            .where(ArticleModel.author_id == author_id)
        )
        if status is not None:
            stmt = stmt.where(RevisionModel.status == status.value)
        if after is not None:
            stmt = stmt.where(or_(ts < after.timestamp, and_(ts == after.timestamp, rid < after.id)))
        return await self._list_rows(stmt.order_by(ts.desc(), rid.desc()).limit(limit))

    async def _list_rows(self, stmt) -> list[RevisionListRow]:
        result = await self._session.execute(stmt.execution_options(populate_existing=True))
        pairs = result.all()
        revision_ids = [rev.id for rev, _ in pairs]
        categories = await load_category_refs(self._session, revision_ids)
        feedback_counts = await self._feedback_counts(revision_ids)
        latest_review, latest_approval = await self._latest_events(revision_ids)

        return [
            RevisionListRow(
                id=rev.id,
                article_id=article.id,
                article_slug=article.slug,
                author_id=article.author_id,
                title=rev.title,
                summary=rev.summary,
                status=RevisionStatus(rev.status),
                categories=categories.get(rev.id, []),
                article_is_published=article.published_revision_id is not None,
                created_at=as_utc(rev.created_at),
                updated_at=as_utc(rev.updated_at),
                status_changed_at=as_utc(rev.status_changed_at),
                feedback_count=feedback_counts.get(rev.id, 0),
                latest_review=latest_review.get(rev.id),
                latest_approval=latest_approval.get(rev.id),
            )
            for rev, article in pairs
        ]

    async def _feedback_counts(self, revision_ids: list[str]) -> dict[str, int]:
        if not revision_ids:
            return {}
        result = await self._session.execute(
            select(ReviewEventModel.revision_id, func.count())
            .where(
                ReviewEventModel.revision_id.in_(revision_ids),
                ReviewEventModel.action == ReviewAction.FEEDBACK.value,
            )
            .group_by(ReviewEventModel.revision_id)
        )
        return {rid: count for rid, count in result.all()}

    async def _latest_events(
        self, revision_ids: list[str]
    ) -> tuple[dict[str, ReviewEvent], dict[str, ReviewEvent]]:
        latest: dict[str, ReviewEvent] = {}
        approvals: dict[str, ReviewEvent] = {}
        if not revision_ids:
            return latest, approvals
        result = await self._session.execute(
            select(ReviewEventModel)
            .where(ReviewEventModel.revision_id.in_(revision_ids))
            .order_by(ReviewEventModel.created_at.desc(), ReviewEventModel.id.desc())
        )
        for model in result.scalars().all():
            event = self._event_to_entity(model)
            latest.setdefault(event.revision_id, event)
            if event.action == ReviewAction.APPROVE:
                approvals.setdefault(event.revision_id, event)
        return latest, approvals
