"""Reviewer side of the pipeline: feedback, approval and the review queue."""

import logging

from editorial.application.interfaces import ArticleRepository, RevisionRepository
from editorial.application.pagination import CursorPosition, Page, build_page, decode_cursor
from editorial.application.schemas import ReviewFeedback
from editorial.application.services.audit_service import AuditService
from editorial.application.services.lifecycle import apply_transition, load_revision
from editorial.application.services.revision_service import RevisionService
from editorial.domain.auth import AuthContext
from editorial.domain.entities import (
    AuditAction,
    AuditTargetType,
    QueueSort,
    ReviewAction,
    ReviewEvent,
    ReviewQueueItem,
    RevisionDetail,
    RevisionQueueFilter,
    RevisionStatus,
)
from editorial.domain.exceptions import ForbiddenError, ValidationError
from editorial.domain.state_machine import REVIEWABLE_STATUSES

logger = logging.getLogger(__name__)

REVIEW_QUEUE_STATUSES = frozenset({RevisionStatus.IN_REVIEW, RevisionStatus.CHANGES_REQUESTED})


class ReviewService:
    def __init__(
        self,
        article_repository: ArticleRepository,
        revision_repository: RevisionRepository,
        revision_service: RevisionService,
        audit: AuditService,
        default_limit: int = 20,
        max_limit: int = 50,
    ):
        self._articles = article_repository
        self._revisions = revision_repository
        self._revision_service = revision_service
        self._audit = audit
        self._default_limit = default_limit
        self._max_limit = max_limit

    async def get_review_queue(
        self,
        ctx: AuthContext,
        status: RevisionStatus | None = RevisionStatus.IN_REVIEW,
        author_id: str | None = None,
        category_id: str | None = None,
        sort: QueueSort = QueueSort.NEWEST,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Page[ReviewQueueItem]:
        """Revisions awaiting a reviewer, by submission time.

        ``status=None`` lists both in-review and changes-requested revisions.
        """
        ctx.require_reviewer()
        if status is not None and status not in REVIEW_QUEUE_STATUSES:
            raise ValidationError(
                f"Review queue cannot be filtered by {status.value}",
                {"allowed": sorted(s.value for s in REVIEW_QUEUE_STATUSES)},
            )
        statuses = frozenset({status}) if status else REVIEW_QUEUE_STATUSES
        size = min(limit or self._default_limit, self._max_limit)
        after = decode_cursor(cursor) if cursor else None

        rows = await self._revisions.list_queue(
            RevisionQueueFilter(statuses=statuses, author_id=author_id, category_id=category_id),
            sort,
            after,
            size + 1,
        )
        items = [
            ReviewQueueItem(
                id=row.id,
                article_id=row.article_id,
                article_slug=row.article_slug,
                author_id=row.author_id,
                title=row.title,
                summary=row.summary,
                status=row.status,
                categories=row.categories,
                submitted_at=row.status_changed_at,
                previous_feedback_count=row.feedback_count,
                is_update=row.article_is_published,
            )
            for row in rows
        ]
        return build_page(items, size, lambda i: CursorPosition(i.submitted_at, i.id))

    async def get_revision_for_review(self, ctx: AuthContext, revision_id: str) -> RevisionDetail:
        ctx.require_reviewer()
        revision, article = await load_revision(self._revisions, self._articles, revision_id)
        if revision.status not in REVIEWABLE_STATUSES:
            raise ForbiddenError(
                f"Revision is not under review; it is in {revision.status.value} status",
                {"current_status": revision.status.value},
            )
        return await self._revision_service.build_detail(revision, article)

    async def give_feedback(
        self, ctx: AuthContext, revision_id: str, data: ReviewFeedback
    ) -> RevisionDetail:
        ctx.require_reviewer()
        revision, article = await load_revision(self._revisions, self._articles, revision_id)
        await apply_transition(
            self._revisions, revision, RevisionStatus.CHANGES_REQUESTED, "give feedback"
        )
        event = await self._revisions.add_review_event(
            ReviewEvent(
                revision_id=revision.id,
                reviewer_id=ctx.user_id,
                action=ReviewAction.FEEDBACK,
                feedback_text=data.feedback_text,
            )
        )
        await self._audit.record(
            ctx.user_id,
            AuditAction.REV_FEEDBACK,
            AuditTargetType.REVISION,
            revision.id,
            meta={"article_id": article.id, "review_event_id": event.id},
        )
        logger.info("Feedback on revision %s by %s", revision.id, ctx.user_id)
        return await self._revision_service.build_detail(revision, article)

    async def approve(self, ctx: AuthContext, revision_id: str) -> RevisionDetail:
        ctx.require_reviewer()
        revision, article = await load_revision(self._revisions, self._articles, revision_id)
        await apply_transition(self._revisions, revision, RevisionStatus.APPROVED, "approve")
        event = await self._revisions.add_review_event(
            ReviewEvent(
                revision_id=revision.id,
                reviewer_id=ctx.user_id,
                action=ReviewAction.APPROVE,
            )
        )
        await self._audit.record(
            ctx.user_id,
            AuditAction.REV_APPROVED,
            AuditTargetType.REVISION,
            revision.id,
            meta={"article_id": article.id, "review_event_id": event.id},
        )
        logger.info("Revision %s approved by %s", revision.id, ctx.user_id)
        return await self._revision_service.build_detail(revision, article)
