"""Publish pipeline: the single mutation that makes content visible in feeds."""

import logging

from editorial.application.interfaces import ArticleRepository, RevisionRepository
from editorial.application.pagination import CursorPosition, Page, build_page, decode_cursor
from editorial.application.services.audit_service import AuditService
from editorial.application.services.lifecycle import apply_transition, load_revision
from editorial.domain.auth import AuthContext
from editorial.domain.entities import (
    Article,
    AuditAction,
    AuditTargetType,
    PublishQueueItem,
    QueueSort,
    RevisionQueueFilter,
    RevisionStatus,
)

logger = logging.getLogger(__name__)


class PublishService:
    def __init__(
        self,
        article_repository: ArticleRepository,
        revision_repository: RevisionRepository,
        audit: AuditService,
        default_limit: int = 20,
        max_limit: int = 50,
    ):
        self._articles = article_repository
        self._revisions = revision_repository
        self._audit = audit
        self._default_limit = default_limit
        self._max_limit = max_limit

    async def get_publish_queue(
        self,
        ctx: AuthContext,
        sort: QueueSort = QueueSort.NEWEST,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Page[PublishQueueItem]:
        """Approved revisions with the reviewer and time of their latest approval."""
        ctx.require_admin()
        size = min(limit or self._default_limit, self._max_limit)
        after = decode_cursor(cursor) if cursor else None
        rows = await self._revisions.list_queue(
            RevisionQueueFilter(statuses=frozenset({RevisionStatus.APPROVED})),
            sort,
            after,
            size + 1,
        )
        items = [
            PublishQueueItem(
                id=row.id,
                article_id=row.article_id,
                author_id=row.author_id,
                title=row.title,
                summary=row.summary,
                categories=row.categories,
                approved_at=(
                    row.latest_approval.created_at if row.latest_approval else row.status_changed_at
                ),
                approved_by=row.latest_approval.reviewer_id if row.latest_approval else None,
                is_update=row.article_is_published,
            )
            for row in rows
        ]
        # Keyset position follows the queue's sort key, not approved_at.
        positions = {row.id: CursorPosition(row.status_changed_at, row.id) for row in rows}
        return build_page(items, size, lambda i: positions[i.id])

    async def publish(self, ctx: AuthContext, revision_id: str) -> Article:
        """Publish an approved revision and repoint its article.

        Calling it again for the same revision fails with a transition error;
        the article pointers change exactly once.
        """
        ctx.require_admin()
        revision, article = await load_revision(self._revisions, self._articles, revision_id)
        now = await apply_transition(self._revisions, revision, RevisionStatus.PUBLISHED, "publish")

        is_first_publish = article.first_published_at is None
        previous_revision_id = article.published_revision_id
        article.mark_published(revision.id, now)
        article = await self._articles.save_publication(article)

        await self._audit.record(
            ctx.user_id,
            AuditAction.REV_PUBLISHED,
            AuditTargetType.REVISION,
            revision.id,
            meta={
                "article_id": article.id,
                "is_first_publish": is_first_publish,
                "previous_published_revision_id": previous_revision_id,
            },
        )
        logger.info(
            "Revision %s published for article %s (first=%s)",
            revision.id, article.slug, is_first_publish,
        )
        return article
