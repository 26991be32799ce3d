"""Revision state machine: the author-facing side of the editorial lifecycle."""

import logging

from editorial.application.interfaces import (
    ArticleRepository,
    CategoryRepository,
    RevisionRepository,
)
from editorial.application.pagination import CursorPosition, Page, build_page, decode_cursor
from editorial.application.schemas import ArticleCreate, RevisionUpdate
from editorial.application.services.audit_service import AuditService
from editorial.application.services.lifecycle import (
    apply_transition,
    ensure_author,
    load_revision,
)
from editorial.application.services.slug_service import SlugService
from editorial.domain.auth import AuthContext
from editorial.domain.entities import (
    Article,
    AuditAction,
    AuditTargetType,
    MyRevisionItem,
    Revision,
    RevisionDetail,
    RevisionHistoryItem,
    RevisionStatus,
)
from editorial.domain.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    LiveRevisionConflictError,
    ValidationError,
)
from editorial.domain.state_machine import EDITABLE_STATUSES

logger = logging.getLogger(__name__)


class RevisionService:
    """Create, edit, submit and withdraw revisions.

    Every method takes the caller's ``AuthContext`` first. Ownership and
    transition checks are independent gates; both must pass.
    """

    def __init__(
        self,
        article_repository: ArticleRepository,
        revision_repository: RevisionRepository,
        category_repository: CategoryRepository,
        audit: AuditService,
        slug_service: SlugService,
        max_categories: int = 5,
        default_limit: int = 20,
        max_limit: int = 50,
    ):
        self._articles = article_repository
        self._revisions = revision_repository
        self._categories = category_repository
        self._audit = audit
        self._slugs = slug_service
        self._max_categories = max_categories
        self._default_limit = default_limit
        self._max_limit = max_limit

    # ── Read operations ──────────────────────────────────────────────

    async def get_revision(self, ctx: AuthContext, revision_id: str) -> RevisionDetail:
        """The article's author or any reviewer/admin may read a revision."""
        revision, article = await load_revision(self._revisions, self._articles, revision_id)
        if article.author_id != ctx.user_id and not ctx.is_reviewer:
            raise ForbiddenError("Access denied", {"revision_id": revision_id})
        return await self.build_detail(revision, article)

    async def list_my_revisions(
        self,
        ctx: AuthContext,
        status: RevisionStatus | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Page[MyRevisionItem]:
        size = min(limit or self._default_limit, self._max_limit)
        after = decode_cursor(cursor) if cursor else None
        rows = await self._revisions.list_by_author(ctx.user_id, status, after, size + 1)
        items = [
            MyRevisionItem(
                id=row.id,
                article_id=row.article_id,
                title=row.title,
                status=row.status,
                has_unread_feedback=(
                    row.status == RevisionStatus.CHANGES_REQUESTED
                    and row.latest_review is not None
                    and row.latest_review.created_at > row.updated_at
                ),
                created_at=row.created_at,
                updated_at=row.updated_at,
            )
            for row in rows
        ]
        return build_page(items, size, lambda i: CursorPosition(i.updated_at, i.id))

    async def get_revision_history(self, ctx: AuthContext, article_id: str) -> list[RevisionHistoryItem]:
        article = await self._articles.get_by_id(article_id)
        if article is None:
            raise EntityNotFoundError("Article", article_id)
        if article.author_id != ctx.user_id and not ctx.is_reviewer:
            raise ForbiddenError("Access denied", {"article_id": article_id})

        revisions = await self._revisions.list_for_article(article_id)
        return [
            RevisionHistoryItem(
                id=r.id,
                status=r.status,
                title=r.title,
                is_published=r.id == article.published_revision_id,
                created_at=r.created_at,
                published_at=r.status_changed_at if r.status == RevisionStatus.PUBLISHED else None,
            )
            for r in revisions
        ]

    # ── Write operations ─────────────────────────────────────────────

    async def create_article_with_draft(self, ctx: AuthContext, data: ArticleCreate) -> RevisionDetail:
        ctx.require_active()
        category_ids = await self._validate_categories(data.category_ids)
        slug = await self._slugs.generate_unique_slug(data.title)

        article = await self._articles.create(Article(author_id=ctx.user_id, slug=slug))
        draft = Revision(
            article_id=article.id,
            title=data.title,
            summary=data.summary,
            content=data.content,
            bibliography=data.bibliography,
            category_ids=category_ids,
        )
        if not await self._revisions.insert_live(draft):
            # A brand-new article cannot already have a live revision.
            raise LiveRevisionConflictError(article.id, "")

        await self._audit.record(
            ctx.user_id,
            AuditAction.ARTICLE_CREATED,
            AuditTargetType.ARTICLE,
            article.id,
            meta={"revision_id": draft.id, "slug": slug},
        )
        logger.info("Article %s created by %s with draft %s", slug, ctx.user_id, draft.id)
        return await self.build_detail(draft, article)

    async def start_new_revision(self, ctx: AuthContext, article_id: str) -> RevisionDetail:
        """Clone the latest revision into a fresh draft.

        Fails with a conflict carrying the existing revision id when the
        article already has a live revision.
        """
        ctx.require_active()
        article = await self._articles.get_by_id(article_id)
        if article is None:
            raise EntityNotFoundError("Article", article_id)
        ensure_author(ctx, article)

        live = await self._revisions.find_live_for_article(article_id)
        if live is not None:
            raise LiveRevisionConflictError(article_id, live.id)

        latest = await self._revisions.get_latest_for_article(article_id)
        if latest is None:
            raise EntityNotFoundError("Revision", f"latest of article {article_id}")

        draft = latest.clone_as_draft()
        if not await self._revisions.insert_live(draft):
            winner = await self._revisions.find_live_for_article(article_id)
            logger.debug("Concurrent draft start lost for article %s", article_id)
            raise LiveRevisionConflictError(article_id, winner.id if winner else "")

        await self._audit.record(
            ctx.user_id,
            AuditAction.REV_DRAFT_STARTED,
            AuditTargetType.REVISION,
            draft.id,
            meta={"article_id": article_id, "source_revision_id": latest.id},
        )
        logger.info("Draft %s started for article %s", draft.id, article_id)
        return await self.build_detail(draft, article)

    async def update_revision(
        self, ctx: AuthContext, revision_id: str, data: RevisionUpdate
    ) -> RevisionDetail:
        ctx.require_active()
        revision, article = await load_revision(self._revisions, self._articles, revision_id)
        ensure_author(ctx, article)
        if revision.status not in EDITABLE_STATUSES:
            raise ForbiddenError(
                f"Cannot edit revision: revision is in {revision.status.value} status",
                {"current_status": revision.status.value},
            )

        bibliography = data.bibliography
        if bibliography is None and "bibliography" in data.model_fields_set:
            bibliography = ""
        revision.update(
            title=data.title,
            summary=data.summary,
            content=data.content,
            bibliography=bibliography,
        )
        if data.category_ids is not None:
            revision.category_ids = await self._validate_categories(data.category_ids)
            await self._revisions.replace_categories(revision.id, revision.category_ids)
        revision = await self._revisions.update_content(revision)
        return await self.build_detail(revision, article)

    async def delete_revision(self, ctx: AuthContext, revision_id: str) -> None:
        ctx.require_active()
        revision, article = await load_revision(self._revisions, self._articles, revision_id)
        ensure_author(ctx, article)
        if revision.status != RevisionStatus.DRAFT:
            raise ForbiddenError(
                f"Only draft revisions can be deleted; revision is in {revision.status.value} status",
                {"current_status": revision.status.value},
            )
        await self._revisions.delete(revision.id)
        logger.info("Draft %s deleted by %s", revision.id, ctx.user_id)

    async def submit_to_review(self, ctx: AuthContext, revision_id: str) -> RevisionDetail:
        ctx.require_active()
        revision, article = await load_revision(self._revisions, self._articles, revision_id)
        ensure_author(ctx, article)
        previous = revision.status
        await apply_transition(self._revisions, revision, RevisionStatus.IN_REVIEW, "submit for review")

        await self._audit.record(
            ctx.user_id,
            AuditAction.REV_SUBMITTED,
            AuditTargetType.REVISION,
            revision.id,
            meta={"article_id": article.id, "from_status": previous.value},
        )
        logger.info("Revision %s submitted for review", revision.id)
        return await self.build_detail(revision, article)

    async def withdraw_from_review(self, ctx: AuthContext, revision_id: str) -> RevisionDetail:
        ctx.require_active()
        revision, article = await load_revision(self._revisions, self._articles, revision_id)
        ensure_author(ctx, article)
        await apply_transition(self._revisions, revision, RevisionStatus.WITHDRAWN, "withdraw from review")

        await self._audit.record(
            ctx.user_id,
            AuditAction.REV_WITHDRAWN,
            AuditTargetType.REVISION,
            revision.id,
            meta={"article_id": article.id},
        )
        logger.info("Revision %s withdrawn", revision.id)
        return await self.build_detail(revision, article)

    # ── Helpers ──────────────────────────────────────────────────────

    async def build_detail(self, revision: Revision, article: Article) -> RevisionDetail:
        history = await self._revisions.list_review_events(revision.id)
        categories = await self._categories.get_refs(revision.category_ids)

        published_title = None
        if article.published_revision_id and article.published_revision_id != revision.id:
            published = await self._revisions.get_by_id(article.published_revision_id)
            published_title = published.title if published else None

        return RevisionDetail(
            id=revision.id,
            article_id=article.id,
            article_slug=article.slug,
            author_id=article.author_id,
            status=revision.status,
            title=revision.title,
            summary=revision.summary,
            content=revision.content,
            bibliography=revision.bibliography,
            categories=categories,
            created_at=revision.created_at,
            updated_at=revision.updated_at,
            review_history=history,
            is_new_article=not article.has_been_published,
            current_published_title=published_title,
        )

    async def _validate_categories(self, category_ids: list[str]) -> list[str]:
        unique = list(dict.fromkeys(category_ids))
        if not unique:
            raise ValidationError("At least one category is required")
        if len(unique) > self._max_categories:
            raise ValidationError(
                f"At most {self._max_categories} categories are allowed",
                {"max_categories": self._max_categories},
            )
        existing = await self._categories.existing_ids(unique)
        missing = [cid for cid in unique if cid not in existing]
        if missing:
            raise ValidationError("One or more categories not found", {"missing": missing})
        return unique
