"""Helpers shared by the services that move revisions through their lifecycle."""

from datetime import datetime, timezone

from editorial.application.interfaces import ArticleRepository, RevisionRepository
from editorial.domain.auth import AuthContext
from editorial.domain.entities import Article, Revision, RevisionStatus
from editorial.domain.exceptions import EntityNotFoundError, ForbiddenError, TransitionForbiddenError
from editorial.domain.state_machine import ensure_transition


async def load_revision(
    revisions: RevisionRepository,
    articles: ArticleRepository,
    revision_id: str,
) -> tuple[Revision, Article]:
    revision = await revisions.get_by_id(revision_id)
    if revision is None:
        raise EntityNotFoundError("Revision", revision_id)
    article = await articles.get_by_id(revision.article_id)
    if article is None:
        raise EntityNotFoundError("Article", revision.article_id)
    return revision, article


def ensure_author(ctx: AuthContext, article: Article) -> None:
    """Ownership is always checked against the article's author."""
    if article.author_id != ctx.user_id:
        raise ForbiddenError(
            "Only the article's author can do this",
            {"article_id": article.id},
        )


async def apply_transition(
    revisions: RevisionRepository,
    revision: Revision,
    target: RevisionStatus,
    action: str,
) -> datetime:
    """Move ``revision`` to ``target`` if the table allows it and nobody beat us to it.

    The storage update is compare-and-set on the status we read; losing the
    race reports the status the winner left behind.
    """
    ensure_transition(revision.status, target, action)
    now = datetime.now(timezone.utc)
    if not await revisions.transition(revision.id, revision.status, target, now):
        current = await revisions.get_by_id(revision.id)
        current_status = current.status.value if current else revision.status.value
        raise TransitionForbiddenError(current_status, target.value, action)
    revision.status = target
    revision.status_changed_at = now
    return now
