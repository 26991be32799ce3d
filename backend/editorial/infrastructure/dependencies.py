"""FastAPI dependency injection: wires infrastructure to application layer.

Every provider builds its repositories on the request's session, so all
writes of one request (including audit entries) commit or roll back together.
"""

from collections.abc import AsyncGenerator

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from editorial.application.services import (
    ArticleService,
    AuditService,
    CategoryService,
    FeedService,
    ModerationService,
    PublishService,
    ReviewService,
    RevisionService,
    SlugService,
    SocialService,
)
from editorial.config import Settings, get_settings
from editorial.domain.auth import AuthContext, Role
from editorial.domain.exceptions import AuthenticationError, ValidationError
from editorial.infrastructure.database.session import get_db_session
from editorial.infrastructure.database.repositories import (
    SQLAlchemyArticleRepository,
    SQLAlchemyAuditLogRepository,
    SQLAlchemyCategoryRepository,
    SQLAlchemyFeedRepository,
    SQLAlchemyModerationRepository,
    SQLAlchemyRevisionRepository,
    SQLAlchemySocialRepository,
)


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with (falls back to the environment)."""
    return getattr(request.app.state, "settings", None) or get_settings()


# ── Identity ─────────────────────────────────────────────────────────


def _parse_roles(raw: str | None) -> frozenset[Role]:
    roles = {Role.USER}
    for part in (raw or "").split(","):
        name = part.strip().upper()
        if not name:
            continue
        try:
            roles.add(Role(name))
        except ValueError:
            raise ValidationError(f"Unknown role '{part.strip()}'", {"role": part.strip()}) from None
    return frozenset(roles)


async def get_optional_auth_context(
    session: AsyncSession = Depends(get_db_session),
    x_user_id: str | None = Header(None),
    x_user_roles: str | None = Header(None),
    x_user_banned: bool = Header(False),
) -> AuthContext | None:
    """Identity forwarded by the authenticating gateway, or None for anonymous readers.

    A ban recorded in the ban table applies even when the header says otherwise.
    """
    if not x_user_id:
        return None
    banned = x_user_banned
    if not banned:
        banned = await SQLAlchemyModerationRepository(session).get_ban(x_user_id) is not None
    return AuthContext(user_id=x_user_id, roles=_parse_roles(x_user_roles), is_banned=banned)


async def get_auth_context(
    ctx: AuthContext | None = Depends(get_optional_auth_context),
) -> AuthContext:
    if ctx is None:
        raise AuthenticationError("Authentication required: missing X-User-Id header")
    return ctx


# ── Services ─────────────────────────────────────────────────────────


def _audit(session: AsyncSession, settings: Settings) -> AuditService:
    return AuditService(
        SQLAlchemyAuditLogRepository(session),
        default_limit=settings.audit_default_limit,
    )


def _category_service(session: AsyncSession, settings: Settings) -> CategoryService:
    return CategoryService(
        SQLAlchemyCategoryRepository(session),
        _audit(session, settings),
        max_depth=settings.max_category_depth,
        system_slug=settings.system_category_slug,
        system_name=settings.system_category_name,
    )


def _revision_service(session: AsyncSession, settings: Settings) -> RevisionService:
    articles = SQLAlchemyArticleRepository(session)
    return RevisionService(
        article_repository=articles,
        revision_repository=SQLAlchemyRevisionRepository(session),
        category_repository=SQLAlchemyCategoryRepository(session),
        audit=_audit(session, settings),
        slug_service=SlugService(
            articles,
            max_length=settings.slug_max_length,
            max_attempts=settings.slug_max_attempts,
        ),
        max_categories=settings.max_categories_per_revision,
        default_limit=settings.feed_default_limit,
        max_limit=settings.feed_max_limit,
    )


def _article_service(session: AsyncSession) -> ArticleService:
    return ArticleService(
        article_repository=SQLAlchemyArticleRepository(session),
        revision_repository=SQLAlchemyRevisionRepository(session),
        category_repository=SQLAlchemyCategoryRepository(session),
        social_repository=SQLAlchemySocialRepository(session),
        moderation_repository=SQLAlchemyModerationRepository(session),
    )


async def get_category_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[CategoryService, None]:
    yield _category_service(session, settings)


async def get_revision_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[RevisionService, None]:
    """Provides a RevisionService with slug generation and category validation wired up."""
    yield _revision_service(session, settings)


async def get_review_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[ReviewService, None]:
    yield ReviewService(
        article_repository=SQLAlchemyArticleRepository(session),
        revision_repository=SQLAlchemyRevisionRepository(session),
        revision_service=_revision_service(session, settings),
        audit=_audit(session, settings),
        default_limit=settings.feed_default_limit,
        max_limit=settings.feed_max_limit,
    )


async def get_publish_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[PublishService, None]:
    yield PublishService(
        article_repository=SQLAlchemyArticleRepository(session),
        revision_repository=SQLAlchemyRevisionRepository(session),
        audit=_audit(session, settings),
        default_limit=settings.feed_default_limit,
        max_limit=settings.feed_max_limit,
    )


async def get_feed_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[FeedService, None]:
    yield FeedService(
        SQLAlchemyFeedRepository(session),
        _category_service(session, settings),
        default_limit=settings.feed_default_limit,
        max_limit=settings.feed_max_limit,
    )


async def get_article_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ArticleService, None]:
    yield _article_service(session)


async def get_social_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[SocialService, None]:
    yield SocialService(
        SQLAlchemySocialRepository(session),
        SQLAlchemyModerationRepository(session),
        _article_service(session),
        default_limit=settings.feed_default_limit,
        max_limit=settings.feed_max_limit,
    )


async def get_moderation_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[ModerationService, None]:
    yield ModerationService(
        SQLAlchemyArticleRepository(session),
        SQLAlchemyModerationRepository(session),
        _audit(session, settings),
        default_limit=settings.feed_default_limit,
        max_limit=settings.feed_max_limit,
    )


async def get_audit_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[AuditService, None]:
    yield _audit(session, settings)
