"""Admin moderation endpoints: bans, article removal and the audit ledger."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from editorial.application.schemas import (
    AdminArticleQuery,
    AdminArticleResponse,
    ArticleStatusResponse,
    AuditLogEntryResponse,
    AuditLogQuery,
    BanRequest,
    PageResponse,
    RemovalRequest,
    UserBanResponse,
)
from editorial.application.services import AuditService, ModerationService
from editorial.domain.auth import AuthContext
from editorial.domain.entities import AdminArticleFilter, AuditLogFilter
from editorial.infrastructure.dependencies import (
    get_audit_service,
    get_auth_context,
    get_moderation_service,
)

router = APIRouter(prefix="/admin", tags=["Moderation"])


@router.post(
    "/users/{user_id}/ban",
    response_model=UserBanResponse,
    status_code=status.HTTP_201_CREATED,
)
async def ban_user(
    user_id: str,
    data: BanRequest,
    ctx: AuthContext = Depends(get_auth_context),
    service: ModerationService = Depends(get_moderation_service),
) -> UserBanResponse:
    """Ban a user; their articles disappear from every feed."""
    ban = await service.ban_user(ctx, user_id, data.reason)
    return UserBanResponse.model_validate(ban)


@router.delete("/users/{user_id}/ban", status_code=status.HTTP_204_NO_CONTENT)
async def unban_user(
    user_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: ModerationService = Depends(get_moderation_service),
) -> None:
    await service.unban_user(ctx, user_id)


@router.post("/articles/{article_id}/remove", response_model=ArticleStatusResponse)
async def remove_article(
    article_id: str,
    data: RemovalRequest,
    ctx: AuthContext = Depends(get_auth_context),
    service: ModerationService = Depends(get_moderation_service),
) -> ArticleStatusResponse:
    article = await service.remove_article(ctx, article_id, data.reason)
    return ArticleStatusResponse.model_validate(article)


@router.post("/articles/{article_id}/restore", response_model=ArticleStatusResponse)
async def restore_article(
    article_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: ModerationService = Depends(get_moderation_service),
) -> ArticleStatusResponse:
    article = await service.restore_article(ctx, article_id)
    return ArticleStatusResponse.model_validate(article)


@router.get("/audit", response_model=PageResponse[AuditLogEntryResponse])
async def query_audit_log(
    query: Annotated[AuditLogQuery, Query()],
    ctx: AuthContext = Depends(get_auth_context),
    service: AuditService = Depends(get_audit_service),
) -> PageResponse[AuditLogEntryResponse]:
    """Ledger entries, newest first."""
    log_filter = AuditLogFilter(
        action=query.action,
        target_type=query.target_type,
        target_id=query.target_id,
        actor_id=query.actor_id,
        start=query.start,
        end=query.end,
    )
    page = await service.query(ctx, log_filter, query.cursor, query.limit)
    return PageResponse[AuditLogEntryResponse].model_validate(page, from_attributes=True)


@router.get("/articles", response_model=PageResponse[AdminArticleResponse])
async def list_articles(
    query: Annotated[AdminArticleQuery, Query()],
    ctx: AuthContext = Depends(get_auth_context),
    service: ModerationService = Depends(get_moderation_service),
) -> PageResponse[AdminArticleResponse]:
    """Published articles including removed ones, for finding what to remove or restore."""
    article_filter = AdminArticleFilter(status=query.status, author_id=query.author_id, text=query.query)
    page = await service.list_articles(ctx, article_filter, query.cursor, query.limit)
    return PageResponse[AdminArticleResponse].model_validate(page, from_attributes=True)
