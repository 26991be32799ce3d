"""Article endpoints: authoring entry points, public reads and reader interactions."""

from fastapi import APIRouter, Depends, status

from editorial.application.schemas import (
    ArticleCreate,
    PublishedArticleResponse,
    RevisionDetailResponse,
    RevisionHistoryResponse,
    ToggleResponse,
    ViewRequest,
)
from editorial.application.services import ArticleService, RevisionService, SocialService
from editorial.domain.auth import AuthContext
from editorial.infrastructure.dependencies import (
    get_article_service,
    get_auth_context,
    get_optional_auth_context,
    get_revision_service,
    get_social_service,
)

router = APIRouter(prefix="/articles", tags=["Articles"])


@router.post("", response_model=RevisionDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    data: ArticleCreate,
    ctx: AuthContext = Depends(get_auth_context),
    service: RevisionService = Depends(get_revision_service),
) -> RevisionDetailResponse:
    """Create a new article together with its first draft revision."""
    detail = await service.create_article_with_draft(ctx, data)
    return RevisionDetailResponse.model_validate(detail, from_attributes=True)


@router.get("/{slug}", response_model=PublishedArticleResponse)
async def get_article(
    slug: str,
    viewer: AuthContext | None = Depends(get_optional_auth_context),
    service: ArticleService = Depends(get_article_service),
) -> PublishedArticleResponse:
    """Retrieve the currently published revision of an article."""
    article = await service.get_article_by_slug(slug, viewer)
    return PublishedArticleResponse.model_validate(article, from_attributes=True)


@router.get("/{article_id}/revisions", response_model=list[RevisionHistoryResponse])
async def get_revision_history(
    article_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: RevisionService = Depends(get_revision_service),
) -> list[RevisionHistoryResponse]:
    history = await service.get_revision_history(ctx, article_id)
    return [RevisionHistoryResponse.model_validate(h, from_attributes=True) for h in history]


@router.post(
    "/{article_id}/revisions",
    response_model=RevisionDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_new_revision(
    article_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: RevisionService = Depends(get_revision_service),
) -> RevisionDetailResponse:
    """Start a new draft cloned from the article's latest revision."""
    detail = await service.start_new_revision(ctx, article_id)
    return RevisionDetailResponse.model_validate(detail, from_attributes=True)


# ── Reader interactions ─────────────────────────────────────────────


@router.post("/{article_id}/like", response_model=ToggleResponse)
async def like_article(
    article_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: SocialService = Depends(get_social_service),
) -> ToggleResponse:
    return ToggleResponse.model_validate(await service.like(ctx, article_id))


@router.delete("/{article_id}/like", response_model=ToggleResponse)
async def unlike_article(
    article_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: SocialService = Depends(get_social_service),
) -> ToggleResponse:
    return ToggleResponse.model_validate(await service.unlike(ctx, article_id))


@router.post("/{article_id}/save", response_model=ToggleResponse)
async def save_article(
    article_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: SocialService = Depends(get_social_service),
) -> ToggleResponse:
    return ToggleResponse.model_validate(await service.save(ctx, article_id))


@router.delete("/{article_id}/save", response_model=ToggleResponse)
async def unsave_article(
    article_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: SocialService = Depends(get_social_service),
) -> ToggleResponse:
    return ToggleResponse.model_validate(await service.unsave(ctx, article_id))


@router.post("/{article_id}/views")
async def track_view(
    article_id: str,
    data: ViewRequest,
    service: SocialService = Depends(get_social_service),
) -> dict:
    """Count a view; repeated views by the same key on the same day are ignored."""
    counted = await service.track_view(article_id, data.viewer_key, data.day)
    return {"counted": counted}
