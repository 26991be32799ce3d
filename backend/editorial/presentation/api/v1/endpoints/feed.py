"""Feed endpoints: the public feed, the following feed and saved articles."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from editorial.application.schemas import (
    FeedItemResponse,
    FeedQuery,
    PageResponse,
    SavedItemResponse,
)
from editorial.application.services import FeedService
from editorial.domain.auth import AuthContext
from editorial.infrastructure.dependencies import (
    get_auth_context,
    get_feed_service,
    get_optional_auth_context,
)

router = APIRouter(prefix="/feed", tags=["Feed"])


@router.get("", response_model=PageResponse[FeedItemResponse])
async def get_feed(
    query: Annotated[FeedQuery, Query()],
    viewer: AuthContext | None = Depends(get_optional_auth_context),
    service: FeedService = Depends(get_feed_service),
) -> PageResponse[FeedItemResponse]:
    """Published articles by recency or popularity, with optional filters."""
    page = await service.get_feed(query, viewer)
    return PageResponse[FeedItemResponse].model_validate(page, from_attributes=True)


@router.get("/following", response_model=PageResponse[FeedItemResponse])
async def get_following_feed(
    cursor: str | None = Query(None, max_length=512),
    limit: int | None = Query(None, ge=1, le=100),
    ctx: AuthContext = Depends(get_auth_context),
    service: FeedService = Depends(get_feed_service),
) -> PageResponse[FeedItemResponse]:
    page = await service.get_following_feed(ctx, cursor, limit)
    return PageResponse[FeedItemResponse].model_validate(page, from_attributes=True)


@router.get("/saved", response_model=PageResponse[SavedItemResponse])
async def list_saved(
    cursor: str | None = Query(None, max_length=512),
    limit: int | None = Query(None, ge=1, le=100),
    ctx: AuthContext = Depends(get_auth_context),
    service: FeedService = Depends(get_feed_service),
) -> PageResponse[SavedItemResponse]:
    page = await service.list_saved(ctx, cursor, limit)
    return PageResponse[SavedItemResponse].model_validate(page, from_attributes=True)
