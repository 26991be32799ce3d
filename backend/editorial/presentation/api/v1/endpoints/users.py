"""Follow and unfollow other users, and read follower lists."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from editorial.application.schemas import (
    FollowListQuery,
    FollowResponse,
    FollowStatusResponse,
    PageResponse,
    ToggleResponse,
)
from editorial.application.services import SocialService
from editorial.domain.auth import AuthContext
from editorial.infrastructure.dependencies import (
    get_auth_context,
    get_optional_auth_context,
    get_social_service,
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/{user_id}/follow", response_model=ToggleResponse)
async def follow_user(
    user_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: SocialService = Depends(get_social_service),
) -> ToggleResponse:
    """Follow a user; ``count`` is their follower count afterwards."""
    return ToggleResponse.model_validate(await service.follow(ctx, user_id))


@router.delete("/{user_id}/follow", response_model=ToggleResponse)
async def unfollow_user(
    user_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: SocialService = Depends(get_social_service),
) -> ToggleResponse:
    return ToggleResponse.model_validate(await service.unfollow(ctx, user_id))


@router.get("/{user_id}/follow", response_model=FollowStatusResponse)
async def get_follow_status(
    user_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: SocialService = Depends(get_social_service),
) -> FollowStatusResponse:
    return FollowStatusResponse(following=await service.is_following(ctx, user_id))


@router.get("/{user_id}/followers", response_model=PageResponse[FollowResponse])
async def list_followers(
    user_id: str,
    query: Annotated[FollowListQuery, Query()],
    viewer: AuthContext | None = Depends(get_optional_auth_context),
    service: SocialService = Depends(get_social_service),
) -> PageResponse[FollowResponse]:
    """Most recent followers first; empty for banned users."""
    page = await service.list_followers(user_id, query.cursor, query.limit, viewer)
    return PageResponse[FollowResponse].model_validate(page, from_attributes=True)


@router.get("/{user_id}/following", response_model=PageResponse[FollowResponse])
async def list_following(
    user_id: str,
    query: Annotated[FollowListQuery, Query()],
    viewer: AuthContext | None = Depends(get_optional_auth_context),
    service: SocialService = Depends(get_social_service),
) -> PageResponse[FollowResponse]:
    page = await service.list_following(user_id, query.cursor, query.limit, viewer)
    return PageResponse[FollowResponse].model_validate(page, from_attributes=True)
