"""Author-facing revision endpoints."""

from fastapi import APIRouter, Depends, Query, status

from editorial.application.schemas import (
    MyRevisionResponse,
    PageResponse,
    RevisionDetailResponse,
    RevisionUpdate,
)
from editorial.application.services import RevisionService
from editorial.domain.auth import AuthContext
from editorial.domain.entities import RevisionStatus
from editorial.infrastructure.dependencies import get_auth_context, get_revision_service

router = APIRouter(prefix="/revisions", tags=["Revisions"])


@router.get("/mine", response_model=PageResponse[MyRevisionResponse])
async def list_my_revisions(
    status_filter: RevisionStatus | None = Query(None, alias="status"),
    cursor: str | None = Query(None, max_length=512),
    limit: int | None = Query(None, ge=1, le=100),
    ctx: AuthContext = Depends(get_auth_context),
    service: RevisionService = Depends(get_revision_service),
) -> PageResponse[MyRevisionResponse]:
    """The caller's own revisions, most recently edited first."""
    page = await service.list_my_revisions(ctx, status_filter, cursor, limit)
    return PageResponse[MyRevisionResponse].model_validate(page, from_attributes=True)


@router.get("/{revision_id}", response_model=RevisionDetailResponse)
async def get_revision(
    revision_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: RevisionService = Depends(get_revision_service),
) -> RevisionDetailResponse:
    detail = await service.get_revision(ctx, revision_id)
    return RevisionDetailResponse.model_validate(detail, from_attributes=True)


@router.patch("/{revision_id}", response_model=RevisionDetailResponse)
async def update_revision(
    revision_id: str,
    data: RevisionUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    service: RevisionService = Depends(get_revision_service),
) -> RevisionDetailResponse:
    """Edit a draft or a revision with requested changes."""
    detail = await service.update_revision(ctx, revision_id, data)
    return RevisionDetailResponse.model_validate(detail, from_attributes=True)


@router.delete("/{revision_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_revision(
    revision_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: RevisionService = Depends(get_revision_service),
) -> None:
    await service.delete_revision(ctx, revision_id)


@router.post("/{revision_id}/submit", response_model=RevisionDetailResponse)
async def submit_revision(
    revision_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: RevisionService = Depends(get_revision_service),
) -> RevisionDetailResponse:
    detail = await service.submit_to_review(ctx, revision_id)
    return RevisionDetailResponse.model_validate(detail, from_attributes=True)


@router.post("/{revision_id}/withdraw", response_model=RevisionDetailResponse)
async def withdraw_revision(
    revision_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: RevisionService = Depends(get_revision_service),
) -> RevisionDetailResponse:
    detail = await service.withdraw_from_review(ctx, revision_id)
    return RevisionDetailResponse.model_validate(detail, from_attributes=True)
