"""Reviewer endpoints: queue, detail, feedback and approval."""

from fastapi import APIRouter, Depends, Query

from editorial.application.schemas import (
    PageResponse,
    ReviewFeedback,
    ReviewQueueItemResponse,
    RevisionDetailResponse,
)
from editorial.application.services import ReviewService
from editorial.domain.auth import AuthContext
from editorial.domain.entities import QueueSort, RevisionStatus
from editorial.infrastructure.dependencies import get_auth_context, get_review_service

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.get("/queue", response_model=PageResponse[ReviewQueueItemResponse])
async def get_review_queue(
    status_filter: RevisionStatus = Query(RevisionStatus.IN_REVIEW, alias="status"),
    all_statuses: bool = Query(False, description="List in-review and changes-requested together"),
    author_id: str | None = None,
    category_id: str | None = None,
    sort: QueueSort = QueueSort.NEWEST,
    cursor: str | None = Query(None, max_length=512),
    limit: int | None = Query(None, ge=1, le=100),
    ctx: AuthContext = Depends(get_auth_context),
    service: ReviewService = Depends(get_review_service),
) -> PageResponse[ReviewQueueItemResponse]:
    page = await service.get_review_queue(
        ctx,
        status=None if all_statuses else status_filter,
        author_id=author_id,
        category_id=category_id,
        sort=sort,
        cursor=cursor,
        limit=limit,
    )
    return PageResponse[ReviewQueueItemResponse].model_validate(page, from_attributes=True)


@router.get("/{revision_id}", response_model=RevisionDetailResponse)
async def get_revision_for_review(
    revision_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: ReviewService = Depends(get_review_service),
) -> RevisionDetailResponse:
    detail = await service.get_revision_for_review(ctx, revision_id)
    return RevisionDetailResponse.model_validate(detail, from_attributes=True)


@router.post("/{revision_id}/feedback", response_model=RevisionDetailResponse)
async def give_feedback(
    revision_id: str,
    data: ReviewFeedback,
    ctx: AuthContext = Depends(get_auth_context),
    service: ReviewService = Depends(get_review_service),
) -> RevisionDetailResponse:
    """Request changes; the author may edit and resubmit."""
    detail = await service.give_feedback(ctx, revision_id, data)
    return RevisionDetailResponse.model_validate(detail, from_attributes=True)


@router.post("/{revision_id}/approve", response_model=RevisionDetailResponse)
async def approve_revision(
    revision_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: ReviewService = Depends(get_review_service),
) -> RevisionDetailResponse:
    detail = await service.approve(ctx, revision_id)
    return RevisionDetailResponse.model_validate(detail, from_attributes=True)
