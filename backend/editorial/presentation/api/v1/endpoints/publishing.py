"""Admin publish queue and the publish action."""

from fastapi import APIRouter, Depends, Query

from editorial.application.schemas import PageResponse, PublishQueueItemResponse, PublishResponse
from editorial.application.services import PublishService
from editorial.domain.auth import AuthContext
from editorial.domain.entities import QueueSort
from editorial.infrastructure.dependencies import get_auth_context, get_publish_service

router = APIRouter(prefix="/publish", tags=["Publishing"])


@router.get("/queue", response_model=PageResponse[PublishQueueItemResponse])
async def get_publish_queue(
    sort: QueueSort = QueueSort.NEWEST,
    cursor: str | None = Query(None, max_length=512),
    limit: int | None = Query(None, ge=1, le=100),
    ctx: AuthContext = Depends(get_auth_context),
    service: PublishService = Depends(get_publish_service),
) -> PageResponse[PublishQueueItemResponse]:
    page = await service.get_publish_queue(ctx, sort, cursor, limit)
    return PageResponse[PublishQueueItemResponse].model_validate(page, from_attributes=True)


@router.post("/{revision_id}", response_model=PublishResponse)
async def publish_revision(
    revision_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: PublishService = Depends(get_publish_service),
) -> PublishResponse:
    """Publish an approved revision; the article now serves its content."""
    article = await service.publish(ctx, revision_id)
    return PublishResponse.model_validate(article, from_attributes=True)
