"""Category taxonomy endpoints: public tree and slug lookup, admin management."""

from fastapi import APIRouter, Depends, status

from editorial.application.schemas import (
    CategoryAdminResponse,
    CategoryCreate,
    CategoryDetailResponse,
    CategoryReparent,
    CategoryResponse,
    CategoryTreeNode,
    CategoryUpdate,
    SubtreeDeletionResponse,
)
from editorial.application.services import CategoryService
from editorial.domain.auth import AuthContext
from editorial.infrastructure.dependencies import get_auth_context, get_category_service

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=list[CategoryTreeNode])
async def get_category_tree(
    service: CategoryService = Depends(get_category_service),
) -> list[CategoryTreeNode]:
    """The whole forest, system category first."""
    tree = await service.get_tree()
    return [CategoryTreeNode.model_validate(node) for node in tree]


@router.get("/admin", response_model=list[CategoryAdminResponse])
async def admin_list_categories(
    ctx: AuthContext = Depends(get_auth_context),
    service: CategoryService = Depends(get_category_service),
) -> list[CategoryAdminResponse]:
    stats = await service.admin_list(ctx)
    return [
        CategoryAdminResponse(
            **CategoryResponse.model_validate(s.category).model_dump(),
            parent_name=s.parent_name,
            descendant_count=s.descendant_count,
            revision_count=s.revision_count,
        )
        for s in stats
    ]


@router.get("/{slug}", response_model=CategoryDetailResponse)
async def get_category_by_slug(
    slug: str,
    service: CategoryService = Depends(get_category_service),
) -> CategoryDetailResponse:
    category, parent = await service.get_by_slug(slug)
    return CategoryDetailResponse(
        **CategoryResponse.model_validate(category).model_dump(),
        parent_name=parent.name if parent else None,
    )


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    ctx: AuthContext = Depends(get_auth_context),
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    category = await service.create_category(ctx, data)
    return CategoryResponse.model_validate(category)


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    category = await service.update_category(ctx, category_id, data)
    return CategoryResponse.model_validate(category)


@router.post("/{category_id}/move", response_model=CategoryResponse)
async def reparent_category(
    category_id: str,
    data: CategoryReparent,
    ctx: AuthContext = Depends(get_auth_context),
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    """Move a category, with its whole subtree, under a new parent or to the root."""
    category = await service.reparent(ctx, category_id, data.new_parent_id)
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", response_model=SubtreeDeletionResponse)
async def delete_category(
    category_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: CategoryService = Depends(get_category_service),
) -> SubtreeDeletionResponse:
    """Delete a category and its descendants; their revisions fall back to the system category."""
    result = await service.delete_subtree(ctx, category_id)
    return SubtreeDeletionResponse.model_validate(result)
