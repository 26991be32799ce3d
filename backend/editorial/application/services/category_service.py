"""Category hierarchy manager: the only writer of closure rows."""

import logging
from datetime import datetime, timezone

from editorial.application.interfaces import CategoryRepository
from editorial.application.schemas import CategoryCreate, CategoryUpdate
from editorial.application.services.audit_service import AuditService
from editorial.application.services.slug_service import slugify
from editorial.domain.auth import AuthContext
from editorial.domain.entities import (
    AuditAction,
    AuditTargetType,
    Category,
    CategoryNode,
    CategoryStats,
    ClosureRow,
    SubtreeDeletion,
)
from editorial.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    ForbiddenError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class CategoryService:
    """CRUD over the category forest while keeping the closure relation consistent.

    Depth is zero-based: a root has depth 0, so ``max_depth = 3`` allows
    root → child → grandchild.
    """

    def __init__(
        self,
        repository: CategoryRepository,
        audit: AuditService,
        max_depth: int = 3,
        system_slug: str = "general",
        system_name: str = "General",
    ):
        self._repo = repository
        self._audit = audit
        self._max_depth = max_depth
        self._system_slug = system_slug
        self._system_name = system_name

    # ── Read operations ──────────────────────────────────────────────

    async def get_category(self, category_id: str) -> Category:
        category = await self._repo.get_by_id(category_id)
        if category is None:
            raise EntityNotFoundError("Category", category_id)
        return category

    async def get_by_slug(self, slug: str) -> tuple[Category, Category | None]:
        """Return the category and its parent (None for roots)."""
        category = await self._repo.get_by_slug(slug)
        if category is None:
            raise EntityNotFoundError("Category", slug)
        parent = await self._repo.get_by_id(category.parent_id) if category.parent_id else None
        return category, parent

    async def resolve(self, id_or_slug: str) -> Category:
        category = await self._repo.get_by_id(id_or_slug)
        if category is None:
            category = await self._repo.get_by_slug(id_or_slug)
        if category is None:
            raise EntityNotFoundError("Category", id_or_slug)
        return category

    async def descendants(self, id_or_slug: str) -> set[str]:
        """Ids of the category and every category below it."""
        category = await self.resolve(id_or_slug)
        rows = await self._repo.subtree_of(category.id)
        return {row.descendant_id for row in rows} | {category.id}

    async def get_tree(self) -> list[CategoryNode]:
        """Nested forest; system category first, then by name within each parent."""
        categories = await self._repo.get_all()
        children_map: dict[str | None, list[Category]] = {}
        for category in categories:
            children_map.setdefault(category.parent_id, []).append(category)

        def _sort_key(c: Category) -> tuple[bool, str]:
            return (not c.is_system, c.name)

        def _build_node(category: Category) -> CategoryNode:
            kids = sorted(children_map.get(category.id, []), key=_sort_key)
            return CategoryNode(
                id=category.id,
                name=category.name,
                slug=category.slug,
                is_system=category.is_system,
                depth=category.depth,
                children=[_build_node(k) for k in kids],
            )

        roots = sorted(children_map.get(None, []), key=_sort_key)
        return [_build_node(r) for r in roots]

    async def admin_list(self, ctx: AuthContext) -> list[CategoryStats]:
        ctx.require_admin()
        stats = await self._repo.get_stats()
        return sorted(stats, key=lambda s: (not s.category.is_system, s.category.depth, s.category.name))

    # ── Write operations ─────────────────────────────────────────────

    async def ensure_system_category(self) -> Category:
        """Create the fallback category if it does not exist yet. Idempotent."""
        existing = await self._repo.get_by_slug(self._system_slug)
        if existing is not None:
            return existing

        category = await self._repo.create(
            Category(name=self._system_name, slug=self._system_slug, is_system=True)
        )
        await self._repo.add_closure_rows([ClosureRow(category.id, category.id, 0)])
        logger.info("Seeded system category '%s'", self._system_slug)
        return category

    async def create_category(self, ctx: AuthContext, data: CategoryCreate) -> Category:
        ctx.require_admin()
        slug = data.slug or slugify(data.name)
        if not slug:
            raise ValidationError("Category name does not produce a usable slug")
        if await self._repo.get_by_slug(slug) is not None:
            raise DuplicateEntityError("Category", "slug", slug)

        parent_rows: list[ClosureRow] = []
        depth = 0
        if data.parent_id is not None:
            parent = await self.get_category(data.parent_id)
            depth = parent.depth + 1
            if depth >= self._max_depth:
                raise ValidationError(
                    f"Maximum category depth is {self._max_depth}",
                    {"parent_id": parent.id, "max_depth": self._max_depth},
                )
            parent_rows = await self._repo.ancestors_of(parent.id)

        category = await self._repo.create(
            Category(name=data.name.strip(), slug=slug, parent_id=data.parent_id, depth=depth)
        )
        closure = [ClosureRow(category.id, category.id, 0)]
        closure.extend(
            ClosureRow(row.ancestor_id, category.id, row.depth + 1) for row in parent_rows
        )
        await self._repo.add_closure_rows(closure)

        await self._audit.record(
            ctx.user_id,
            AuditAction.CATEGORY_CREATED,
            AuditTargetType.CATEGORY,
            category.id,
            meta={"name": category.name, "slug": category.slug, "parent_id": data.parent_id},
        )
        logger.info("Category created: %s (parent=%s)", category.slug, data.parent_id)
        return category

    async def update_category(self, ctx: AuthContext, category_id: str, data: CategoryUpdate) -> Category:
        """Rename a category or change its slug; the system slug is immutable."""
        ctx.require_admin()
        category = await self.get_category(category_id)
        changes: dict[str, dict[str, str]] = {}

        if data.slug is not None and data.slug != category.slug:
            if category.is_system:
                raise ForbiddenError("The system category slug cannot be changed")
            if await self._repo.get_by_slug(data.slug) is not None:
                raise DuplicateEntityError("Category", "slug", data.slug)
            changes["slug"] = {"from": category.slug, "to": data.slug}
            category.slug = data.slug

        if data.name is not None and data.name.strip() != category.name:
            changes["name"] = {"from": category.name, "to": data.name.strip()}
            category.name = data.name.strip()

        if not changes:
            return category

        category.updated_at = datetime.now(timezone.utc)
        updated = await self._repo.update(category)
        await self._audit.record(
            ctx.user_id,
            AuditAction.CATEGORY_UPDATED,
            AuditTargetType.CATEGORY,
            category.id,
            meta=changes,
        )
        return updated

    async def reparent(self, ctx: AuthContext, category_id: str, new_parent_id: str | None) -> Category:
        """Move a category and its whole subtree under ``new_parent_id`` (None = root)."""
        ctx.require_admin()
        category = await self.get_category(category_id)
        if category.is_system:
            raise ForbiddenError("The system category cannot be moved")
        if new_parent_id == category.parent_id:
            return category

        subtree = await self._repo.subtree_of(category.id)
        subtree_ids = {row.descendant_id for row in subtree} | {category.id}
        if new_parent_id is not None and new_parent_id in subtree_ids:
            raise ValidationError(
                "A category cannot be moved under itself or one of its descendants",
                {"category_id": category.id, "new_parent_id": new_parent_id},
            )

        new_parent_rows: list[ClosureRow] = []
        new_depth = 0
        if new_parent_id is not None:
            new_parent = await self.get_category(new_parent_id)
            new_depth = new_parent.depth + 1
            height = max((row.depth for row in subtree), default=0)
            if new_depth + height >= self._max_depth:
                raise ValidationError(
                    f"Moving this category would exceed the maximum depth of {self._max_depth}",
                    {"new_parent_id": new_parent_id, "max_depth": self._max_depth},
                )
            new_parent_rows = await self._repo.ancestors_of(new_parent_id)

        removed = await self._repo.detach_subtree(subtree_ids)
        await self._repo.add_closure_rows(
            ClosureRow(anc.ancestor_id, sub.descendant_id, anc.depth + sub.depth + 1)
            for anc in new_parent_rows
            for sub in subtree
        )

        old_parent_id = category.parent_id
        category.parent_id = new_parent_id
        category.depth = new_depth
        await self._audit.record(
            ctx.user_id,
            AuditAction.CATEGORY_REPARENTED,
            AuditTargetType.CATEGORY,
            category.id,
            meta={
                "old_parent_id": old_parent_id,
                "new_parent_id": new_parent_id,
                "subtree_size": len(subtree_ids),
            },
        )
        logger.info(
            "Category %s moved %s → %s (%d closure rows replaced)",
            category.slug, old_parent_id, new_parent_id, removed,
        )
        return await self.get_category(category.id)

    async def delete_subtree(self, ctx: AuthContext, category_id: str) -> SubtreeDeletion:
        """Delete a category with all descendants, reassigning orphaned revisions."""
        ctx.require_admin()
        category = await self.get_category(category_id)
        if category.is_system:
            raise ForbiddenError("The system category cannot be deleted")

        system = await self.ensure_system_category()
        subtree = await self._repo.subtree_of(category.id)
        subtree_ids = {row.descendant_id for row in subtree} | {category.id}

        reassigned = await self._repo.reassign_revisions(subtree_ids, system.id)
        deleted = await self._repo.delete_many(subtree_ids)

        await self._audit.record(
            ctx.user_id,
            AuditAction.CATEGORY_DELETED_SUBTREE,
            AuditTargetType.CATEGORY,
            category.id,
            meta={
                "name": category.name,
                "slug": category.slug,
                "deleted_ids": sorted(subtree_ids),
                "deleted_count": deleted,
                "reassigned_count": reassigned,
                "fallback_category_id": system.id,
            },
        )
        logger.info(
            "Category subtree %s deleted: %d categories, %d revisions reassigned",
            category.slug, deleted, reassigned,
        )
        return SubtreeDeletion(deleted_count=deleted, reassigned_count=reassigned)
