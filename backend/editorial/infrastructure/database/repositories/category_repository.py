"""Concrete category repository backed by SQLAlchemy."""

from collections.abc import Iterable

from sqlalchemy import delete, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from editorial.application.interfaces import CategoryRepository
from editorial.domain.entities import Category, CategoryRef, CategoryStats, ClosureRow
from editorial.infrastructure.database.models import (
    CategoryClosureModel,
    CategoryModel,
    RevisionCategoryModel,
)
from editorial.infrastructure.database.repositories._common import as_utc


class SQLAlchemyCategoryRepository(CategoryRepository):
    """Category rows plus the closure relation.

    ``parent_id`` and ``depth`` are read from closure rows (the depth-1
    ancestor and the deepest ancestor respectively).
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: CategoryModel, parent_id: str | None, depth: int) -> Category:
        return Category(
            id=model.id,
            name=model.name,
            slug=model.slug,
            is_system=model.is_system,
            parent_id=parent_id,
            depth=depth,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    async def _closure_rows(self, *criteria) -> list[ClosureRow]:
        result = await self._session.execute(
            select(
                CategoryClosureModel.ancestor_id,
                CategoryClosureModel.descendant_id,
                CategoryClosureModel.depth,
            )
            .where(*criteria)
            .order_by(CategoryClosureModel.depth)
        )
        return [ClosureRow(a, d, depth) for a, d, depth in result.all()]

    async def _placement(self, category_ids: list[str] | None = None) -> tuple[dict[str, str], dict[str, int]]:
        """Parent id and depth for each category (all categories when ids is None)."""
        criteria = [CategoryClosureModel.depth > 0]
        if category_ids is not None:
            criteria.append(CategoryClosureModel.descendant_id.in_(list(category_ids)))
        parents: dict[str, str] = {}
        depths: dict[str, int] = {}
        for row in await self._closure_rows(*criteria):
            if row.depth == 1:
                parents[row.descendant_id] = row.ancestor_id
            depths[row.descendant_id] = max(depths.get(row.descendant_id, 0), row.depth)
        return parents, depths

    async def _hydrate(self, model: CategoryModel | None) -> Category | None:
        if model is None:
            return None
        parents, depths = await self._placement([model.id])
        return self._to_entity(model, parents.get(model.id), depths.get(model.id, 0))

    # ── Lookups ──────────────────────────────────────────────────────

    async def get_by_id(self, category_id: str) -> Category | None:
        model = await self._session.get(CategoryModel, category_id, populate_existing=True)
        return await self._hydrate(model)

    async def get_by_slug(self, slug: str) -> Category | None:
        result = await self._session.execute(
            select(CategoryModel)
            .where(CategoryModel.slug == slug)
            .execution_options(populate_existing=True)
        )
        return await self._hydrate(result.scalar_one_or_none())

    async def get_all(self) -> list[Category]:
        result = await self._session.execute(
            select(CategoryModel)
            .order_by(CategoryModel.name)
            .execution_options(populate_existing=True)
        )
        models = result.scalars().all()
        parents, depths = await self._placement()
        return [self._to_entity(m, parents.get(m.id), depths.get(m.id, 0)) for m in models]

    async def existing_ids(self, category_ids: Iterable[str]) -> set[str]:
        ids = list(category_ids)
        if not ids:
            return set()
        result = await self._session.execute(select(CategoryModel.id).where(CategoryModel.id.in_(ids)))
        return set(result.scalars().all())

    async def get_refs(self, category_ids: Iterable[str]) -> list[CategoryRef]:
        ids = list(category_ids)
        if not ids:
            return []
        result = await self._session.execute(
            select(CategoryModel).where(CategoryModel.id.in_(ids)).order_by(CategoryModel.name)
        )
        return [CategoryRef(id=m.id, name=m.name, slug=m.slug) for m in result.scalars().all()]

    async def get_stats(self) -> list[CategoryStats]:
        categories = await self.get_all()
        names = {c.id: c.name for c in categories}

        descendant_counts = dict(
            (
                await self._session.execute(
                    select(CategoryClosureModel.ancestor_id, func.count())
                    .where(CategoryClosureModel.depth > 0)
                    .group_by(CategoryClosureModel.ancestor_id)
                )
            ).all()
        )
        revision_counts = dict(
            (
                await self._session.execute(
                    select(RevisionCategoryModel.category_id, func.count())
                    .group_by(RevisionCategoryModel.category_id)
                )
            ).all()
        )
        return [
            CategoryStats(
                category=c,
                parent_name=names.get(c.parent_id) if c.parent_id else None,
                descendant_count=descendant_counts.get(c.id, 0),
                revision_count=revision_counts.get(c.id, 0),
            )
            for c in categories
        ]

    async def ancestors_of(self, category_id: str) -> list[ClosureRow]:
        return await self._closure_rows(CategoryClosureModel.descendant_id == category_id)

    async def subtree_of(self, category_id: str) -> list[ClosureRow]:
        return await self._closure_rows(CategoryClosureModel.ancestor_id == category_id)

    # ── Writes ───────────────────────────────────────────────────────

    async def create(self, category: Category) -> Category:
        model = CategoryModel(
            id=category.id,
            name=category.name,
            slug=category.slug,
            is_system=category.is_system,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model, category.parent_id, category.depth)

    async def update(self, category: Category) -> Category:
        await self._session.execute(
            update(CategoryModel)
            .where(CategoryModel.id == category.id)
            .values(name=category.name, slug=category.slug, updated_at=category.updated_at)
            .execution_options(synchronize_session=False)
        )
        return category

    async def add_closure_rows(self, rows: Iterable[ClosureRow]) -> None:
        values = [
            {"ancestor_id": r.ancestor_id, "descendant_id": r.descendant_id, "depth": r.depth}
            for r in rows
        ]
        if values:
            await self._session.execute(insert(CategoryClosureModel), values)

    async def detach_subtree(self, subtree_ids: set[str]) -> int:
        result = await self._session.execute(
            delete(CategoryClosureModel).where(
                CategoryClosureModel.descendant_id.in_(list(subtree_ids)),
                CategoryClosureModel.ancestor_id.not_in(list(subtree_ids)),
            )
        )
        return result.rowcount

    async def reassign_revisions(self, category_ids: set[str], fallback_id: str) -> int:
        affected = set(
            (
                await self._session.execute(
                    select(RevisionCategoryModel.revision_id)
                    .where(RevisionCategoryModel.category_id.in_(list(category_ids)))
                    .distinct()
                )
            ).scalars().all()
        )
        if not affected:
            return 0

        await self._session.execute(
            delete(RevisionCategoryModel).where(RevisionCategoryModel.category_id.in_(list(category_ids)))
        )
        still_tagged = set(
            (
                await self._session.execute(
                    select(RevisionCategoryModel.revision_id)
                    .where(RevisionCategoryModel.revision_id.in_(list(affected)))
                    .distinct()
                )
            ).scalars().all()
        )
        orphaned = affected - still_tagged
        if orphaned:
            await self._session.execute(
                insert(RevisionCategoryModel),
                [{"revision_id": rid, "category_id": fallback_id} for rid in sorted(orphaned)],
            )
        return len(orphaned)

    async def delete_many(self, category_ids: set[str]) -> int:
        await self._session.execute(
            delete(CategoryClosureModel).where(
                or_(
                    CategoryClosureModel.ancestor_id.in_(list(category_ids)),
                    CategoryClosureModel.descendant_id.in_(list(category_ids)),
                )
            )
        )
        result = await self._session.execute(
            delete(CategoryModel).where(CategoryModel.id.in_(list(category_ids)))
        )
        return result.rowcount
