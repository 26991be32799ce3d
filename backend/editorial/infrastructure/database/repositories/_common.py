"""Helpers shared by the SQLAlchemy repositories."""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from editorial.domain.entities import CategoryRef
from editorial.infrastructure.database.models import CategoryModel, RevisionCategoryModel


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite returns naive datetimes; every stored value is UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def insert_ignore(session: AsyncSession, model):
    """``INSERT ... ON CONFLICT DO NOTHING`` for the session's dialect.

    Any unique violation (primary key or partial unique index) makes the
    statement a no-op; callers inspect ``rowcount`` to see if a row landed.
    """
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model).on_conflict_do_nothing()
    if dialect == "sqlite":
        return sqlite.insert(model).on_conflict_do_nothing()
    raise NotImplementedError(f"Unsupported database dialect: {dialect}")


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def load_category_refs(
    session: AsyncSession, revision_ids: list[str]
) -> dict[str, list[CategoryRef]]:
    """Category refs per revision id, ordered by category name."""
    refs: dict[str, list[CategoryRef]] = {rid: [] for rid in revision_ids}
    if not revision_ids:
        return refs
    stmt = (
        select(RevisionCategoryModel.revision_id, CategoryModel.id, CategoryModel.name, CategoryModel.slug)
        .join(CategoryModel, CategoryModel.id == RevisionCategoryModel.category_id)
        .where(RevisionCategoryModel.revision_id.in_(revision_ids))
        .order_by(CategoryModel.name)
    )
    for revision_id, cid, name, slug in (await session.execute(stmt)).all():
        refs[revision_id].append(CategoryRef(id=cid, name=name, slug=slug))
    return refs
