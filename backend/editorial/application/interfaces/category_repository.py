"""Port for the category forest and its closure relation.

Only the category hierarchy manager writes through this port; closure rows
are never touched by any other component.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from editorial.domain.entities import Category, CategoryRef, CategoryStats, ClosureRow


class CategoryRepository(ABC):

    @abstractmethod
    async def get_by_id(self, category_id: str) -> Category | None:
        """Load a category with its parent id and depth resolved."""
        ...

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Category | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[Category]:
        ...

    @abstractmethod
    async def existing_ids(self, category_ids: Iterable[str]) -> set[str]:
        ...

    @abstractmethod
    async def get_refs(self, category_ids: Iterable[str]) -> list[CategoryRef]:
        ...

    @abstractmethod
    async def get_stats(self) -> list[CategoryStats]:
        ...

    @abstractmethod
    async def create(self, category: Category) -> Category:
        """Insert the category row only; closure rows are written separately."""
        ...

    @abstractmethod
    async def update(self, category: Category) -> Category:
        ...

    @abstractmethod
    async def ancestors_of(self, category_id: str) -> list[ClosureRow]:
        """Closure rows whose descendant is ``category_id`` (self row included)."""
        ...

    @abstractmethod
    async def subtree_of(self, category_id: str) -> list[ClosureRow]:
        """Closure rows whose ancestor is ``category_id`` (self row included)."""
        ...

    @abstractmethod
    async def add_closure_rows(self, rows: Iterable[ClosureRow]) -> None:
        ...

    @abstractmethod
    async def detach_subtree(self, subtree_ids: set[str]) -> int:
        """Delete closure rows linking the subtree to ancestors outside it."""
        ...

    @abstractmethod
    async def reassign_revisions(self, category_ids: set[str], fallback_id: str) -> int:
        """Drop associations to ``category_ids``; give orphaned revisions ``fallback_id``.

        Returns the number of revisions that were left without a category
        and received the fallback.
        """
        ...

    @abstractmethod
    async def delete_many(self, category_ids: set[str]) -> int:
        """Delete category rows and every closure row touching them."""
        ...
