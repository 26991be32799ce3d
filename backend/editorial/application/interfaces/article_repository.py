"""Abstract repository interfaces (ports): define the contract, not the implementation."""

from abc import ABC, abstractmethod

from editorial.application.pagination import CursorPosition
from editorial.domain.entities import AdminArticleFilter, AdminArticleItem, Article, ArticleStatus


class ArticleRepository(ABC):
    """Port for article persistence: implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, article_id: str) -> Article | None:
        """Retrieve a single article by its ID."""
        ...

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Article | None:
        ...

    @abstractmethod
    async def slug_exists(self, slug: str) -> bool:
        ...

    @abstractmethod
    async def create(self, article: Article) -> Article:
        """Persist a new article."""
        ...

    @abstractmethod
    async def save_publication(self, article: Article) -> Article:
        """Persist the published-revision pointer and publish timestamps."""
        ...

    @abstractmethod
    async def set_status(
        self, article_id: str, expected: ArticleStatus, target: ArticleStatus
    ) -> bool:
        """Compare-and-set the article status. Returns False if it was not ``expected``."""
        ...

    @abstractmethod
    async def list_for_admin(
        self,
        article_filter: AdminArticleFilter,
        after: CursorPosition | None,
        limit: int,
    ) -> list[AdminArticleItem]:
        """Every article that has been published, removed ones included.

        Newest first by ``(created_at, id)``; ``after`` is the last row already seen.
        """
        ...
