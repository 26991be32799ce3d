"""Port for user↔article and user↔user join rows and article counters."""

from abc import ABC, abstractmethod
from datetime import date
from enum import Enum

from editorial.application.pagination import CursorPosition
from editorial.domain.entities import FollowEdge


class Counter(str, Enum):
    LIKES = "like_count"
    SAVES = "save_count"
    VIEWS = "view_count"


class SocialRepository(ABC):
    """Join-row existence is the only state; inserting and deleting is the toggle.

    ``add_*`` / ``remove_*`` report whether a row actually changed so the
    caller adjusts counters exactly once.
    """

    @abstractmethod
    async def add_like(self, user_id: str, article_id: str) -> bool: ...

    @abstractmethod
    async def remove_like(self, user_id: str, article_id: str) -> bool: ...

    @abstractmethod
    async def has_liked(self, user_id: str, article_id: str) -> bool: ...

    @abstractmethod
    async def add_save(self, user_id: str, article_id: str) -> bool: ...

    @abstractmethod
    async def remove_save(self, user_id: str, article_id: str) -> bool: ...

    @abstractmethod
    async def has_saved(self, user_id: str, article_id: str) -> bool: ...

    @abstractmethod
    async def add_follow(self, follower_id: str, followed_id: str) -> bool: ...

    @abstractmethod
    async def remove_follow(self, follower_id: str, followed_id: str) -> bool: ...

    @abstractmethod
    async def follower_count(self, user_id: str) -> int: ...

    @abstractmethod
    async def is_following(self, follower_id: str, followed_id: str) -> bool: ...

    @abstractmethod
    async def following_among(self, follower_id: str, user_ids: list[str]) -> set[str]:
        """The subset of ``user_ids`` that ``follower_id`` follows."""
        ...

    @abstractmethod
    async def list_followers(
        self, user_id: str, after: CursorPosition | None, limit: int
    ) -> list[FollowEdge]:
        """Users following ``user_id``, most recent follow first by ``(created_at, follower_id)``."""
        ...

    @abstractmethod
    async def list_following(
        self, user_id: str, after: CursorPosition | None, limit: int
    ) -> list[FollowEdge]:
        """Users ``user_id`` follows, most recent follow first by ``(created_at, followed_id)``."""
        ...

    @abstractmethod
    async def add_view(self, article_id: str, viewer_key: str, day: date) -> bool:
        """Record one view per viewer key per day; False if already counted."""
        ...

    @abstractmethod
    async def adjust_counter(self, article_id: str, counter: Counter, delta: int) -> int:
        """Atomic relative update at the storage layer, clamped at zero.

        Returns the counter value after the update.
        """
        ...
