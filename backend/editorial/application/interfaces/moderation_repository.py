"""Port for the user ban lookup consumed by feeds and article reads."""

from abc import ABC, abstractmethod

from editorial.domain.entities import UserBan


class ModerationRepository(ABC):

    @abstractmethod
    async def get_ban(self, user_id: str) -> UserBan | None:
        ...

    @abstractmethod
    async def add_ban(self, ban: UserBan) -> bool:
        """Insert a ban; False if the user is already banned."""
        ...

    @abstractmethod
    async def remove_ban(self, user_id: str) -> bool:
        ...
