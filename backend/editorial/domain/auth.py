"""Caller identity passed explicitly into every core operation."""

from dataclasses import dataclass, field
from enum import Enum

from editorial.domain.exceptions import ForbiddenError


class Role(str, Enum):
    """Roles recognised by the editorial core."""

    USER = "USER"
    REVIEWER = "REVIEWER"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, already authenticated by the routing layer.

    The core trusts this object and never re-derives identity.
    """

    user_id: str
    roles: frozenset[Role] = field(default_factory=lambda: frozenset({Role.USER}))
    is_banned: bool = False

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    @property
    def is_reviewer(self) -> bool:
        """Reviewers and admins may both act on the review queue."""
        return Role.REVIEWER in self.roles or Role.ADMIN in self.roles

    def require_active(self) -> None:
        if self.is_banned:
            raise ForbiddenError("Banned users cannot modify content")

    def require_reviewer(self) -> None:
        self.require_active()
        if not self.is_reviewer:
            raise ForbiddenError("Reviewer or admin role required")

    def require_admin(self) -> None:
        self.require_active()
        if not self.is_admin:
            raise ForbiddenError("Admin role required")
