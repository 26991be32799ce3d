"""Social interaction and moderation entities."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class ToggleResult:
    """State after a like/save/follow toggle together with the current count."""

    active: bool
    count: int


@dataclass
class UserBan:
    """Ban record consulted by feeds to hide banned authors."""

    user_id: str
    banned_by: str
    reason: str
    banned_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class FollowEdge:
    """One entry of a follower or following list.

    ``user_id`` is the other side of the follow. ``viewer_follows`` is only
    set when the list is read by an identified viewer.
    """

    user_id: str
    followed_at: datetime
    viewer_follows: bool | None = None
