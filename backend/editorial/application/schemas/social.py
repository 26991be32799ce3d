"""Pydantic DTOs for follower and following lists."""

from datetime import datetime

from pydantic import BaseModel, Field


class FollowListQuery(BaseModel):
    cursor: str | None = Field(None, max_length=512)
    limit: int | None = Field(None, ge=1, le=100)


class FollowResponse(BaseModel):
    """One user in a follower or following list.

    ``viewer_follows`` is null for anonymous readers.
    """

    user_id: str
    followed_at: datetime
    viewer_follows: bool | None = None

    model_config = {"from_attributes": True}


class FollowStatusResponse(BaseModel):
    following: bool
