"""
Follow graph — Pydantic V2 response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.accounts.schemas import AccountRef


class FollowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    follow_id: uuid.UUID
    follower_id: uuid.UUID
    following_id: uuid.UUID
    created_at: datetime


class FollowListItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID           # follow_id
    account: AccountRef     # the other party (following or follower depending on context)
    created_at: datetime
    is_followed_by_me: bool


class FollowListResponse(BaseModel):
    items: list[FollowListItem]
    total: int
    page: int
    size: int


class FollowStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    followers: int
    following: int
    follows: bool
    follows_you: bool
