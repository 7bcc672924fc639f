"""
Follow graph — request orchestration.
"""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.accounts.schemas import AccountRef
from app.accounts.service import get_profile
from app.follows import service as svc
from app.follows.schemas import (
    FollowListItem,
    FollowListResponse,
    FollowResponse,
    FollowStatsResponse,
)
from app.models.account import Account
from app.models.follow import Follow


def _items(rows: list[tuple[Follow, Account, bool]]) -> list[FollowListItem]:
    return [
        FollowListItem(
            id=f.follow_id,
            account=AccountRef.model_validate(a),
            created_at=f.created_at,
            is_followed_by_me=followed,
        )
        for f, a, followed in rows
    ]


async def follow_account(
    session: AsyncSession, follower_id: uuid.UUID, following_id: uuid.UUID
) -> FollowResponse:
    edge = await svc.follow(session, follower_id, following_id)
    return FollowResponse.model_validate(edge)


async def unfollow_account(
    session: AsyncSession, follower_id: uuid.UUID, following_id: uuid.UUID
) -> None:
    await svc.unfollow(session, follower_id, following_id)


async def get_followers(
    session: AsyncSession,
    account_id: uuid.UUID,
    viewer_id: uuid.UUID,
    page: int,
    size: int,
) -> FollowListResponse:
    await get_profile(session, account_id)
    rows, total = await svc.list_followers(
        session, account_id, viewer_id=viewer_id, page=page, size=size
    )
    return FollowListResponse(items=_items(rows), total=total, page=page, size=size)


async def get_following(
    session: AsyncSession,
    account_id: uuid.UUID,
    viewer_id: uuid.UUID,
    page: int,
    size: int,
) -> FollowListResponse:
    await get_profile(session, account_id)
    rows, total = await svc.list_following(
        session, account_id, viewer_id=viewer_id, page=page, size=size
    )
    return FollowListResponse(items=_items(rows), total=total, page=page, size=size)


async def get_stats(
    session: AsyncSession, viewer_id: uuid.UUID, account_id: uuid.UUID
) -> FollowStatsResponse:
    await get_profile(session, account_id)
    stats = await svc.get_stats(session, viewer_id, account_id)
    return FollowStatsResponse.model_validate(stats)
