"""
Follow graph — pure business logic (zero FastAPI imports).

State rules:
  follow:   cannot follow self, target must be an active account, one edge per
            ordered pair (checked here and by uq_follows_pair under races)
  unfollow: the edge must exist
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import AccountNotFound, AlreadyFollowing, CannotFollowSelf, NotFollowing
from app.models.account import Account
from app.models.enums import NotificationType
from app.models.follow import Follow
from app.notifications.dispatcher import notify


@dataclass(frozen=True)
class FollowStats:
    followers: int
    following: int
    follows: bool       # viewer → account
    follows_you: bool   # account → viewer


# ── Queries ────────────────────────────────────────────────────────────────────

async def exists(
    session: AsyncSession, follower_id: uuid.UUID, following_id: uuid.UUID
) -> bool:
    result = await session.execute(
        sa.select(sa.exists().where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        ))
    )
    return result.scalar_one()


async def count_followers(session: AsyncSession, account_id: uuid.UUID) -> int:
    result = await session.execute(
        sa.select(sa.func.count()).select_from(Follow).where(Follow.following_id == account_id)
    )
    return result.scalar_one()


async def count_following(session: AsyncSession, account_id: uuid.UUID) -> int:
    result = await session.execute(
        sa.select(sa.func.count()).select_from(Follow).where(Follow.follower_id == account_id)
    )
    return result.scalar_one()


async def following_ids(session: AsyncSession, account_id: uuid.UUID) -> list[uuid.UUID]:
    result = await session.execute(
        sa.select(Follow.following_id).where(Follow.follower_id == account_id)
    )
    return list(result.scalars().all())


async def get_stats(
    session: AsyncSession, viewer_id: uuid.UUID, account_id: uuid.UUID
) -> FollowStats:
    return FollowStats(
        followers=await count_followers(session, account_id),
        following=await count_following(session, account_id),
        follows=await exists(session, viewer_id, account_id),
        follows_you=await exists(session, account_id, viewer_id),
    )


# ── Follow / unfollow ──────────────────────────────────────────────────────────

async def follow(
    session: AsyncSession,
    follower_id: uuid.UUID,
    following_id: uuid.UUID,
) -> Follow:
    if follower_id == following_id:
        raise CannotFollowSelf()
    target = await session.get(Account, following_id)
    if target is None or not target.is_active:
        raise AccountNotFound()
    if await exists(session, follower_id, following_id):
        raise AlreadyFollowing()

    edge = Follow(follower_id=follower_id, following_id=following_id)
    try:
        async with session.begin_nested():
            session.add(edge)
    except IntegrityError as exc:
        # A concurrent request created the same edge between the check and the insert
        raise AlreadyFollowing() from exc

    follower = await session.get(Account, follower_id)
    name = follower.username if follower is not None else "Someone"
    await notify(
        session,
        recipient_id=following_id,
        title="New follower",
        body=f"{name} started following you.",
        type_=NotificationType.FOLLOW,
        reference_id=follower_id,
        reference_type="accounts",
    )
    return edge


async def unfollow(
    session: AsyncSession,
    follower_id: uuid.UUID,
    following_id: uuid.UUID,
) -> None:
    result = await session.execute(
        sa.delete(Follow).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        ).execution_options(synchronize_session="evaluate")
    )
    if not result.rowcount:
        raise NotFollowing()


# ── Following / Followers lists ────────────────────────────────────────────────

async def list_following(
    session: AsyncSession,
    account_id: uuid.UUID,
    *,
    viewer_id: uuid.UUID,
    page: int,
    size: int,
) -> tuple[list[tuple[Follow, Account, bool]], int]:
    """
    Return (rows, total) where each row is (Follow, Account[following], is_followed_by_viewer).
    """
    total = await count_following(session, account_id)
    rows_r = await session.execute(
        sa.select(Follow, Account)
        .join(Account, Account.id == Follow.following_id)
        .where(Follow.follower_id == account_id)
        .order_by(Follow.created_at.desc(), Follow.follow_id.desc())
        .limit(size)
        .offset((page - 1) * size)
    )
    rows = rows_r.all()

    followed_set = await _batch_followed_by(session, viewer_id, [a.id for _, a in rows])
    return [(f, a, a.id in followed_set) for f, a in rows], total


async def list_followers(
    session: AsyncSession,
    account_id: uuid.UUID,
    *,
    viewer_id: uuid.UUID,
    page: int,
    size: int,
) -> tuple[list[tuple[Follow, Account, bool]], int]:
    """
    Return (rows, total) where each row is (Follow, Account[follower], is_followed_by_viewer).
    """
    total = await count_followers(session, account_id)
    rows_r = await session.execute(
        sa.select(Follow, Account)
        .join(Account, Account.id == Follow.follower_id)
        .where(Follow.following_id == account_id)
        .order_by(Follow.created_at.desc(), Follow.follow_id.desc())
        .limit(size)
        .offset((page - 1) * size)
    )
    rows = rows_r.all()

    followed_set = await _batch_followed_by(session, viewer_id, [a.id for _, a in rows])
    return [(f, a, a.id in followed_set) for f, a in rows], total


async def _batch_followed_by(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_ids: list[uuid.UUID],
) -> set[uuid.UUID]:
    """Return the subset of target_ids that viewer_id follows."""
    if not target_ids:
        return set()
    result = await session.execute(
        sa.select(Follow.following_id).where(
            Follow.follower_id == viewer_id,
            Follow.following_id.in_(target_ids),
        )
    )
    return {row[0] for row in result.all()}
