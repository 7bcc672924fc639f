"""
Reaction toggle — one reaction per (account, post).

react(actor, post, kind):
  no reaction yet      → create it, notify the post author       (CREATED)
  same kind exists     → delete it, no notification              (REMOVED)
  other kind exists    → overwrite the kind in place, no notice  (REPLACED)

Repeating the same reaction twice therefore nets to no reaction.
"""
from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import PostNotFound, ReactionNotFound, ReactionRace
from app.models.account import Account
from app.models.enums import NotificationType, ReactionKind
from app.models.post import Post
from app.models.reaction import Reaction
from app.notifications.dispatcher import notify
from app.visibility.policy import Actor, ensure_can_interact, ensure_can_view


class ReactionOutcome(str, enum.Enum):
    CREATED = "CREATED"
    REPLACED = "REPLACED"
    REMOVED = "REMOVED"


@dataclass(frozen=True)
class ToggleResult:
    outcome: ReactionOutcome
    reaction: Reaction | None


async def _get_post(session: AsyncSession, post_id: uuid.UUID) -> Post:
    post = await session.get(Post, post_id)
    if post is None:
        raise PostNotFound()
    return post


async def _find(session: AsyncSession, account_id: uuid.UUID, post_id: uuid.UUID) -> Reaction | None:
    result = await session.execute(
        sa.select(Reaction).where(Reaction.account_id == account_id, Reaction.post_id == post_id)
    )
    return result.scalar_one_or_none()


async def react(
    session: AsyncSession, actor: Actor, post_id: uuid.UUID, kind: ReactionKind
) -> ToggleResult:
    post = await _get_post(session, post_id)
    await ensure_can_interact(session, post, actor)

    existing = await _find(session, actor.id, post_id)
    if existing is not None:
        if existing.kind == kind:
            await session.delete(existing)
            await session.flush()
            return ToggleResult(ReactionOutcome.REMOVED, None)
        existing.kind = kind
        await session.flush()
        return ToggleResult(ReactionOutcome.REPLACED, existing)

    reaction = Reaction(post_id=post_id, account_id=actor.id, kind=kind)
    try:
        async with session.begin_nested():
            session.add(reaction)
    except IntegrityError as exc:
        raise ReactionRace() from exc

    if post.author_id != actor.id:
        reactor = await session.get(Account, actor.id)
        name = reactor.username if reactor is not None else "Someone"
        await notify(
            session,
            recipient_id=post.author_id,
            title="New reaction",
            body=f"{name} reacted {kind.value} to your post.",
            type_=NotificationType.REACTION,
            reference_id=post_id,
            reference_type="posts",
        )
    return ToggleResult(ReactionOutcome.CREATED, reaction)


async def remove_reaction(session: AsyncSession, actor: Actor, post_id: uuid.UUID) -> None:
    await _get_post(session, post_id)
    existing = await _find(session, actor.id, post_id)
    if existing is None:
        raise ReactionNotFound()
    await session.delete(existing)
    await session.flush()


async def my_reaction(
    session: AsyncSession, actor: Actor, post_id: uuid.UUID
) -> Reaction | None:
    await _get_post(session, post_id)
    return await _find(session, actor.id, post_id)


async def list_reactions(
    session: AsyncSession,
    actor: Actor,
    post_id: uuid.UUID,
    *,
    limit: int,
    offset: int,
) -> tuple[list[Reaction], int]:
    post = await _get_post(session, post_id)
    await ensure_can_view(session, post, actor)

    total = (
        await session.execute(
            sa.select(sa.func.count()).select_from(Reaction).where(Reaction.post_id == post_id)
        )
    ).scalar_one()
    rows = await session.execute(
        sa.select(Reaction)
        .where(Reaction.post_id == post_id)
        .order_by(Reaction.created_at.desc(), Reaction.reaction_id.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(rows.scalars().all()), total


async def summary(
    session: AsyncSession, actor: Actor, post_id: uuid.UUID
) -> dict[ReactionKind, int]:
    """Count per kind; kinds nobody used are reported as 0."""
    post = await _get_post(session, post_id)
    await ensure_can_view(session, post, actor)

    rows = await session.execute(
        sa.select(Reaction.kind, sa.func.count())
        .where(Reaction.post_id == post_id)
        .group_by(Reaction.kind)
    )
    counts = {kind: 0 for kind in ReactionKind}
    counts.update(dict(rows.all()))
    return counts
