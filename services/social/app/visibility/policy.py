"""
Visibility policy — the single place that decides whether an actor may see or
act on a post.

Rule, evaluated in order:
  1. the actor authored the post          → ALLOW
  2. the actor is an administrator        → ALLOW
  3. the post is PUBLIC                   → ALLOW
  4. the actor follows the post's author  → ALLOW
  otherwise                               → DENY

Only the post's own visibility is consulted.  The author's account-level
visibility governs profile discovery, not access to individual posts.
Commenting and reacting use the same rule as viewing.
"""
from __future__ import annotations

import enum
import uuid

from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import VisibilityDenied
from app.follows.service import exists as follow_exists
from app.models.enums import AccountRole, Visibility
from app.models.post import Post


class Decision(str, enum.Enum):
    ALLOW = "ALLOW"
    DENY = "DENY"


class Actor(BaseModel):
    """The acting principal as the policy sees it."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    role: AccountRole = AccountRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN


def needs_follow_edge(author_id: uuid.UUID, visibility: Visibility, actor: Actor) -> bool:
    """True when only the follow graph can settle the decision."""
    return not (actor.id == author_id or actor.is_admin or visibility == Visibility.PUBLIC)


def decide(
    author_id: uuid.UUID,
    visibility: Visibility,
    actor: Actor,
    follows_author: bool,
) -> Decision:
    if actor.id == author_id:
        return Decision.ALLOW
    if actor.is_admin:
        return Decision.ALLOW
    if visibility == Visibility.PUBLIC:
        return Decision.ALLOW
    if follows_author:
        return Decision.ALLOW
    return Decision.DENY


async def _resolve(
    session: AsyncSession,
    author_id: uuid.UUID,
    visibility: Visibility,
    actor: Actor,
) -> Decision:
    follows_author = False
    if needs_follow_edge(author_id, visibility, actor):
        follows_author = await follow_exists(session, actor.id, author_id)
    return decide(author_id, visibility, actor, follows_author)


async def can_view(session: AsyncSession, post: Post, actor: Actor) -> bool:
    return await _resolve(session, post.author_id, post.visibility, actor) == Decision.ALLOW


async def can_interact(session: AsyncSession, post: Post, actor: Actor) -> bool:
    return await _resolve(session, post.author_id, post.visibility, actor) == Decision.ALLOW


async def can_see_private_posts_of(
    session: AsyncSession, author_id: uuid.UUID, actor: Actor
) -> bool:
    """True when a PRIVATE post by ``author_id`` would be visible to ``actor``."""
    decision = await _resolve(session, author_id, Visibility.PRIVATE, actor)
    return decision == Decision.ALLOW


async def ensure_can_view(session: AsyncSession, post: Post, actor: Actor) -> None:
    if not await can_view(session, post, actor):
        raise VisibilityDenied()


async def ensure_can_interact(session: AsyncSession, post: Post, actor: Actor) -> None:
    if not await can_interact(session, post, actor):
        raise VisibilityDenied("You cannot interact with this post.")
