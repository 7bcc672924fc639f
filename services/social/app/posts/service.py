"""
Posts domain — pure business logic (zero FastAPI imports).

Ownership rules:
  visibility / content changes : author only
  delete                       : author or administrator; removal always goes
                                 through the moderation cascade, and an admin
                                 removing someone else's post is audited
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotPostAuthor, PostNotFound
from app.models.comment import Comment
from app.models.enums import Visibility
from app.models.post import Post
from app.models.reaction import Reaction
from app.moderation.cascade import delete_post_cascade
from app.moderation.service import record_post_removal
from app.visibility.policy import Actor, can_see_private_posts_of, ensure_can_view

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostCounts:
    comments: int = 0
    reactions: int = 0


async def create_post(
    session: AsyncSession,
    author_id: uuid.UUID,
    content: str,
    visibility: Visibility = Visibility.PUBLIC,
) -> Post:
    post = Post(author_id=author_id, content=content, visibility=visibility)
    session.add(post)
    await session.flush()
    return post


async def _get_or_404(session: AsyncSession, post_id: uuid.UUID) -> Post:
    post = await session.get(Post, post_id)
    if post is None:
        raise PostNotFound()
    return post


async def get_post(session: AsyncSession, actor: Actor, post_id: uuid.UUID) -> Post:
    post = await _get_or_404(session, post_id)
    await ensure_can_view(session, post, actor)
    return post


async def update_visibility(
    session: AsyncSession, actor: Actor, post_id: uuid.UUID, visibility: Visibility
) -> Post:
    post = await _get_or_404(session, post_id)
    if post.author_id != actor.id:
        raise NotPostAuthor()
    post.visibility = visibility
    await session.flush()
    return post


async def update_content(
    session: AsyncSession, actor: Actor, post_id: uuid.UUID, content: str
) -> Post:
    post = await _get_or_404(session, post_id)
    if post.author_id != actor.id:
        raise NotPostAuthor()
    post.content = content
    await session.flush()
    return post


async def delete_post(session: AsyncSession, actor: Actor, post_id: uuid.UUID) -> None:
    post = await _get_or_404(session, post_id)
    by_admin = post.author_id != actor.id
    if by_admin and not actor.is_admin:
        raise NotPostAuthor("Only the author or an administrator can delete this post.")

    cascade = await delete_post_cascade(session, post_id)
    if cascade is not None and by_admin:
        logger.info("Admin %s removed post %s by %s", actor.id, post_id, cascade.author_id)
        await record_post_removal(session, actor.id, cascade)


async def list_account_posts(
    session: AsyncSession,
    actor: Actor,
    author_id: uuid.UUID,
    *,
    limit: int,
    offset: int,
) -> tuple[list[Post], int]:
    """All posts when the actor may see the author's private content, else PUBLIC only."""
    base = sa.select(Post).where(Post.author_id == author_id)
    if not await can_see_private_posts_of(session, author_id, actor):
        base = base.where(Post.visibility == Visibility.PUBLIC)

    total = (
        await session.execute(sa.select(sa.func.count()).select_from(base.subquery()))
    ).scalar_one()
    rows = await session.execute(
        base.order_by(Post.created_at.desc(), Post.post_id.desc()).limit(limit).offset(offset)
    )
    return list(rows.scalars().all()), total


async def counts_for_posts(
    session: AsyncSession, post_ids: list[uuid.UUID]
) -> dict[uuid.UUID, PostCounts]:
    """Batched comment and reaction totals, two queries regardless of page size."""
    if not post_ids:
        return {}
    comment_rows = await session.execute(
        sa.select(Comment.post_id, sa.func.count())
        .where(Comment.post_id.in_(post_ids))
        .group_by(Comment.post_id)
    )
    reaction_rows = await session.execute(
        sa.select(Reaction.post_id, sa.func.count())
        .where(Reaction.post_id.in_(post_ids))
        .group_by(Reaction.post_id)
    )
    comments = dict(comment_rows.all())
    reactions = dict(reaction_rows.all())
    return {
        pid: PostCounts(comments=comments.get(pid, 0), reactions=reactions.get(pid, 0))
        for pid in post_ids
    }
