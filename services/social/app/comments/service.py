"""
Comments domain — flat comments on posts.

Rules:
  - writing a comment requires interaction access to the post; reading the
    thread requires view access (oldest first)
  - the post author is notified (COMMENT) unless they commented themselves
  - only the author edits a comment; the author or an administrator deletes it
"""
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import CommentNotFound, NotCommentAuthor, PostNotFound
from app.models.account import Account
from app.models.comment import Comment
from app.models.enums import NotificationType
from app.models.post import Post
from app.notifications.dispatcher import notify
from app.visibility.policy import Actor, ensure_can_interact, ensure_can_view


async def _get_post(session: AsyncSession, post_id: uuid.UUID) -> Post:
    post = await session.get(Post, post_id)
    if post is None:
        raise PostNotFound()
    return post


async def _get_comment(session: AsyncSession, comment_id: uuid.UUID) -> Comment:
    comment = await session.get(Comment, comment_id)
    if comment is None:
        raise CommentNotFound()
    return comment


async def create_comment(
    session: AsyncSession, actor: Actor, post_id: uuid.UUID, body: str
) -> Comment:
    post = await _get_post(session, post_id)
    await ensure_can_interact(session, post, actor)

    comment = Comment(post_id=post_id, author_id=actor.id, body=body)
    session.add(comment)
    await session.flush()

    if post.author_id != actor.id:
        commenter = await session.get(Account, actor.id)
        name = commenter.username if commenter is not None else "Someone"
        await notify(
            session,
            recipient_id=post.author_id,
            title="New comment",
            body=f"{name} commented on your post.",
            type_=NotificationType.COMMENT,
            reference_id=post_id,
            reference_type="posts",
        )
    return comment


async def list_comments(
    session: AsyncSession,
    actor: Actor,
    post_id: uuid.UUID,
    *,
    limit: int,
    offset: int,
) -> tuple[list[Comment], int]:
    post = await _get_post(session, post_id)
    await ensure_can_view(session, post, actor)

    total = (
        await session.execute(
            sa.select(sa.func.count()).select_from(Comment).where(Comment.post_id == post_id)
        )
    ).scalar_one()
    rows = await session.execute(
        sa.select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc(), Comment.comment_id.asc())
        .limit(limit)
        .offset(offset)
    )
    return list(rows.scalars().all()), total


async def update_comment(
    session: AsyncSession, actor: Actor, comment_id: uuid.UUID, body: str
) -> Comment:
    comment = await _get_comment(session, comment_id)
    if comment.author_id != actor.id:
        raise NotCommentAuthor()
    comment.body = body
    await session.flush()
    return comment


async def delete_comment(session: AsyncSession, actor: Actor, comment_id: uuid.UUID) -> None:
    comment = await _get_comment(session, comment_id)
    if comment.author_id != actor.id and not actor.is_admin:
        raise NotCommentAuthor("Only the author or an administrator can delete this comment.")
    await session.delete(comment)
    await session.flush()
