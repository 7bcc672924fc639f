"""
Post removal cascade.

Removes a post and everything that depends on it as one unit: reports
against it are unlinked (PENDING ones are closed as RESOLVED), then
comments, then reactions, then the post row.
The whole sequence runs inside a SAVEPOINT; if the post is still present
afterwards the savepoint is rolled back and CascadeFailure is raised, so
moderation state can never claim a removal that did not happen.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import CascadeFailure
from app.models.comment import Comment
from app.models.enums import ReportStatus
from app.models.post import Post
from app.models.reaction import Reaction
from app.models.report import Report

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CascadeResult:
    post_id: uuid.UUID
    author_id: uuid.UUID
    content: str
    comments_deleted: int
    reactions_deleted: int
    reports_closed: int


class _Incomplete(Exception):
    """Internal signal that rolls the savepoint back."""


async def post_exists(session: AsyncSession, post_id: uuid.UUID) -> bool:
    result = await session.execute(sa.select(sa.exists().where(Post.post_id == post_id)))
    return result.scalar_one()


async def delete_post_cascade(session: AsyncSession, post_id: uuid.UUID) -> CascadeResult | None:
    """Delete ``post_id`` with its comments and reactions.

    Returns None when the post is already gone (idempotent cleanup).
    """
    snapshot = (
        await session.execute(
            sa.select(Post.author_id, Post.content).where(Post.post_id == post_id)
        )
    ).one_or_none()
    if snapshot is None:
        logger.info("Cascade skipped: post %s no longer exists", post_id)
        return None
    author_id, content = snapshot

    try:
        async with session.begin_nested():
            closed = await session.execute(
                sa.update(Report)
                .where(Report.post_id == post_id, Report.status == ReportStatus.PENDING)
                .values(status=ReportStatus.RESOLVED, reviewed_at=datetime.now(timezone.utc))
                .execution_options(synchronize_session="evaluate")
            )
            await session.execute(
                sa.update(Report)
                .where(Report.post_id == post_id)
                .values(post_id=None)
                .execution_options(synchronize_session="evaluate")
            )
            # evaluate: plain DELETE so rowcount is the number of rows removed
            comments = await session.execute(
                sa.delete(Comment)
                .where(Comment.post_id == post_id)
                .execution_options(synchronize_session="evaluate")
            )
            reactions = await session.execute(
                sa.delete(Reaction)
                .where(Reaction.post_id == post_id)
                .execution_options(synchronize_session="evaluate")
            )
            await session.execute(sa.delete(Post).where(Post.post_id == post_id))
            if await post_exists(session, post_id):
                raise _Incomplete()
    except _Incomplete as exc:
        logger.error("Cascade for post %s did not remove the post row", post_id)
        raise CascadeFailure() from exc

    return CascadeResult(
        post_id=post_id,
        author_id=author_id,
        content=content,
        comments_deleted=comments.rowcount or 0,
        reactions_deleted=reactions.rowcount or 0,
        reports_closed=closed.rowcount or 0,
    )
