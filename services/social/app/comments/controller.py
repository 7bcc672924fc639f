"""Comments controller — orchestration layer between router and service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.comments import service
from app.comments.schemas import CommentResponse, CreateCommentRequest, UpdateCommentRequest
from app.pagination import OffsetPage
from app.visibility.policy import Actor


async def create_comment(
    post_id: UUID, body: CreateCommentRequest, actor: Actor, db: AsyncSession
) -> CommentResponse:
    comment = await service.create_comment(db, actor, post_id, body.body)
    return CommentResponse.model_validate(comment)


async def list_comments(
    post_id: UUID, actor: Actor, db: AsyncSession, page: int, size: int
) -> OffsetPage[CommentResponse]:
    comments, total = await service.list_comments(
        db, actor, post_id, limit=size, offset=(page - 1) * size
    )
    return OffsetPage[CommentResponse].build(
        items=[CommentResponse.model_validate(c) for c in comments],
        total=total,
        page=page,
        size=size,
    )


async def update_comment(
    comment_id: UUID, body: UpdateCommentRequest, actor: Actor, db: AsyncSession
) -> CommentResponse:
    comment = await service.update_comment(db, actor, comment_id, body.body)
    return CommentResponse.model_validate(comment)


async def delete_comment(comment_id: UUID, actor: Actor, db: AsyncSession) -> None:
    await service.delete_comment(db, actor, comment_id)
