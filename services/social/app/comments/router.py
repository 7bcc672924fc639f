from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.comments import controller
from app.comments.schemas import CommentResponse, CreateCommentRequest, UpdateCommentRequest
from app.database import get_db
from app.dependencies import get_actor
from app.pagination import OffsetPage, PageParams, page_params
from app.rate_limit import limiter
from app.visibility.policy import Actor

router = APIRouter(tags=["Comments"])


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post",
    description="Requires access to the post. Rate limit: 5 comments per minute.",
    responses={
        403: {"description": "You cannot interact with this post"},
        404: {"description": "Post not found"},
    },
)
@limiter.limit("5/minute")
async def create_comment(
    request: Request,
    post_id: UUID,
    body: CreateCommentRequest,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> CommentResponse:
    return await controller.create_comment(post_id, body, actor, db)


@router.get(
    "/posts/{post_id}/comments",
    response_model=OffsetPage[CommentResponse],
    summary="List comments on a post",
    description="Oldest first.",
)
async def list_comments(
    post_id: UUID,
    paging: PageParams = Depends(page_params),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> OffsetPage[CommentResponse]:
    return await controller.list_comments(post_id, actor, db, paging.page, paging.size)


@router.patch(
    "/comments/{comment_id}",
    response_model=CommentResponse,
    summary="Edit a comment",
    responses={403: {"description": "Not the author"}, 404: {"description": "Comment not found"}},
)
async def update_comment(
    comment_id: UUID,
    body: UpdateCommentRequest,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> CommentResponse:
    return await controller.update_comment(comment_id, body, actor, db)


@router.delete(
    "/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment",
    description="Author or administrator.",
)
async def delete_comment(
    comment_id: UUID,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> None:
    await controller.delete_comment(comment_id, actor, db)
