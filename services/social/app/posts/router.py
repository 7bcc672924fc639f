from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_actor
from app.pagination import OffsetPage, PageParams, page_params
from app.posts import controller
from app.posts.schemas import (
    CreatePostRequest,
    PostResponse,
    UpdatePostRequest,
    UpdatePostVisibilityRequest,
)
from app.visibility.policy import Actor

router = APIRouter(tags=["Posts"])


@router.post(
    "/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
)
async def create_post(
    body: CreatePostRequest,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    return await controller.create_post(body, actor, db)


@router.get(
    "/posts/{post_id}",
    response_model=PostResponse,
    summary="Get a post",
    description=(
        "PRIVATE posts are returned only to their author, the author's followers "
        "and administrators."
    ),
    responses={
        403: {"description": "Post is private and you do not follow its author"},
        404: {"description": "Post not found"},
    },
)
async def get_post(
    post_id: UUID,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    return await controller.get_post(post_id, actor, db)


@router.patch(
    "/posts/{post_id}",
    response_model=PostResponse,
    summary="Edit a post",
    responses={403: {"description": "Not the author"}, 404: {"description": "Post not found"}},
)
async def update_post(
    post_id: UUID,
    body: UpdatePostRequest,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    return await controller.update_post(post_id, body, actor, db)


@router.put(
    "/posts/{post_id}/visibility",
    response_model=PostResponse,
    summary="Change a post's visibility",
    responses={403: {"description": "Not the author"}, 404: {"description": "Post not found"}},
)
async def update_post_visibility(
    post_id: UUID,
    body: UpdatePostVisibilityRequest,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    return await controller.update_visibility(post_id, body, actor, db)


@router.delete(
    "/posts/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a post",
    description=(
        "Author or administrator. Comments and reactions are removed with the post. "
        "Administrator removals are audited and the author is notified."
    ),
    responses={403: {"description": "Not the author"}, 404: {"description": "Post not found"}},
)
async def delete_post(
    post_id: UUID,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> None:
    await controller.delete_post(post_id, actor, db)


@router.get(
    "/accounts/{account_id}/posts",
    response_model=OffsetPage[PostResponse],
    summary="List an account's posts",
    description=(
        "Includes PRIVATE posts only when you are the author, follow the author, "
        "or are an administrator."
    ),
)
async def list_account_posts(
    account_id: UUID,
    paging: PageParams = Depends(page_params),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> OffsetPage[PostResponse]:
    return await controller.list_account_posts(account_id, actor, db, paging.page, paging.size)
