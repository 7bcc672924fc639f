"""Posts controller — orchestration layer between router and service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.post import Post
from app.pagination import OffsetPage
from app.posts import service
from app.posts.schemas import (
    CreatePostRequest,
    PostResponse,
    UpdatePostRequest,
    UpdatePostVisibilityRequest,
)
from app.visibility.policy import Actor


async def to_responses(posts: list[Post], db: AsyncSession) -> list[PostResponse]:
    """Attach batched comment / reaction totals to a page of posts."""
    counts = await service.counts_for_posts(db, [p.post_id for p in posts])
    responses = []
    for post in posts:
        c = counts.get(post.post_id, service.PostCounts())
        responses.append(
            PostResponse.model_validate(post).model_copy(
                update={"comment_count": c.comments, "reaction_count": c.reactions}
            )
        )
    return responses


async def create_post(body: CreatePostRequest, actor: Actor, db: AsyncSession) -> PostResponse:
    post = await service.create_post(db, actor.id, body.content, body.visibility)
    return PostResponse.model_validate(post)


async def get_post(post_id: UUID, actor: Actor, db: AsyncSession) -> PostResponse:
    post = await service.get_post(db, actor, post_id)
    return (await to_responses([post], db))[0]


async def update_post(
    post_id: UUID, body: UpdatePostRequest, actor: Actor, db: AsyncSession
) -> PostResponse:
    post = await service.update_content(db, actor, post_id, body.content)
    return (await to_responses([post], db))[0]


async def update_visibility(
    post_id: UUID, body: UpdatePostVisibilityRequest, actor: Actor, db: AsyncSession
) -> PostResponse:
    post = await service.update_visibility(db, actor, post_id, body.visibility)
    return (await to_responses([post], db))[0]


async def delete_post(post_id: UUID, actor: Actor, db: AsyncSession) -> None:
    await service.delete_post(db, actor, post_id)


async def list_account_posts(
    author_id: UUID, actor: Actor, db: AsyncSession, page: int, size: int
) -> OffsetPage[PostResponse]:
    posts, total = await service.list_account_posts(
        db, actor, author_id, limit=size, offset=(page - 1) * size
    )
    return OffsetPage[PostResponse].build(
        items=await to_responses(posts, db), total=total, page=page, size=size
    )
