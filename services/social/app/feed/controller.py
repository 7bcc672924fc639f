from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import InvalidOperation
from app.feed import service
from app.pagination import CursorPage, OffsetPage, decode_cursor, encode_cursor
from app.posts.controller import to_responses
from app.posts.schemas import PostResponse
from app.visibility.policy import Actor


async def get_home_feed(
    actor: Actor,
    db: AsyncSession,
    limit: int = 20,
    cursor: str | None = None,
) -> CursorPage[PostResponse]:
    cursor_created_at = None
    cursor_post_id: UUID | None = None
    if cursor:
        try:
            cursor_created_at, cursor_post_id = decode_cursor(cursor)
        except ValueError:
            raise InvalidOperation("Invalid cursor.")

    posts, has_more = await service.get_home_feed(
        actor=actor,
        db=db,
        limit=limit,
        cursor_created_at=cursor_created_at,
        cursor_post_id=cursor_post_id,
    )

    next_cursor: str | None = None
    if has_more and posts:
        last = posts[-1]
        next_cursor = encode_cursor(last.created_at, last.post_id)

    return CursorPage[PostResponse](
        items=await to_responses(posts, db),
        next_cursor=next_cursor,
        has_more=has_more,
    )


async def get_public_posts(
    actor: Actor, db: AsyncSession, page: int, size: int
) -> OffsetPage[PostResponse]:
    posts, total = await service.get_public_posts(
        actor=actor, db=db, limit=size, offset=(page - 1) * size
    )
    return OffsetPage[PostResponse].build(
        items=await to_responses(posts, db), total=total, page=page, size=size
    )
