from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_actor
from app.feed import controller
from app.feed.service import MAX_PAGE_SIZE
from app.pagination import CursorPage, OffsetPage, PageParams, page_params
from app.posts.schemas import PostResponse
from app.visibility.policy import Actor

router = APIRouter(prefix="/feed", tags=["Feed"])


@router.get(
    "/home",
    response_model=CursorPage[PostResponse],
    summary="Home feed",
    description=(
        "Your own posts (any visibility) plus PUBLIC posts from accounts you follow, "
        "newest first. Cursor-paginated: pass `next_cursor` back as `cursor`. "
        "Administrators receive an empty feed."
    ),
    responses={422: {"description": "Malformed cursor"}},
)
async def home_feed(
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE, description="Posts per page"),
    cursor: str | None = Query(None, description="Cursor from the previous page"),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> CursorPage[PostResponse]:
    return await controller.get_home_feed(actor, db, limit=limit, cursor=cursor)


@router.get(
    "/public",
    response_model=OffsetPage[PostResponse],
    summary="Public discovery listing",
    description="PUBLIC posts from PUBLIC accounts, excluding your own, newest first.",
)
async def public_posts(
    paging: PageParams = Depends(page_params),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> OffsetPage[PostResponse]:
    return await controller.get_public_posts(actor, db, paging.page, paging.size)
