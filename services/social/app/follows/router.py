"""
Follow graph — routes.

All routes prefixed /api/v1/accounts (same prefix as the accounts router;
sub-paths do not overlap).

Routes:
  POST   /{account_id}/follow         Follow an account  (50/hour rate limit)
  DELETE /{account_id}/follow         Unfollow
  GET    /{account_id}/followers      Followers (paginated, newest first)
  GET    /{account_id}/following      Following (paginated, newest first)
  GET    /{account_id}/follow-stats   Counts plus follows / follows-you flags
"""

import uuid

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_actor
from app.follows import controller as ctrl
from app.follows.schemas import FollowListResponse, FollowResponse, FollowStatsResponse
from app.pagination import PageParams, page_params
from app.rate_limit import limiter
from app.visibility.policy import Actor

router = APIRouter(prefix="/accounts", tags=["follows"])


@router.post(
    "/{account_id}/follow",
    response_model=FollowResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Follow an account",
    description="Rate-limited to 50 follow actions per hour. Notifies the followed account.",
    responses={
        404: {"description": "Account not found"},
        409: {"description": "Already following"},
        422: {"description": "Cannot follow yourself"},
    },
)
@limiter.limit("50/hour")
async def follow_account(
    request: Request,
    account_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> FollowResponse:
    return await ctrl.follow_account(session, actor.id, account_id)


@router.delete(
    "/{account_id}/follow",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unfollow an account",
    responses={404: {"description": "Not following this account"}},
)
async def unfollow_account(
    account_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> None:
    await ctrl.unfollow_account(session, actor.id, account_id)


@router.get(
    "/{account_id}/followers",
    response_model=FollowListResponse,
    summary="List an account's followers",
)
async def list_followers(
    account_id: uuid.UUID,
    paging: PageParams = Depends(page_params),
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> FollowListResponse:
    return await ctrl.get_followers(session, account_id, actor.id, paging.page, paging.size)


@router.get(
    "/{account_id}/following",
    response_model=FollowListResponse,
    summary="List accounts an account follows",
)
async def list_following(
    account_id: uuid.UUID,
    paging: PageParams = Depends(page_params),
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> FollowListResponse:
    return await ctrl.get_following(session, account_id, actor.id, paging.page, paging.size)


@router.get(
    "/{account_id}/follow-stats",
    response_model=FollowStatsResponse,
    summary="Follower / following counts and relationship flags",
)
async def follow_stats(
    account_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> FollowStatsResponse:
    return await ctrl.get_stats(session, actor.id, account_id)
