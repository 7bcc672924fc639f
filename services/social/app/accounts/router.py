"""
Accounts domain — user-facing routes.

Routes:
  POST   /accounts                 Provision the profile for the token subject
  GET    /accounts/me              Own profile
  PATCH  /accounts/me              Update display name
  PUT    /accounts/me/visibility   Set PUBLIC / PRIVATE (admins stay PRIVATE)
  DELETE /accounts/me              Delete own account and everything it owns
  GET    /accounts/search?q=       Account search (PUBLIC, active accounts for users)
  GET    /accounts/{account_id}    Another account's profile

/me and /search are registered before /{account_id} so the literal path wins.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.accounts import controller as ctrl
from app.accounts.schemas import (
    AccountResponse,
    RegisterAccountRequest,
    UpdateProfileRequest,
    UpdateVisibilityRequest,
)
from app.database import get_db
from app.dependencies import get_actor, get_current_account, get_current_user
from app.models.account import Account
from app.pagination import OffsetPage, PageParams, page_params
from app.visibility.policy import Actor
from shared.models.user import CurrentUser

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Provision my social profile",
    description="Creates the account row for the authenticated identity. 409 if it already exists.",
)
async def register_account(
    body: RegisterAccountRequest,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> AccountResponse:
    return await ctrl.register(session, current_user.id, body)


@router.get("/me", response_model=AccountResponse, summary="Get my profile")
async def get_me(account: Account = Depends(get_current_account)) -> AccountResponse:
    return AccountResponse.model_validate(account)


@router.patch("/me", response_model=AccountResponse, summary="Update my profile")
async def update_me(
    body: UpdateProfileRequest,
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_db),
) -> AccountResponse:
    return await ctrl.update_profile(session, account, body)


@router.put(
    "/me/visibility",
    response_model=AccountResponse,
    summary="Change my profile visibility",
    description="Administrators cannot make their profile PUBLIC (422).",
)
async def update_my_visibility(
    body: UpdateVisibilityRequest,
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_db),
) -> AccountResponse:
    return await ctrl.update_visibility(session, account, body)


@router.delete(
    "/me",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete my account",
    description="Removes posts (with their comments and reactions), comments, reactions, "
    "reports, follow edges and notifications. The last administrator cannot be deleted.",
)
async def delete_me(
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> None:
    await ctrl.delete_account(session, actor, actor.id)


@router.get(
    "/search",
    response_model=OffsetPage[AccountResponse],
    summary="Search accounts",
    description="Matches username or display name. Users only find PUBLIC, active accounts; "
    "administrators find every account.",
)
async def search_accounts(
    q: str = Query(..., min_length=1, max_length=100, description="Search term"),
    paging: PageParams = Depends(page_params),
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> OffsetPage[AccountResponse]:
    return await ctrl.search(session, actor, q, paging.page, paging.size)


@router.get(
    "/{account_id}",
    response_model=AccountResponse,
    summary="Get an account profile",
    responses={404: {"description": "Account not found or deactivated"}},
)
async def get_account(
    account_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> AccountResponse:
    return await ctrl.get_profile(session, account_id)
