"""
Accounts domain — admin-facing routes.

Routes:
  GET    /api/v1/admin/dashboard                      Account, post and report totals
  GET    /api/v1/admin/accounts                       Every account (filter by role / active / q)
  PUT    /api/v1/admin/accounts/{account_id}/role     Promote / demote (audited)
  PUT    /api/v1/admin/accounts/{account_id}/active   Activate / deactivate (audited)
  DELETE /api/v1/admin/accounts/{account_id}          Delete an account (audited)

Requires: ADMIN role (read from storage, not from the token).
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.accounts import controller as ctrl
from app.accounts.schemas import (
    AccountResponse,
    ChangeRoleRequest,
    DashboardResponse,
    SetActiveRequest,
)
from app.database import get_db
from app.dependencies import require_admin
from app.models.enums import AccountRole
from app.pagination import OffsetPage, PageParams, page_params
from app.visibility.policy import Actor

router = APIRouter(prefix="/admin", tags=["admin-accounts"])


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="[Admin] Dashboard totals",
    description="Accounts (active / inactive), posts, and reports by status.",
)
async def dashboard(
    admin: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> DashboardResponse:
    return await ctrl.admin_dashboard(session, admin)


@router.get(
    "/accounts",
    response_model=OffsetPage[AccountResponse],
    summary="[Admin] List accounts",
    description="Newest first. Includes PRIVATE and deactivated accounts.",
)
async def list_accounts(
    role: AccountRole | None = Query(None, description="Filter by role"),
    active: bool | None = Query(None, description="Filter by active flag"),
    q: str | None = Query(None, max_length=100, description="Match username or display name"),
    paging: PageParams = Depends(page_params),
    admin: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> OffsetPage[AccountResponse]:
    return await ctrl.admin_list_accounts(
        session,
        admin,
        role=role,
        is_active=active,
        search=q,
        page=paging.page,
        size=paging.size,
    )


@router.put(
    "/accounts/{account_id}/role",
    response_model=AccountResponse,
    summary="[Admin] Change an account's role",
    description="Promotion forces the profile PRIVATE. Demoting the last active admin returns 422.",
)
async def change_role(
    account_id: uuid.UUID,
    body: ChangeRoleRequest,
    admin: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> AccountResponse:
    return await ctrl.admin_change_role(session, admin, account_id, body)


@router.put(
    "/accounts/{account_id}/active",
    response_model=AccountResponse,
    summary="[Admin] Activate or deactivate an account",
    description="Administrator accounts cannot be deactivated (422).",
)
async def set_active(
    account_id: uuid.UUID,
    body: SetActiveRequest,
    admin: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> AccountResponse:
    return await ctrl.admin_set_active(session, admin, account_id, body)


@router.delete(
    "/accounts/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="[Admin] Delete an account",
    description="The last active administrator cannot be deleted (403).",
)
async def delete_account(
    account_id: uuid.UUID,
    admin: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> None:
    await ctrl.delete_account(session, admin, account_id)
