"""
Accounts domain — request orchestration.
"""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.accounts import service as svc
from app.accounts.schemas import (
    AccountResponse,
    ChangeRoleRequest,
    DashboardResponse,
    RegisterAccountRequest,
    SetActiveRequest,
    UpdateProfileRequest,
    UpdateVisibilityRequest,
)
from app.models.account import Account
from app.models.enums import AccountRole
from app.pagination import OffsetPage
from app.visibility.policy import Actor


async def register(
    session: AsyncSession, account_id: uuid.UUID, body: RegisterAccountRequest
) -> AccountResponse:
    account = await svc.register_account(
        session,
        account_id,
        username=body.username,
        display_name=body.display_name,
        visibility=body.visibility,
    )
    return AccountResponse.model_validate(account)


async def get_profile(session: AsyncSession, account_id: uuid.UUID) -> AccountResponse:
    return AccountResponse.model_validate(await svc.get_profile(session, account_id))


async def update_profile(
    session: AsyncSession, account: Account, body: UpdateProfileRequest
) -> AccountResponse:
    account = await svc.update_profile(session, account, body.display_name)
    return AccountResponse.model_validate(account)


async def update_visibility(
    session: AsyncSession, account: Account, body: UpdateVisibilityRequest
) -> AccountResponse:
    account = await svc.update_visibility(session, account, body.visibility)
    return AccountResponse.model_validate(account)


async def delete_account(session: AsyncSession, actor: Actor, account_id: uuid.UUID) -> None:
    await svc.delete_account(session, actor, account_id)


async def admin_change_role(
    session: AsyncSession, admin: Actor, account_id: uuid.UUID, body: ChangeRoleRequest
) -> AccountResponse:
    account = await svc.change_role(session, admin, account_id, body.role)
    return AccountResponse.model_validate(account)


async def admin_set_active(
    session: AsyncSession, admin: Actor, account_id: uuid.UUID, body: SetActiveRequest
) -> AccountResponse:
    account = await svc.set_active(session, admin, account_id, body.active)
    return AccountResponse.model_validate(account)


async def search(
    session: AsyncSession, actor: Actor, query: str, page: int, size: int
) -> OffsetPage[AccountResponse]:
    accounts, total = await svc.search_accounts(session, actor, query, page=page, size=size)
    return OffsetPage[AccountResponse].build(
        items=[AccountResponse.model_validate(a) for a in accounts],
        total=total,
        page=page,
        size=size,
    )


async def admin_list_accounts(
    session: AsyncSession,
    admin: Actor,
    *,
    role: AccountRole | None,
    is_active: bool | None,
    search: str | None,
    page: int,
    size: int,
) -> OffsetPage[AccountResponse]:
    accounts, total = await svc.list_accounts(
        session, admin, page=page, size=size, role=role, is_active=is_active, search=search
    )
    return OffsetPage[AccountResponse].build(
        items=[AccountResponse.model_validate(a) for a in accounts],
        total=total,
        page=page,
        size=size,
    )


async def admin_dashboard(session: AsyncSession, admin: Actor) -> DashboardResponse:
    return DashboardResponse.model_validate(await svc.dashboard_stats(session, admin))
