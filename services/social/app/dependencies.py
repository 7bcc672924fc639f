"""
Social service — identity resolution dependencies.

The bearer token is decoded by the shared auth layer (python-jose); the
account row and its role are then loaded from storage, so an account that
was deactivated or promoted after the token was issued is seen as it is now.
"""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.exceptions import AccountInactive, AdminRequired, Unauthenticated
from app.models.account import Account
from app.visibility.policy import Actor
from shared.auth.dependencies import get_current_user_optional
from shared.models.user import CurrentUser


async def get_current_user(
    user: CurrentUser | None = Depends(get_current_user_optional),
) -> CurrentUser:
    """Valid token required; the account may not be provisioned yet."""
    if user is None:
        raise Unauthenticated()
    return user


async def get_current_account(
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> Account:
    account = await session.get(Account, user.id)
    if account is None:
        raise Unauthenticated("No account is registered for this identity.")
    if not account.is_active:
        raise AccountInactive()
    return account


async def get_actor(account: Account = Depends(get_current_account)) -> Actor:
    return Actor(id=account.id, role=account.role)


async def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    """Raise 403 unless the stored role of the caller is ADMIN."""
    if not actor.is_admin:
        raise AdminRequired()
    return actor
