"""
Accounts domain — profile provisioning and administrative account control.

Invariants:
  - an ADMIN account is always PRIVATE (promotion forces it, and an admin
    cannot switch back to PUBLIC)
  - at least one active ADMIN exists at all times: the last one can be neither
    demoted nor deleted, and admins cannot be deactivated
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.audit import service as audit
from app.exceptions import (
    AccountAlreadyExists,
    AccountNotFound,
    AdminMustStayPrivate,
    AdminRequired,
    CannotDeactivateAdmin,
    Forbidden,
    LastAdminDeletion,
    LastAdminDemotion,
    UsernameTaken,
)
from app.models.account import Account
from app.models.comment import Comment
from app.models.enums import AccountRole, ActionType, Visibility
from app.models.follow import Follow
from app.models.notification import Notification
from app.models.post import Post
from app.models.reaction import Reaction
from app.models.report import Report
from app.moderation.cascade import delete_post_cascade
from app.moderation.service import report_counts
from app.visibility.policy import Actor

logger = logging.getLogger(__name__)

ACCOUNT_ENTITY = "accounts"


# ── Internal helpers ───────────────────────────────────────────────────────────

async def get_account(session: AsyncSession, account_id: uuid.UUID) -> Account:
    account = await session.get(Account, account_id)
    if account is None:
        raise AccountNotFound()
    return account


async def _username_taken(session: AsyncSession, username: str) -> bool:
    result = await session.execute(
        sa.select(sa.exists().where(sa.func.lower(Account.username) == username.lower()))
    )
    return result.scalar_one()


def active_admins_for_update() -> sa.Select:
    return (
        sa.select(Account.id)
        .where(Account.role == AccountRole.ADMIN, Account.is_active.is_(True))
        .with_for_update()
    )


async def lock_active_admins(session: AsyncSession) -> int:
    """Row-lock every active admin and return how many there are.

    A concurrent demotion or deletion waits on these locks and counts again
    after the first one commits.
    """
    result = await session.execute(active_admins_for_update())
    return len(result.scalars().all())


# ── Provisioning / profile ─────────────────────────────────────────────────────

async def register_account(
    session: AsyncSession,
    account_id: uuid.UUID,
    username: str,
    display_name: str,
    visibility: Visibility = Visibility.PUBLIC,
) -> Account:
    """Create the social profile for an authenticated identity."""
    if await session.get(Account, account_id) is not None:
        raise AccountAlreadyExists()
    if await _username_taken(session, username):
        raise UsernameTaken()

    account = Account(
        id=account_id,
        username=username,
        display_name=display_name,
        role=AccountRole.USER,
        visibility=visibility,
        is_active=True,
    )
    try:
        async with session.begin_nested():
            session.add(account)
    except IntegrityError as exc:
        raise UsernameTaken() from exc
    return account


async def get_profile(session: AsyncSession, account_id: uuid.UUID) -> Account:
    account = await get_account(session, account_id)
    if not account.is_active:
        raise AccountNotFound()
    return account


async def _paged_accounts(
    session: AsyncSession, filters: list, *, page: int, size: int, order_by
) -> tuple[list[Account], int]:
    count_q = sa.select(sa.func.count()).select_from(Account).where(*filters)
    total = (await session.execute(count_q)).scalar_one()
    result = await session.execute(
        sa.select(Account)
        .where(*filters)
        .order_by(*order_by)
        .offset((page - 1) * size)
        .limit(size)
    )
    return list(result.scalars().all()), total


def _matches(query: str) -> sa.ColumnElement[bool]:
    needle = query.strip()
    return sa.or_(
        Account.username.icontains(needle, autoescape=True),
        Account.display_name.icontains(needle, autoescape=True),
    )


async def search_accounts(
    session: AsyncSession, actor: Actor, query: str, *, page: int, size: int
) -> tuple[list[Account], int]:
    """Case-insensitive substring match on username or display name.

    Users only discover PUBLIC, active accounts; administrators see every account.
    """
    filters = [_matches(query)]
    if not actor.is_admin:
        filters += [Account.visibility == Visibility.PUBLIC, Account.is_active.is_(True)]
    return await _paged_accounts(
        session, filters, page=page, size=size, order_by=(Account.username, Account.id)
    )


async def update_profile(
    session: AsyncSession, account: Account, display_name: str
) -> Account:
    account.display_name = display_name
    await session.flush()
    return account


async def update_visibility(
    session: AsyncSession, account: Account, visibility: Visibility
) -> Account:
    if account.is_admin and visibility == Visibility.PUBLIC:
        raise AdminMustStayPrivate()
    account.visibility = visibility
    await session.flush()
    return account


# ── Admin actions ──────────────────────────────────────────────────────────────

async def change_role(
    session: AsyncSession, admin: Actor, account_id: uuid.UUID, role: AccountRole
) -> Account:
    if not admin.is_admin:
        raise AdminRequired()
    account = await get_account(session, account_id)
    if account.role == role:
        return account

    if role == AccountRole.ADMIN:
        account.role = AccountRole.ADMIN
        account.visibility = Visibility.PRIVATE
        action, title = ActionType.CREATE_ADMIN, "Administrator created"
    else:
        if account.is_active and await lock_active_admins(session) <= 1:
            raise LastAdminDemotion()
        account.role = role
        action, title = ActionType.UPDATE_USER, "Administrator demoted"

    await session.flush()
    await audit.record(
        session,
        admin_id=admin.id,
        action=action,
        title=title,
        description=f"Role of {account.username} set to {role.value}",
        affected_entity_id=account.id,
        affected_entity_type=ACCOUNT_ENTITY,
        affected_account_id=account.id,
    )
    return account


async def set_active(
    session: AsyncSession, admin: Actor, account_id: uuid.UUID, active: bool
) -> Account:
    if not admin.is_admin:
        raise AdminRequired()
    account = await get_account(session, account_id)
    if not active and account.is_admin:
        raise CannotDeactivateAdmin()
    if account.is_active == active:
        return account

    account.is_active = active
    await session.flush()
    await audit.record(
        session,
        admin_id=admin.id,
        action=ActionType.ACTIVATE_USER if active else ActionType.DEACTIVATE_USER,
        title="Account activated" if active else "Account deactivated",
        description=f"Account {account.username} {'activated' if active else 'deactivated'}",
        affected_entity_id=account.id,
        affected_entity_type=ACCOUNT_ENTITY,
        affected_account_id=account.id,
    )
    return account


async def delete_account(session: AsyncSession, actor: Actor, account_id: uuid.UUID) -> None:
    """Remove an account and everything it owns in the caller's transaction."""
    if actor.id != account_id and not actor.is_admin:
        raise Forbidden("You can only delete your own account.")
    account = await get_account(session, account_id)
    was_admin = account.is_admin
    if was_admin and account.is_active and await lock_active_admins(session) <= 1:
        raise LastAdminDeletion()

    post_ids = (
        await session.execute(sa.select(Post.post_id).where(Post.author_id == account_id))
    ).scalars().all()
    for post_id in post_ids:
        await delete_post_cascade(session, post_id)

    await session.execute(sa.delete(Comment).where(Comment.author_id == account_id))
    await session.execute(sa.delete(Reaction).where(Reaction.account_id == account_id))
    await session.execute(sa.delete(Report).where(Report.reporter_id == account_id))
    await session.execute(
        sa.delete(Follow).where(
            sa.or_(Follow.follower_id == account_id, Follow.following_id == account_id)
        )
    )
    await session.execute(sa.delete(Notification).where(Notification.recipient_id == account_id))
    username = account.username
    await session.delete(account)
    await session.flush()
    logger.info("Account %s deleted by %s (%d posts removed)", account_id, actor.id, len(post_ids))

    if actor.id != account_id:
        await audit.record(
            session,
            admin_id=actor.id,
            action=ActionType.DELETE_ADMIN if was_admin else ActionType.DELETE_USER,
            title="Administrator deleted" if was_admin else "Account deleted",
            description=f"Account {username} deleted with {len(post_ids)} post(s)",
            affected_entity_id=account_id,
            affected_entity_type=ACCOUNT_ENTITY,
            affected_account_id=account_id,
        )


# ── Admin queries ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DashboardStats:
    total_accounts: int
    active_accounts: int
    inactive_accounts: int
    total_posts: int
    pending_reports: int
    resolved_reports: int
    rejected_reports: int


async def list_accounts(
    session: AsyncSession,
    admin: Actor,
    *,
    page: int,
    size: int,
    role: AccountRole | None = None,
    is_active: bool | None = None,
    search: str | None = None,
) -> tuple[list[Account], int]:
    """Every account, newest first, with optional filters."""
    if not admin.is_admin:
        raise AdminRequired()
    filters = []
    if role is not None:
        filters.append(Account.role == role)
    if is_active is not None:
        filters.append(Account.is_active.is_(is_active))
    if search and search.strip():
        filters.append(_matches(search))
    return await _paged_accounts(
        session, filters, page=page, size=size, order_by=(Account.created_at.desc(), Account.id)
    )


async def dashboard_stats(session: AsyncSession, admin: Actor) -> DashboardStats:
    if not admin.is_admin:
        raise AdminRequired()
    rows = await session.execute(
        sa.select(Account.is_active, sa.func.count()).group_by(Account.is_active)
    )
    by_active = {bool(flag): count for flag, count in rows.all()}
    active, inactive = by_active.get(True, 0), by_active.get(False, 0)
    posts = (await session.execute(sa.select(sa.func.count()).select_from(Post))).scalar_one()
    reports = await report_counts(session, admin)
    return DashboardStats(
        total_accounts=active + inactive,
        active_accounts=active,
        inactive_accounts=inactive,
        total_posts=posts,
        pending_reports=reports.pending,
        resolved_reports=reports.resolved,
        rejected_reports=reports.rejected,
    )
