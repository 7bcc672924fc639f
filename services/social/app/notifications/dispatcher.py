"""
Notification sink used by every domain that emits side-effect messages.

Delivery is best-effort: each write runs inside a SAVEPOINT so a failure is
logged and discarded without rolling back the triggering transaction.
"""
from __future__ import annotations

import logging
import uuid

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.account import Account
from app.models.enums import AccountRole, NotificationType
from app.models.notification import Notification

logger = logging.getLogger(__name__)

# Admin fan-out is a single bounded batch. It grows linearly with the number of
# administrators and is not meant for more than a small moderation team.
ADMIN_FANOUT_LIMIT = 100


async def notify(
    session: AsyncSession,
    recipient_id: uuid.UUID,
    title: str,
    body: str,
    type_: NotificationType,
    reference_id: uuid.UUID | None = None,
    reference_type: str | None = None,
) -> Notification | None:
    notification = Notification(
        recipient_id=recipient_id,
        type=type_,
        title=title,
        body=body,
        reference_id=reference_id,
        reference_type=reference_type,
        is_read=False,
    )
    try:
        async with session.begin_nested():
            session.add(notification)
    except SQLAlchemyError:
        logger.warning(
            "Notification delivery failed (recipient=%s type=%s)",
            recipient_id,
            type_.value,
            exc_info=True,
        )
        return None
    return notification


async def active_admin_ids(session: AsyncSession, limit: int = ADMIN_FANOUT_LIMIT) -> list[uuid.UUID]:
    result = await session.execute(
        sa.select(Account.id)
        .where(Account.role == AccountRole.ADMIN, Account.is_active.is_(True))
        .order_by(Account.created_at)
        .limit(limit)
    )
    return list(result.scalars().all())


async def notify_admins(
    session: AsyncSession,
    title: str,
    body: str,
    type_: NotificationType,
    reference_id: uuid.UUID | None = None,
    reference_type: str | None = None,
) -> int:
    """Notify every active administrator in one batch. Returns the number notified."""
    admin_ids = await active_admin_ids(session)
    if len(admin_ids) >= ADMIN_FANOUT_LIMIT:
        logger.warning(
            "Admin fan-out capped at %d recipients; remaining admins were not notified",
            ADMIN_FANOUT_LIMIT,
        )
    if not admin_ids:
        return 0
    batch = [
        Notification(
            recipient_id=admin_id,
            type=type_,
            title=title,
            body=body,
            reference_id=reference_id,
            reference_type=reference_type,
            is_read=False,
        )
        for admin_id in admin_ids
    ]
    try:
        async with session.begin_nested():
            session.add_all(batch)
    except SQLAlchemyError:
        logger.warning("Admin notification batch failed (%d recipients)", len(batch), exc_info=True)
        return 0
    return len(batch)
