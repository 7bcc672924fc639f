from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotificationNotFound, NotNotificationRecipient
from app.models.notification import Notification


async def list_notifications(
    user_id: UUID,
    db: AsyncSession,
    limit: int,
    offset: int,
    only_unread: bool,
) -> tuple[list[Notification], int]:
    base = select(Notification).where(Notification.recipient_id == user_id)
    if only_unread:
        base = base.where(Notification.is_read.is_(False))

    count_query = select(func.count()).select_from(base.subquery())
    total = (await db.execute(count_query)).scalar_one()

    rows = await db.execute(
        base.order_by(Notification.created_at.desc(), Notification.notification_id.desc())
        .offset(offset)
        .limit(limit)
    )
    items = list(rows.scalars().all())
    return items, total


async def count_unread(user_id: UUID, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(Notification)
        .where(Notification.recipient_id == user_id, Notification.is_read.is_(False))
    )
    return result.scalar_one()


async def mark_all_read(user_id: UUID, db: AsyncSession) -> int:
    result = await db.execute(
        update(Notification)
        .where(Notification.recipient_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session="evaluate")
    )
    return result.rowcount or 0


async def mark_read(user_id: UUID, notification_id: UUID, db: AsyncSession) -> Notification:
    """Flip one notification to read. Only its recipient may do so."""
    notification = await db.get(Notification, notification_id)
    if notification is None:
        raise NotificationNotFound()
    if notification.recipient_id != user_id:
        raise NotNotificationRecipient()
    notification.is_read = True
    await db.flush()
    return notification
