from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.notifications import service
from app.notifications.schemas import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)


async def list_notifications(
    user_id: UUID,
    db: AsyncSession,
    page: int,
    size: int,
    only_unread: bool,
) -> NotificationListResponse:
    items, total = await service.list_notifications(
        user_id=user_id,
        db=db,
        limit=size,
        offset=(page - 1) * size,
        only_unread=only_unread,
    )
    unread = await service.count_unread(user_id, db)
    return NotificationListResponse(
        items=[NotificationResponse.model_validate(n) for n in items],
        total=total,
        unread_count=unread,
        page=page,
        size=size,
    )


async def unread_count(user_id: UUID, db: AsyncSession) -> UnreadCountResponse:
    return UnreadCountResponse(unread_count=await service.count_unread(user_id, db))


async def mark_all_read(user_id: UUID, db: AsyncSession) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=await service.mark_all_read(user_id, db))


async def mark_read(user_id: UUID, notification_id: UUID, db: AsyncSession) -> NotificationResponse:
    notification = await service.mark_read(user_id, notification_id, db)
    return NotificationResponse.model_validate(notification)
