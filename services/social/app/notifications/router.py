from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_actor
from app.notifications import controller
from app.notifications.schemas import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from app.pagination import PageParams, page_params
from app.visibility.policy import Actor

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get(
    "",
    response_model=NotificationListResponse,
    summary="List my notifications",
    description="Newest first. Set `unread=true` to return only unread notifications.",
)
async def list_notifications(
    unread: bool = Query(False, description="Only unread notifications"),
    paging: PageParams = Depends(page_params),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> NotificationListResponse:
    return await controller.list_notifications(
        actor.id, db, page=paging.page, size=paging.size, only_unread=unread
    )


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Unread count")
async def unread_count(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> UnreadCountResponse:
    return await controller.unread_count(actor.id, db)


@router.post(
    "/read-all",
    response_model=MarkAllReadResponse,
    summary="Mark all my notifications as read",
)
async def mark_all_read(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> MarkAllReadResponse:
    return await controller.mark_all_read(actor.id, db)


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark one notification as read",
    responses={
        403: {"description": "Notification belongs to another account"},
        404: {"description": "Notification not found"},
    },
)
async def mark_read(
    notification_id: UUID,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> NotificationResponse:
    return await controller.mark_read(actor.id, notification_id, db)
