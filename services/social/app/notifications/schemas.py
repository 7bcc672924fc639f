from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import NotificationType


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    notification_id: UUID
    type: NotificationType
    title: str
    body: str
    reference_id: UUID | None = Field(description="Source entity id, when there is one.")
    reference_type: str | None = Field(description="Source entity kind: posts, reports, accounts.")
    is_read: bool
    created_at: datetime


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]
    total: int
    unread_count: int
    page: int
    size: int


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    updated: int = Field(description="Number of notifications flipped to read.")
