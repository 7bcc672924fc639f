import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.models.enums import ActionType


class AuditEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    entry_id: uuid.UUID
    admin_id: uuid.UUID
    action: ActionType
    title: str
    description: str
    affected_entity_id: uuid.UUID | None
    affected_entity_type: str | None
    affected_account_id: uuid.UUID | None
    created_at: datetime


class AuditEntryListResponse(BaseModel):
    items: list[AuditEntryResponse]
    total: int
    page: int
    size: int
