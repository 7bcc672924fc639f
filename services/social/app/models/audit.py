import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from app.models.enums import ActionType, enum_column
from shared.database.postgres import Base


class AuditEntry(Base):
    """Append-only record of a privileged action.

    Ids are stored without foreign keys so entries outlive the accounts,
    posts and reports they describe.
    """

    __tablename__ = "audit_entries"

    entry_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    admin_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, nullable=False)
    action: Mapped[ActionType] = mapped_column(enum_column(ActionType, "actiontype"), nullable=False)
    title: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    description: Mapped[str] = mapped_column(sa.Text, nullable=False)
    affected_entity_id: Mapped[uuid.UUID | None] = mapped_column(sa.Uuid, nullable=True)
    affected_entity_type: Mapped[str | None] = mapped_column(sa.String(50), nullable=True)
    affected_account_id: Mapped[uuid.UUID | None] = mapped_column(sa.Uuid, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        sa.Index("ix_audit_entries_created_at", "created_at"),
        sa.Index("ix_audit_entries_action", "action"),
        sa.Index("ix_audit_entries_affected_account_id", "affected_account_id"),
    )
