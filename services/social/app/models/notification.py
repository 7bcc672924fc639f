import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from app.models.enums import NotificationType, enum_column
from shared.database.postgres import Base


class Notification(Base):
    __tablename__ = "notifications"

    notification_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, primary_key=True, default=uuid.uuid4
    )
    recipient_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[NotificationType] = mapped_column(
        enum_column(NotificationType, "notificationtype"), nullable=False
    )
    title: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    body: Mapped[str] = mapped_column(sa.Text, nullable=False)
    # Optional pointer to the source entity (post, comment, report, account)
    reference_id: Mapped[uuid.UUID | None] = mapped_column(sa.Uuid, nullable=True)
    reference_type: Mapped[str | None] = mapped_column(sa.String(50), nullable=True)
    is_read: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        sa.Index("ix_notifications_recipient_created_at", "recipient_id", "created_at"),
        sa.Index("ix_notifications_recipient_is_read", "recipient_id", "is_read"),
    )
