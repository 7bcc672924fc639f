import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from app.models.enums import ReportStatus, enum_column
from shared.database.postgres import Base


class Report(Base):
    """A reporter's complaint against a post.

    ``post_id`` is cleared when the post is removed; ``post_author_id`` keeps
    the account that was acted upon so the audit trail stays meaningful.
    """

    __tablename__ = "reports"

    report_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    reporter_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )
    post_id: Mapped[uuid.UUID | None] = mapped_column(
        sa.Uuid, sa.ForeignKey("posts.post_id", ondelete="SET NULL"), nullable=True
    )
    post_author_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, nullable=False)
    reason: Mapped[str] = mapped_column(sa.Text, nullable=False)
    status: Mapped[ReportStatus] = mapped_column(
        enum_column(ReportStatus, "reportstatus"),
        nullable=False,
        default=ReportStatus.PENDING,
    )
    admin_comment: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(sa.Uuid, nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        sa.UniqueConstraint("reporter_id", "post_id", name="uq_reports_reporter_post"),
        sa.Index("ix_reports_status_created_at", "status", "created_at"),
        sa.Index("ix_reports_post_id", "post_id"),
    )
