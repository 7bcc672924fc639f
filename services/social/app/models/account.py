import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from app.models.enums import AccountRole, Visibility, enum_column
from shared.database.postgres import Base


class Account(Base):
    """Social profile of an identity. ``id`` equals the JWT subject."""

    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    display_name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    role: Mapped[AccountRole] = mapped_column(
        enum_column(AccountRole, "accountrole"), nullable=False, default=AccountRole.USER
    )
    visibility: Mapped[Visibility] = mapped_column(
        enum_column(Visibility, "accountvisibility"),
        nullable=False,
        default=Visibility.PUBLIC,
    )
    is_active: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        sa.UniqueConstraint("username", name="uq_accounts_username"),
        sa.CheckConstraint(
            "role != 'ADMIN' OR visibility = 'PRIVATE'",
            name="ck_accounts_admin_private",
        ),
        sa.Index("ix_accounts_role_active", "role", "is_active"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN
