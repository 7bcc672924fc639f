import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from app.models.enums import Visibility, enum_column
from shared.database.postgres import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    __tablename__ = "posts"

    post_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    author_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, sa.ForeignKey("accounts.id"), nullable=False
    )
    content: Mapped[str] = mapped_column(sa.Text, nullable=False)
    # Independent of the author's account visibility
    visibility: Mapped[Visibility] = mapped_column(
        enum_column(Visibility, "postvisibility"), nullable=False, default=Visibility.PUBLIC
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now, onupdate=_now
    )

    __table_args__ = (
        # Keyset pagination order: created_at DESC, post_id DESC
        sa.Index("ix_posts_created_at_post_id", "created_at", "post_id"),
        sa.Index("ix_posts_author_created_at", "author_id", "created_at"),
    )
