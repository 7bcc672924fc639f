import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from app.models.enums import ReactionKind, enum_column
from shared.database.postgres import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Reaction(Base):
    __tablename__ = "reactions"

    reaction_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    post_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, sa.ForeignKey("posts.post_id"), nullable=False
    )
    account_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, sa.ForeignKey("accounts.id"), nullable=False
    )
    kind: Mapped[ReactionKind] = mapped_column(
        enum_column(ReactionKind, "reactionkind"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now, onupdate=_now
    )

    __table_args__ = (
        # One reaction per (account, post); the toggle logic relies on this under races
        sa.UniqueConstraint("account_id", "post_id", name="uq_reactions_account_post"),
        sa.Index("ix_reactions_post_id", "post_id"),
    )
