from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import ReactionKind
from app.reactions.service import ReactionOutcome


class ReactRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: ReactionKind = Field(ReactionKind.LIKE, description="Reaction kind to toggle.")


class ReactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reaction_id: UUID
    post_id: UUID
    account_id: UUID
    kind: ReactionKind
    created_at: datetime
    updated_at: datetime


class ToggleResponse(BaseModel):
    outcome: ReactionOutcome = Field(
        description="CREATED, REPLACED (kind changed) or REMOVED (same kind sent twice)."
    )
    reaction: ReactionResponse | None = Field(
        default=None, description="The current reaction. Null when it was removed."
    )


class ReactionSummaryResponse(BaseModel):
    post_id: UUID
    total: int
    counts: dict[ReactionKind, int]
    my_reaction: ReactionKind | None = None
