"""Reactions controller — orchestration layer between router and service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import ReactionKind
from app.pagination import OffsetPage
from app.reactions import service
from app.reactions.schemas import ReactionResponse, ReactionSummaryResponse, ToggleResponse
from app.visibility.policy import Actor


async def toggle(post_id: UUID, kind: ReactionKind, actor: Actor, db: AsyncSession) -> ToggleResponse:
    result = await service.react(db, actor, post_id, kind)
    return ToggleResponse(
        outcome=result.outcome,
        reaction=ReactionResponse.model_validate(result.reaction) if result.reaction else None,
    )


async def remove(post_id: UUID, actor: Actor, db: AsyncSession) -> None:
    await service.remove_reaction(db, actor, post_id)


async def list_reactions(
    post_id: UUID, actor: Actor, db: AsyncSession, page: int, size: int
) -> OffsetPage[ReactionResponse]:
    reactions, total = await service.list_reactions(
        db, actor, post_id, limit=size, offset=(page - 1) * size
    )
    return OffsetPage[ReactionResponse].build(
        items=[ReactionResponse.model_validate(r) for r in reactions],
        total=total,
        page=page,
        size=size,
    )


async def summary(post_id: UUID, actor: Actor, db: AsyncSession) -> ReactionSummaryResponse:
    counts = await service.summary(db, actor, post_id)
    mine = await service.my_reaction(db, actor, post_id)
    return ReactionSummaryResponse(
        post_id=post_id,
        total=sum(counts.values()),
        counts=counts,
        my_reaction=mine.kind if mine else None,
    )
