from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_actor
from app.pagination import OffsetPage, PageParams, page_params
from app.reactions import controller
from app.reactions.schemas import (
    ReactionResponse,
    ReactionSummaryResponse,
    ReactRequest,
    ToggleResponse,
)
from app.visibility.policy import Actor

router = APIRouter(prefix="/posts/{post_id}/reactions", tags=["Reactions"])


@router.post(
    "",
    response_model=ToggleResponse,
    summary="Toggle a reaction",
    description=(
        "No reaction yet: creates it and notifies the author. Same kind again: removes it. "
        "Different kind: replaces the kind in place."
    ),
    responses={
        403: {"description": "You cannot interact with this post"},
        404: {"description": "Post not found"},
        409: {"description": "Concurrent reaction for the same post"},
    },
)
async def toggle_reaction(
    post_id: UUID,
    body: ReactRequest,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ToggleResponse:
    return await controller.toggle(post_id, body.kind, actor, db)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove my reaction",
    responses={404: {"description": "Post not found or no reaction to remove"}},
)
async def remove_reaction(
    post_id: UUID,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> None:
    await controller.remove(post_id, actor, db)


@router.get(
    "",
    response_model=OffsetPage[ReactionResponse],
    summary="List reactions on a post",
)
async def list_reactions(
    post_id: UUID,
    paging: PageParams = Depends(page_params),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> OffsetPage[ReactionResponse]:
    return await controller.list_reactions(post_id, actor, db, paging.page, paging.size)


@router.get(
    "/summary",
    response_model=ReactionSummaryResponse,
    summary="Reaction counts per kind",
)
async def reaction_summary(
    post_id: UUID,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ReactionSummaryResponse:
    return await controller.summary(post_id, actor, db)
