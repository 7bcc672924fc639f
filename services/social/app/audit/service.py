"""Audit log — append-only record of privileged actions."""
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import AuditEntry
from app.models.enums import ActionType


async def record(
    session: AsyncSession,
    admin_id: uuid.UUID,
    action: ActionType,
    title: str,
    description: str,
    affected_entity_id: uuid.UUID | None = None,
    affected_entity_type: str | None = None,
    affected_account_id: uuid.UUID | None = None,
) -> AuditEntry:
    entry = AuditEntry(
        admin_id=admin_id,
        action=action,
        title=title,
        description=description,
        affected_entity_id=affected_entity_id,
        affected_entity_type=affected_entity_type,
        affected_account_id=affected_account_id,
    )
    session.add(entry)
    await session.flush()
    return entry


async def list_entries(
    session: AsyncSession,
    *,
    action: ActionType | None = None,
    affected_account_id: uuid.UUID | None = None,
    page: int,
    size: int,
) -> tuple[list[AuditEntry], int]:
    base = sa.select(AuditEntry)
    if action is not None:
        base = base.where(AuditEntry.action == action)
    if affected_account_id is not None:
        base = base.where(AuditEntry.affected_account_id == affected_account_id)

    total = (
        await session.execute(sa.select(sa.func.count()).select_from(base.subquery()))
    ).scalar_one()
    rows = await session.execute(
        base.order_by(AuditEntry.created_at.desc(), AuditEntry.entry_id.desc())
        .limit(size)
        .offset((page - 1) * size)
    )
    return list(rows.scalars().all()), total
