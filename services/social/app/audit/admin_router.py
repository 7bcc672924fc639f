"""
Audit log — admin-facing read routes. The log has no write or delete API.

Routes:
  GET /api/v1/admin/audit   Audit entries (newest first, filter by action / affected account)
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.audit import service as svc
from app.audit.schemas import AuditEntryListResponse, AuditEntryResponse
from app.database import get_db
from app.dependencies import require_admin
from app.models.enums import ActionType
from app.pagination import PageParams, page_params
from app.visibility.policy import Actor

router = APIRouter(prefix="/admin/audit", tags=["admin-audit"])


@router.get(
    "",
    response_model=AuditEntryListResponse,
    summary="[Admin] List audit entries",
)
async def list_audit_entries(
    action: ActionType | None = Query(None, description="Filter by action type"),
    affected_account_id: uuid.UUID | None = Query(None, description="Filter by affected account"),
    paging: PageParams = Depends(page_params),
    admin: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> AuditEntryListResponse:
    entries, total = await svc.list_entries(
        session,
        action=action,
        affected_account_id=affected_account_id,
        page=paging.page,
        size=paging.size,
    )
    return AuditEntryListResponse(
        items=[AuditEntryResponse.model_validate(e) for e in entries],
        total=total,
        page=paging.page,
        size=paging.size,
    )
