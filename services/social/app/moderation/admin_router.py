"""
Moderation domain — admin-facing routes.

Routes:
  GET   /api/v1/admin/reports                        Review queue (filterable by status, oldest first)
  GET   /api/v1/admin/reports/counts                 Pending / resolved / rejected totals
  GET   /api/v1/admin/reports/by-post/{post_id}      Reports against one post
  PATCH /api/v1/admin/reports/{report_id}/review     Resolve (removes the post) or reject

Requires: ADMIN role.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import require_admin
from app.models.enums import ReportStatus
from app.moderation import controller as ctrl
from app.moderation.schemas import (
    ReportCountsResponse,
    ReportResponse,
    ReviewReportRequest,
    ReviewResultResponse,
)
from app.pagination import OffsetPage, PageParams, page_params
from app.visibility.policy import Actor

router = APIRouter(prefix="/admin/reports", tags=["admin-moderation"])


@router.get(
    "",
    response_model=OffsetPage[ReportResponse],
    summary="[Admin] List reports",
    description="Optionally filter by status. Results are ordered oldest-first (FIFO review queue).",
)
async def list_reports(
    status: ReportStatus | None = Query(None, description="Filter by report status"),
    paging: PageParams = Depends(page_params),
    admin: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> OffsetPage[ReportResponse]:
    return await ctrl.admin_list_reports(
        session, admin, status_filter=status, page=paging.page, size=paging.size
    )


@router.get(
    "/counts",
    response_model=ReportCountsResponse,
    summary="[Admin] Report totals by status",
)
async def report_counts(
    admin: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> ReportCountsResponse:
    return await ctrl.admin_report_counts(session, admin)


@router.get(
    "/by-post/{post_id}",
    response_model=OffsetPage[ReportResponse],
    summary="[Admin] Reports against a post",
)
async def reports_for_post(
    post_id: uuid.UUID,
    paging: PageParams = Depends(page_params),
    admin: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> OffsetPage[ReportResponse]:
    return await ctrl.admin_reports_for_post(session, admin, post_id, paging.page, paging.size)


@router.patch(
    "/{report_id}/review",
    response_model=ReviewResultResponse,
    summary="[Admin] Review a report",
    description=(
        "RESOLVED deletes the post together with its comments and reactions, writes "
        "audit entries and notifies the author. REJECTED leaves content untouched. "
        "The reporter is notified either way. A report can be reviewed only once (409)."
    ),
    responses={
        404: {"description": "Report not found"},
        409: {"description": "Report already reviewed"},
        500: {"description": "Content removal could not be verified; nothing was changed"},
    },
)
async def review_report(
    report_id: uuid.UUID,
    body: ReviewReportRequest,
    admin: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> ReviewResultResponse:
    return await ctrl.admin_review_report(session, admin, report_id, body)
