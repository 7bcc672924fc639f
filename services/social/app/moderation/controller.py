"""
Moderation domain — request orchestration.
"""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import ReportStatus
from app.models.report import Report
from app.moderation import service as svc
from app.moderation.schemas import (
    CreateReportRequest,
    ReportCountsResponse,
    ReportResponse,
    ReviewReportRequest,
    ReviewResultResponse,
)
from app.pagination import OffsetPage
from app.visibility.policy import Actor


def _list(items: list[Report], total: int, page: int, size: int) -> OffsetPage[ReportResponse]:
    return OffsetPage[ReportResponse].build(
        items=[ReportResponse.model_validate(r) for r in items],
        total=total,
        page=page,
        size=size,
    )


async def create_report(
    session: AsyncSession, reporter: Actor, post_id: uuid.UUID, body: CreateReportRequest
) -> ReportResponse:
    report = await svc.create_report(session, reporter, post_id, body.reason)
    return ReportResponse.model_validate(report)


async def get_report(session: AsyncSession, actor: Actor, report_id: uuid.UUID) -> ReportResponse:
    return ReportResponse.model_validate(await svc.get_report(session, actor, report_id))


async def list_my_reports(
    session: AsyncSession, actor: Actor, page: int, size: int
) -> OffsetPage[ReportResponse]:
    items, total = await svc.list_my_reports(session, actor.id, page=page, size=size)
    return _list(items, total, page, size)


async def admin_list_reports(
    session: AsyncSession,
    admin: Actor,
    *,
    status_filter: ReportStatus | None,
    page: int,
    size: int,
) -> OffsetPage[ReportResponse]:
    items, total = await svc.list_reports(
        session, admin, status_filter=status_filter, page=page, size=size
    )
    return _list(items, total, page, size)


async def admin_reports_for_post(
    session: AsyncSession, admin: Actor, post_id: uuid.UUID, page: int, size: int
) -> OffsetPage[ReportResponse]:
    items, total = await svc.reports_for_post(session, admin, post_id, page=page, size=size)
    return _list(items, total, page, size)


async def admin_report_counts(session: AsyncSession, admin: Actor) -> ReportCountsResponse:
    return ReportCountsResponse.model_validate(await svc.report_counts(session, admin))


async def admin_review_report(
    session: AsyncSession,
    admin: Actor,
    report_id: uuid.UUID,
    body: ReviewReportRequest,
) -> ReviewResultResponse:
    report, cascade = await svc.review_report(
        session, admin, report_id, body.decision.status, body.admin_comment
    )
    return ReviewResultResponse(
        report=ReportResponse.model_validate(report),
        post_removed=cascade is not None,
        comments_removed=cascade.comments_deleted if cascade else 0,
        reactions_removed=cascade.reactions_deleted if cascade else 0,
    )
