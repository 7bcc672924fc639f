"""
Moderation domain — report lifecycle (zero FastAPI imports).

State machine (one-way, reviewed exactly once):
  PENDING ──► RESOLVED   post removed with its comments and reactions
          └─► REJECTED   no content mutation

Every review writes an audit entry attributed to the post's author and tells
the reporter the outcome.  A resolution additionally writes a DELETE_POST
entry and notifies the author that their content was removed.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.audit import service as audit
from app.exceptions import (
    AdminRequired,
    AlreadyReported,
    CannotReportOwnPost,
    Forbidden,
    InvalidOperation,
    PostNotFound,
    ReportAlreadyReviewed,
    ReportNotFound,
)
from app.models.enums import ActionType, NotificationType, ReportStatus
from app.models.post import Post
from app.models.report import Report
from app.moderation.cascade import CascadeResult, delete_post_cascade
from app.notifications.dispatcher import notify, notify_admins
from app.visibility.policy import Actor, ensure_can_view

logger = logging.getLogger(__name__)

REPORT_ENTITY = "reports"
POST_ENTITY = "posts"


@dataclass(frozen=True)
class ReportCounts:
    pending: int
    resolved: int
    rejected: int


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


# ── Create ─────────────────────────────────────────────────────────────────────

async def _report_exists(
    session: AsyncSession, reporter_id: uuid.UUID, post_id: uuid.UUID
) -> bool:
    result = await session.execute(
        sa.select(sa.exists().where(
            Report.reporter_id == reporter_id,
            Report.post_id == post_id,
        ))
    )
    return result.scalar_one()


async def create_report(
    session: AsyncSession,
    reporter: Actor,
    post_id: uuid.UUID,
    reason: str,
) -> Report:
    post = await session.get(Post, post_id)
    if post is None:
        raise PostNotFound()
    if post.author_id == reporter.id:
        raise CannotReportOwnPost()
    await ensure_can_view(session, post, reporter)
    if await _report_exists(session, reporter.id, post_id):
        raise AlreadyReported()

    report = Report(
        reporter_id=reporter.id,
        post_id=post_id,
        post_author_id=post.author_id,
        reason=reason,
        status=ReportStatus.PENDING,
    )
    try:
        async with session.begin_nested():
            session.add(report)
    except IntegrityError as exc:
        raise AlreadyReported() from exc

    await notify_admins(
        session,
        title="New pending report",
        body=f"A post was reported: {_truncate(reason, 50)}",
        type_=NotificationType.REPORT,
        reference_id=report.report_id,
        reference_type=REPORT_ENTITY,
    )
    return report


# ── Review ─────────────────────────────────────────────────────────────────────

async def review_report(
    session: AsyncSession,
    admin: Actor,
    report_id: uuid.UUID,
    decision: ReportStatus,
    admin_comment: str | None = None,
) -> tuple[Report, CascadeResult | None]:
    """Apply an admin decision to a PENDING report.

    Returns the updated report and, for RESOLVED, the cascade result (None when
    the post had already disappeared).  Runs inside the caller's transaction.
    """
    if not admin.is_admin:
        raise AdminRequired()
    if decision not in (ReportStatus.RESOLVED, ReportStatus.REJECTED):
        raise InvalidOperation("A report can only be resolved or rejected.")

    report = await session.get(Report, report_id, with_for_update=True)
    if report is None:
        raise ReportNotFound()
    if report.status != ReportStatus.PENDING:
        raise ReportAlreadyReviewed()

    reported_post_id = report.post_id
    report.status = decision
    report.reviewed_at = datetime.now(timezone.utc)
    report.reviewed_by = admin.id
    report.admin_comment = admin_comment

    resolved = decision == ReportStatus.RESOLVED
    description = f"Reason: {report.reason}"
    if admin_comment:
        description += f". Admin comment: {admin_comment}"
    await audit.record(
        session,
        admin_id=admin.id,
        action=ActionType.RESOLVE_REPORT if resolved else ActionType.REJECT_REPORT,
        title="Report resolved" if resolved else "Report rejected",
        description=description,
        affected_entity_id=report.report_id,
        affected_entity_type=REPORT_ENTITY,
        affected_account_id=report.post_author_id,
    )

    cascade: CascadeResult | None = None
    if resolved and reported_post_id is not None:
        cascade = await delete_post_cascade(session, reported_post_id)
        if cascade is not None:
            await record_post_removal(session, admin.id, cascade, reason=report.reason)

    await session.flush()
    logger.info(
        "Report %s reviewed by %s: %s (post removed: %s)",
        report.report_id,
        admin.id,
        decision.value,
        cascade is not None,
    )

    await notify(
        session,
        recipient_id=report.reporter_id,
        title="Your report was reviewed",
        body=(
            "Thanks for your report. The post was removed."
            if resolved
            else "Thanks for your report. After review, no action was taken."
        ),
        type_=NotificationType.REPORT,
        reference_id=report.report_id,
        reference_type=REPORT_ENTITY,
    )
    return report, cascade


async def record_post_removal(
    session: AsyncSession,
    admin_id: uuid.UUID,
    cascade: CascadeResult,
    *,
    reason: str | None = None,
) -> None:
    """Audit an administrative post removal and tell the author."""
    await audit.record(
        session,
        admin_id=admin_id,
        action=ActionType.DELETE_POST,
        title="Post deleted",
        description=f"Post removed by an administrator: {_truncate(cascade.content, 100)}",
        affected_entity_id=cascade.post_id,
        affected_entity_type=POST_ENTITY,
        affected_account_id=cascade.author_id,
    )
    body = "One of your posts was removed by an administrator."
    if reason:
        body += f" Reason: {_truncate(reason, 100)}"
    await notify(
        session,
        recipient_id=cascade.author_id,
        title="Your post was removed",
        body=body,
        type_=NotificationType.ADMIN_ACTION,
        reference_id=cascade.post_id,
        reference_type=POST_ENTITY,
    )


# ── Queries ────────────────────────────────────────────────────────────────────

async def get_report(session: AsyncSession, actor: Actor, report_id: uuid.UUID) -> Report:
    report = await session.get(Report, report_id)
    if report is None:
        raise ReportNotFound()
    if not actor.is_admin and report.reporter_id != actor.id:
        raise Forbidden("Only the reporter or an administrator can view this report.")
    return report


async def list_reports(
    session: AsyncSession,
    admin: Actor,
    *,
    status_filter: ReportStatus | None,
    page: int,
    size: int,
) -> tuple[list[Report], int]:
    """Admin review queue, oldest first."""
    if not admin.is_admin:
        raise AdminRequired()
    base = sa.select(Report)
    if status_filter is not None:
        base = base.where(Report.status == status_filter)
    return await _paged(session, base, page=page, size=size)


async def reports_for_post(
    session: AsyncSession,
    admin: Actor,
    post_id: uuid.UUID,
    *,
    page: int,
    size: int,
) -> tuple[list[Report], int]:
    if not admin.is_admin:
        raise AdminRequired()
    base = sa.select(Report).where(Report.post_id == post_id)
    return await _paged(session, base, page=page, size=size)


async def list_my_reports(
    session: AsyncSession,
    reporter_id: uuid.UUID,
    *,
    page: int,
    size: int,
) -> tuple[list[Report], int]:
    base = sa.select(Report).where(Report.reporter_id == reporter_id)
    return await _paged(session, base, page=page, size=size, newest_first=True)


async def report_counts(session: AsyncSession, admin: Actor) -> ReportCounts:
    if not admin.is_admin:
        raise AdminRequired()
    rows = await session.execute(
        sa.select(Report.status, sa.func.count()).group_by(Report.status)
    )
    by_status = {status: count for status, count in rows.all()}
    return ReportCounts(
        pending=by_status.get(ReportStatus.PENDING, 0),
        resolved=by_status.get(ReportStatus.RESOLVED, 0),
        rejected=by_status.get(ReportStatus.REJECTED, 0),
    )


async def _paged(
    session: AsyncSession,
    base: sa.Select,
    *,
    page: int,
    size: int,
    newest_first: bool = False,
) -> tuple[list[Report], int]:
    total = (
        await session.execute(sa.select(sa.func.count()).select_from(base.subquery()))
    ).scalar_one()
    order = (
        (Report.created_at.desc(), Report.report_id.desc())
        if newest_first
        else (Report.created_at.asc(), Report.report_id.asc())
    )
    rows = await session.execute(
        base.order_by(*order).limit(size).offset((page - 1) * size)
    )
    return list(rows.scalars().all()), total
