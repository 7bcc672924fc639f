"""
Moderation domain — user-facing routes.

Routes:
  POST   /posts/{post_id}/reports     Report a post  (10/hour rate limit)
  GET    /reports/me                  Reports I filed (paginated, newest first)
  GET    /reports/{report_id}         A report (reporter or administrator)
"""

import uuid

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_actor
from app.moderation import controller as ctrl
from app.moderation.schemas import CreateReportRequest, ReportResponse
from app.pagination import OffsetPage, PageParams, page_params
from app.rate_limit import limiter
from app.visibility.policy import Actor

router = APIRouter(tags=["moderation"])


@router.post(
    "/posts/{post_id}/reports",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report a post",
    description=(
        "Files a PENDING report and notifies the administrators. "
        "Rate-limited to 10 reports per hour."
    ),
    responses={
        404: {"description": "Post not found"},
        409: {"description": "You already reported this post"},
        422: {"description": "You cannot report your own post"},
    },
)
@limiter.limit("10/hour")
async def report_post(
    request: Request,
    post_id: uuid.UUID,
    body: CreateReportRequest,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> ReportResponse:
    return await ctrl.create_report(session, actor, post_id, body)


@router.get("/reports/me", response_model=OffsetPage[ReportResponse], summary="My reports")
async def my_reports(
    paging: PageParams = Depends(page_params),
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> OffsetPage[ReportResponse]:
    return await ctrl.list_my_reports(session, actor, paging.page, paging.size)


@router.get(
    "/reports/{report_id}",
    response_model=ReportResponse,
    summary="Get a report",
    responses={403: {"description": "Not the reporter"}, 404: {"description": "Report not found"}},
)
async def get_report(
    report_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> ReportResponse:
    return await ctrl.get_report(session, actor, report_id)
