"""
Moderation domain — Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import enum
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import ReportStatus


class ReviewDecision(str, enum.Enum):
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"

    @property
    def status(self) -> ReportStatus:
        return ReportStatus(self.value)


class CreateReportRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    reason: str = Field(..., min_length=3, max_length=1000, description="Why this post is reported")


class ReviewReportRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    decision: ReviewDecision = Field(
        ..., description="RESOLVED removes the post with its comments and reactions"
    )
    admin_comment: str | None = Field(None, max_length=1000)


class ReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    report_id: uuid.UUID
    reporter_id: uuid.UUID
    post_id: uuid.UUID | None = Field(description="Null once the post has been removed")
    post_author_id: uuid.UUID
    reason: str
    status: ReportStatus
    admin_comment: str | None
    reviewed_by: uuid.UUID | None
    reviewed_at: datetime | None
    created_at: datetime


class ReviewResultResponse(BaseModel):
    report: ReportResponse
    post_removed: bool
    comments_removed: int = 0
    reactions_removed: int = 0


class ReportCountsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pending: int
    resolved: int
    rejected: int
