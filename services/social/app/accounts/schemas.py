"""
Accounts domain — Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import AccountRole, Visibility


class _Base(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


# ── Requests ───────────────────────────────────────────────────────────────────

class RegisterAccountRequest(_Base):
    username: str = Field(
        ..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.]+$",
        description="Unique handle (letters, digits, '_' and '.')",
    )
    display_name: str = Field(..., min_length=1, max_length=100)
    visibility: Visibility = Field(Visibility.PUBLIC, description="Profile visibility")


class UpdateProfileRequest(_Base):
    display_name: str = Field(..., min_length=1, max_length=100)


class UpdateVisibilityRequest(_Base):
    visibility: Visibility


class ChangeRoleRequest(_Base):
    role: AccountRole = Field(..., description="Promotion to ADMIN forces the profile PRIVATE")


class SetActiveRequest(_Base):
    active: bool


# ── Responses ──────────────────────────────────────────────────────────────────

class AccountRef(BaseModel):
    """Minimal account embedded in list items."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    display_name: str
    visibility: Visibility


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    display_name: str
    role: AccountRole
    visibility: Visibility
    is_active: bool
    created_at: datetime


class DashboardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_accounts: int
    active_accounts: int
    inactive_accounts: int
    total_posts: int
    pending_reports: int
    resolved_reports: int
    rejected_reports: int
