"""Pagination envelopes and cursor codec.

Two strategies:
  - CursorPage: keyset on (created_at, id) for the home feed, stable under inserts
  - OffsetPage: page/size for bounded lists (followers, comments, reports, inbox)
"""

import base64
import math
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from fastapi import Query
from pydantic import BaseModel, Field

T = TypeVar("T")


class CursorPage(BaseModel, Generic[T]):
    """`next_cursor` encodes the last item's (created_at, id); pass it back as `cursor`."""

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Opaque cursor for the next page. Null when no more pages.",
    )
    has_more: bool = Field(description="True when additional pages exist.")


class OffsetPage(BaseModel, Generic[T]):
    items: list[T]
    total: int = Field(description="Total number of matching records.")
    page: int = Field(description="Current page number (1-indexed).")
    size: int = Field(description="Number of items per page.")
    pages: int = Field(description="Total number of pages.")

    @classmethod
    def build(cls, items: list[T], total: int, page: int, size: int) -> "OffsetPage[T]":
        pages = max(1, math.ceil(total / size)) if total else 1
        return cls(items=items, total=total, page=page, size=size, pages=pages)


class PageParams(BaseModel):
    page: int
    size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


def page_params(
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Items per page"),
) -> PageParams:
    return PageParams(page=page, size=size)


def encode_cursor(dt: datetime, uid: UUID) -> str:
    raw = f"{dt.isoformat()}|{uid}"
    return base64.urlsafe_b64encode(raw.encode()).decode()


def decode_cursor(cursor: str) -> tuple[datetime, UUID]:
    """Raises ValueError on malformed cursors; routes turn that into a 422."""
    try:
        raw = base64.urlsafe_b64decode(cursor.encode()).decode()
        dt_str, uid_str = raw.split("|", 1)
        return datetime.fromisoformat(dt_str), UUID(uid_str)
    except Exception as exc:
        raise ValueError(f"Invalid cursor: {exc}") from exc
