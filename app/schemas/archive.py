"""Pydantic schemas for archive records and archive analytics."""

from datetime import datetime
from typing import Any

from pydantic import Field

from app.schemas.base import CamelModel


class ArchiveResponse(CamelModel):
    """Response for POST /stories/{id}/complete."""

    archived_id: int


class ArchivedStoryOut(CamelModel):
    """Archive row with its task snapshot decoded."""

    id: int
    original_id: int
    title: str
    description: str | None = None
    estimate: int
    status: str
    owner_id: int | None = None
    owner_name: str | None = None
    tasks: list[dict[str, Any]] = Field(default_factory=list)
    completed_at: datetime


class AnalyticsRange(CamelModel):
    """Effective query window after defaults, swapping and day widening (UTC, ISO 8601)."""

    from_: str = Field(..., alias="from")
    to: str


class ArchiveSummary(CamelModel):
    total_stories: int = 0
    total_points: int = 0
    total_tasks: int = 0
    done_tasks: int = 0
    owner_count: int = 0


class VelocityPoint(CamelModel):
    """Stories archived on one UTC calendar day."""

    date: str = Field(..., description="YYYY-MM-DD")
    stories: int = 0
    points: int = 0


class ArchiveAnalyticsResponse(CamelModel):
    """Response for GET /analytics/archive."""

    range: AnalyticsRange
    summary: ArchiveSummary
    velocity: list[VelocityPoint]
    stories: list[ArchivedStoryOut]
