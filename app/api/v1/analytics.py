"""Archive analytics endpoint: summary and daily velocity of completed stories."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.schemas.archive import ArchiveAnalyticsResponse
from app.schemas.auth import CurrentUser
from app.services.analytics import parse_date_param, summarize_archive

router = APIRouter()


@router.get("/archive", response_model=ArchiveAnalyticsResponse)
def get_archive_analytics(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    date_from: Annotated[str | None, Query(alias="from")] = None,
    date_to: Annotated[str | None, Query(alias="to")] = None,
) -> ArchiveAnalyticsResponse:
    """
    Report on stories archived between `from` and `to` (ISO dates, UTC, inclusive).

    `to` defaults to today and `from` to 29 days before `to`; reversed bounds are
    swapped and both are widened to whole days. Unparseable values fall back to the
    defaults. Returns the effective range, totals (stories, points, tasks, done tasks,
    distinct owners), per-day velocity ascending by date, and the archived stories
    newest first. Manager/admin only.
    """
    return summarize_archive(
        db,
        user,
        date_from=parse_date_param(date_from),
        date_to=parse_date_param(date_to),
    )
