"""Archive analytics: summary and daily velocity over a date window.

All day boundaries and day keys are computed in UTC, so results do not depend on the
server's local clock.
"""

import json
import logging
from collections.abc import Sequence
from datetime import date, datetime, time, timedelta, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import AuthorizationError
from app.models import ArchivedStory
from app.models.base import utcnow
from app.schemas.archive import (
    AnalyticsRange,
    ArchiveAnalyticsResponse,
    ArchivedStoryOut,
    ArchiveSummary,
    VelocityPoint,
)
from app.services.authorization import can_view_analytics

if TYPE_CHECKING:
    from app.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

_DAY_START = time(0, 0, 0, 0)
_DAY_END = time(23, 59, 59, 999999)
_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def _as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (as returned by some drivers) or convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """ISO 8601 in UTC with millisecond precision and a Z suffix."""
    return _as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_date_param(value: str | None) -> datetime | None:
    """
    Parse an ISO date (YYYY-MM-DD) or datetime query value into an aware UTC datetime.

    Returns None for missing or unparseable values so callers fall back to defaults.
    """
    if value is None or not value.strip():
        return None
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed = datetime.combine(date.fromisoformat(text), _DAY_START)
        except ValueError:
            logger.debug("Ignoring unparseable date parameter %r", text)
            return None
    try:
        return _as_utc(parsed)
    except OverflowError:
        # Offset pushes the instant outside the representable range.
        logger.debug("Ignoring out-of-range date parameter %r", text)
        return None


def resolve_window(
    date_from: datetime | None,
    date_to: datetime | None,
    now: datetime,
    default_days: int | None = None,
) -> tuple[datetime, datetime]:
    """
    Resolve the inclusive [start, end] window for archive queries.

    to defaults to now, from to `to - default_days` days (no earlier than the first
    representable day); reversed bounds are swapped.
    The result is widened to whole UTC days: start at 00:00:00.000000, end at
    23:59:59.999999.
    """
    if default_days is None:
        default_days = get_settings().ANALYTICS_DEFAULT_WINDOW_DAYS
    end = _as_utc(date_to) if date_to is not None else _as_utc(now)
    if date_from is not None:
        start = _as_utc(date_from)
    elif end - _EARLIEST > timedelta(days=default_days):
        start = end - timedelta(days=default_days)
    else:
        start = _EARLIEST
    if start > end:
        start, end = end, start
    start = datetime.combine(start.date(), _DAY_START, tzinfo=timezone.utc)
    end = datetime.combine(end.date(), _DAY_END, tzinfo=timezone.utc)
    return start, end


def parse_tasks_snapshot(raw: Any) -> list[dict[str, Any]]:
    """
    Decode a stored task snapshot into a list of task dicts.

    Accepts a list or a JSON-encoded list; non-object entries are dropped. Anything else
    degrades to an empty list so one bad row never fails the whole report.
    """
    if raw is None:
        return []
    value = raw
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            value = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Malformed task snapshot; treating as empty")
            return []
    if not isinstance(value, list):
        logger.warning(
            "Task snapshot is not a list; treating as empty",
            extra={"snapshot_type": type(value).__name__},
        )
        return []
    return [task for task in value if isinstance(task, dict)]


def to_archived_story_out(row: ArchivedStory) -> ArchivedStoryOut:
    return ArchivedStoryOut(
        id=row.id,
        original_id=row.original_story_id,
        title=row.title,
        description=row.description,
        estimate=int(row.estimate or 0),
        status=row.status,
        owner_id=row.owner_id,
        owner_name=row.owner_name,
        tasks=parse_tasks_snapshot(row.tasks_snapshot),
        completed_at=_as_utc(row.completed_at),
    )


def build_summary(stories: Sequence[ArchivedStoryOut]) -> ArchiveSummary:
    """Fold archive rows into story, point and task totals plus distinct owner count."""
    summary = ArchiveSummary()
    owners: set[str] = set()
    for story in stories:
        summary.total_stories += 1
        summary.total_points += story.estimate
        summary.total_tasks += len(story.tasks)
        summary.done_tasks += sum(1 for task in story.tasks if task.get("done"))
        if story.owner_name:
            owners.add(story.owner_name)
    summary.owner_count = len(owners)
    return summary


def build_velocity(stories: Sequence[ArchivedStoryOut]) -> list[VelocityPoint]:
    """Group archive rows by UTC completion day; buckets ascend by date."""
    buckets: dict[str, VelocityPoint] = {}
    for story in stories:
        key = _as_utc(story.completed_at).date().isoformat()
        point = buckets.get(key)
        if point is None:
            point = buckets[key] = VelocityPoint(date=key)
        point.stories += 1
        point.points += story.estimate
    # ISO dates sort chronologically as strings.
    return [buckets[key] for key in sorted(buckets)]


def fetch_archived_stories(
    session: Session, start: datetime, end: datetime
) -> list[ArchivedStory]:
    """Archive rows completed within [start, end], most recent first."""
    return (
        session.query(ArchivedStory)
        .filter(ArchivedStory.completed_at >= start, ArchivedStory.completed_at <= end)
        .order_by(ArchivedStory.completed_at.desc(), ArchivedStory.id.desc())
        .all()
    )


def summarize_archive(
    session: Session,
    actor: "CurrentUser | None",
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    now: datetime | None = None,
) -> ArchiveAnalyticsResponse:
    """
    Build the archive report for a window: range, summary, velocity and detail rows.

    Requires a privileged actor.
    """
    if not can_view_analytics(actor):
        raise AuthorizationError("not allowed to view analytics")

    start, end = resolve_window(date_from, date_to, now or utcnow())
    stories = [to_archived_story_out(row) for row in fetch_archived_stories(session, start, end)]

    return ArchiveAnalyticsResponse(
        range=AnalyticsRange(from_=format_timestamp(start), to=format_timestamp(end)),
        summary=build_summary(stories),
        velocity=build_velocity(stories),
        stories=stories,
    )
