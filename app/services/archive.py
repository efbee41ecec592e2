"""Archive transition: turn a live story into an immutable archive record.

The archive insert and the removal of the live story (and its tasks) run in one
transaction. The story delete is conditional on its row still existing, so when two
requests race to archive the same story only one archive record survives.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import ArchiveTransitionError, AuthorizationError, NotFoundError
from app.models import ArchivedStory, Story, StoryTask
from app.models.base import utcnow
from app.services.authorization import can_archive_story
from app.services.story_board import get_story

if TYPE_CHECKING:
    from app.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

ARCHIVED_STATUS = "done"


def _isoformat(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def build_tasks_snapshot(tasks: Iterable[StoryTask]) -> list[dict[str, Any]]:
    """Copy tasks into plain JSON-ready dicts, preserving order."""
    return [
        {
            "id": task.id,
            "title": task.title,
            "done": bool(task.done),
            "createdAt": _isoformat(task.created_at),
        }
        for task in tasks
    ]


def build_archived_story(story: Story, completed_at: datetime) -> ArchivedStory:
    """Snapshot a live story. Status is forced to done whatever the story's current status."""
    return ArchivedStory(
        original_story_id=story.id,
        title=story.title,
        description=story.description,
        estimate=story.estimate,
        status=ARCHIVED_STATUS,
        owner_id=story.owner_id,
        owner_name=story.owner_name,
        tasks_snapshot=build_tasks_snapshot(story.tasks),
        completed_at=completed_at,
    )


def archive_story(
    session: Session,
    story_id: int,
    actor: "CurrentUser | None",
    now: datetime | None = None,
) -> ArchivedStory:
    """
    Archive a live story and remove it from the board.

    Raises AuthorizationError for non-privileged actors, NotFoundError when the story is
    absent (including when a concurrent request removed it first), and
    ArchiveTransitionError when the transaction could not be committed; in that case
    neither the archive record nor the deletion is kept.
    """
    if not can_archive_story(actor):
        raise AuthorizationError("not allowed to archive stories")

    story = get_story(session, story_id)
    record = build_archived_story(story, completed_at=now or utcnow())

    try:
        session.add(record)
        session.flush()
        session.query(StoryTask).filter(StoryTask.story_id == story_id).delete(
            synchronize_session=False
        )
        removed = (
            session.query(Story)
            .filter(Story.id == story_id)
            .delete(synchronize_session=False)
        )
        if removed != 1:
            session.rollback()
            raise NotFoundError("story not found")
        # Rows were removed in bulk; drop the stale instances (and their tasks).
        session.expunge(story)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(
            "Archive transition failed",
            extra={"story_id": story_id, "reason": str(e)[:500]},
        )
        raise ArchiveTransitionError(
            "archive failed; the story was left on the board"
        ) from e

    logger.info(
        "Story archived",
        extra={"story_id": story_id, "archived_id": record.id, "actor_id": actor.id},
    )
    return record


def delete_archived_story(
    session: Session, archive_id: int, actor: "CurrentUser | None"
) -> None:
    """Remove one archive record. The original story is not restored."""
    if not can_archive_story(actor):
        raise AuthorizationError("not allowed to delete archived stories")
    deleted = (
        session.query(ArchivedStory)
        .filter(ArchivedStory.id == archive_id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        session.rollback()
        raise NotFoundError("archived story not found")
    session.commit()
    logger.info(
        "Archived story deleted",
        extra={"archived_id": archive_id, "actor_id": actor.id},
    )
