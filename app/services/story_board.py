"""Story board: live stories, their status and estimate, and their task lists.

Every mutation takes the acting user and checks the authorization policy before
touching the database. Input is validated before any write is attempted.
"""

import logging
import math
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session, selectinload

from app.core.errors import AuthorizationError, InputValidationError, NotFoundError
from app.models import Story, StoryTask, User
from app.schemas.story import MAX_ESTIMATE, STORY_STATUSES
from app.services.authorization import can_delete_story, can_edit_story, is_privileged

if TYPE_CHECKING:
    from app.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

DEFAULT_ESTIMATE = 1
DEFAULT_STATUS = "backlog"


def normalize_estimate(value: object) -> int:
    """
    Coerce a story-point estimate to an integer >= 1.

    Positive finite numbers (or numeric strings) are rounded half up, floored at 1
    and capped at MAX_ESTIMATE; anything else (None, booleans, non-numeric, NaN,
    infinities, <= 0) becomes 1.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_ESTIMATE
    if isinstance(value, int):
        # Ints may be too large for float().
        return min(MAX_ESTIMATE, max(DEFAULT_ESTIMATE, value))
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return DEFAULT_ESTIMATE
    if not math.isfinite(number) or number <= 0:
        return DEFAULT_ESTIMATE
    return min(MAX_ESTIMATE, max(DEFAULT_ESTIMATE, math.floor(number + 0.5)))


def _validate_status(status: object) -> str:
    if not isinstance(status, str) or status not in STORY_STATUSES:
        raise InputValidationError("invalid status")
    return status


def _validate_title(title: object, what: str = "title") -> str:
    if not isinstance(title, str) or not title.strip():
        raise InputValidationError(f"{what} required")
    return title.strip()


def list_stories(session: Session) -> list[Story]:
    """All live stories, newest first, with owner and tasks (oldest first) loaded."""
    return (
        session.query(Story)
        .options(selectinload(Story.tasks))
        .order_by(Story.created_at.desc(), Story.id.desc())
        .all()
    )


def get_story(session: Session, story_id: int) -> Story:
    """Return the live story or raise NotFoundError."""
    story = (
        session.query(Story)
        .options(selectinload(Story.tasks))
        .filter(Story.id == story_id)
        .first()
    )
    if story is None:
        raise NotFoundError("story not found")
    return story


def _get_editable_story(session: Session, story_id: int, actor: "CurrentUser | None") -> Story:
    story = get_story(session, story_id)
    if not can_edit_story(actor, story):
        raise AuthorizationError("not allowed to edit this story")
    return story


def create_story(
    session: Session,
    actor: "CurrentUser",
    title: str,
    description: str | None = None,
    estimate: object = DEFAULT_ESTIMATE,
    status: str = DEFAULT_STATUS,
    owner_id: int | None = None,
) -> Story:
    """
    Create a live story owned by owner_id (defaults to the actor).

    Non-privileged actors may only create stories they own. The estimate is normalized,
    never rejected.
    """
    clean_title = _validate_title(title)
    clean_status = _validate_status(status)
    owner_id = actor.id if owner_id is None else owner_id
    if owner_id != actor.id and not is_privileged(actor):
        raise AuthorizationError("not allowed to create stories for another user")
    if session.query(User.id).filter(User.id == owner_id).first() is None:
        raise InputValidationError("owner not found")

    description = description.strip() if isinstance(description, str) else None
    story = Story(
        title=clean_title,
        description=description or None,
        estimate=normalize_estimate(estimate),
        status=clean_status,
        owner_id=owner_id,
    )
    session.add(story)
    session.commit()
    session.refresh(story)
    return story


def set_status(
    session: Session, story_id: int, new_status: str, actor: "CurrentUser | None"
) -> Story:
    """Move a story to any of the four statuses; backwards moves are allowed."""
    clean_status = _validate_status(new_status)
    story = _get_editable_story(session, story_id, actor)
    story.status = clean_status
    session.commit()
    return story


def set_estimate(
    session: Session, story_id: int, new_estimate: object, actor: "CurrentUser | None"
) -> Story:
    """Replace the estimate; unlike creation, a non-integer or out-of-range value is rejected."""
    if (
        isinstance(new_estimate, bool)
        or not isinstance(new_estimate, int)
        or not 1 <= new_estimate <= MAX_ESTIMATE
    ):
        raise InputValidationError(f"estimate must be an integer between 1 and {MAX_ESTIMATE}")
    story = _get_editable_story(session, story_id, actor)
    story.estimate = new_estimate
    session.commit()
    return story


def add_task(
    session: Session, story_id: int, title: str, actor: "CurrentUser | None"
) -> StoryTask:
    """Append an open task to the story."""
    clean_title = _validate_title(title)
    story = _get_editable_story(session, story_id, actor)
    task = StoryTask(story_id=story.id, title=clean_title, done=False)
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def toggle_task(
    session: Session,
    story_id: int,
    task_id: int,
    done: bool,
    actor: "CurrentUser | None",
) -> StoryTask:
    """Set a task's done flag to the given boolean."""
    if not isinstance(done, bool):
        raise InputValidationError("done flag required")
    _get_editable_story(session, story_id, actor)
    task = (
        session.query(StoryTask)
        .filter(StoryTask.id == task_id, StoryTask.story_id == story_id)
        .first()
    )
    if task is None:
        raise NotFoundError("task not found")
    task.done = done
    session.commit()
    return task


def remove_task(
    session: Session, story_id: int, task_id: int, actor: "CurrentUser | None"
) -> None:
    """Delete one task of the story; NotFoundError when no row matched."""
    _get_editable_story(session, story_id, actor)
    task = (
        session.query(StoryTask)
        .filter(StoryTask.id == task_id, StoryTask.story_id == story_id)
        .first()
    )
    if task is None:
        raise NotFoundError("task not found")
    session.delete(task)
    session.commit()


def remove_story(session: Session, story_id: int, actor: "CurrentUser | None") -> None:
    """Delete a live story and its tasks (privileged users only)."""
    if not can_delete_story(actor):
        raise AuthorizationError("not allowed to delete stories")
    story = get_story(session, story_id)
    session.delete(story)
    session.commit()
    logger.info("Story deleted", extra={"story_id": story_id, "actor_id": actor.id})
