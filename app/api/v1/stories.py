"""Story board endpoints: list/create/update/delete stories, manage tasks, complete (archive)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.core.errors import InputValidationError
from app.schemas.archive import ArchiveResponse
from app.schemas.auth import CurrentUser
from app.schemas.story import (
    StoriesResponse,
    StoryCreateRequest,
    StoryOut,
    StoryUpdateRequest,
    StoryUpdateResponse,
    TaskCreateRequest,
    TaskOut,
    TaskUpdateRequest,
    TaskUpdateResponse,
)
from app.services import story_board
from app.services.archive import archive_story

router = APIRouter()


@router.get("", response_model=StoriesResponse)
def get_stories(
    db: Annotated[Session, Depends(get_db)],
) -> StoriesResponse:
    """
    Return every live story, newest first, each with its owner name and tasks
    (oldest task first).
    """
    stories = story_board.list_stories(db)
    return StoriesResponse(stories=[StoryOut.model_validate(s) for s in stories])


@router.post("", response_model=StoryOut, status_code=201)
def post_story(
    body: StoryCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> StoryOut:
    """
    Create a story. The estimate is normalized to an integer >= 1 (0, negative or
    non-numeric values become 1). ownerId defaults to the caller; setting another owner
    requires a manager or admin.
    """
    story = story_board.create_story(
        db,
        user,
        title=body.title,
        description=body.description,
        estimate=body.estimate,
        status=body.status,
        owner_id=body.owner_id,
    )
    return StoryOut.model_validate(story)


@router.patch(
    "/{story_id}",
    response_model=StoryUpdateResponse,
    response_model_exclude_none=True,
)
def patch_story(
    story_id: int,
    body: StoryUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> StoryUpdateResponse:
    """
    Change a story's status and/or estimate. Any status may move to any other.
    Requires the story's owner or a manager/admin.
    """
    if body.status is None and body.estimate is None:
        raise InputValidationError("status or estimate required")
    # Both values are validated before either is written.
    if body.estimate is not None and body.estimate < 1:
        raise InputValidationError("estimate must be an integer >= 1")

    response = StoryUpdateResponse(id=story_id)
    if body.status is not None:
        story = story_board.set_status(db, story_id, body.status, user)
        response.status = story.status
    if body.estimate is not None:
        story = story_board.set_estimate(db, story_id, body.estimate, user)
        response.estimate = story.estimate
    return response


@router.delete("/{story_id}", status_code=204)
def delete_story(
    story_id: int,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Response:
    """Delete a live story and its tasks (manager/admin only)."""
    story_board.remove_story(db, story_id, user)
    return Response(status_code=204)


@router.post("/{story_id}/tasks", response_model=TaskOut, status_code=201)
def post_task(
    story_id: int,
    body: TaskCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> TaskOut:
    """Append an open task to the story."""
    task = story_board.add_task(db, story_id, body.title, user)
    return TaskOut.model_validate(task)


@router.patch("/{story_id}/tasks/{task_id}", response_model=TaskUpdateResponse)
def patch_task(
    story_id: int,
    task_id: int,
    body: TaskUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> TaskUpdateResponse:
    """Set a task's done flag (JSON boolean required)."""
    task = story_board.toggle_task(db, story_id, task_id, body.done, user)
    return TaskUpdateResponse(id=task.id, done=task.done)


@router.delete("/{story_id}/tasks/{task_id}", status_code=204)
def delete_task(
    story_id: int,
    task_id: int,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Response:
    story_board.remove_task(db, story_id, task_id, user)
    return Response(status_code=204)


@router.post("/{story_id}/complete", response_model=ArchiveResponse)
def complete_story(
    story_id: int,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ArchiveResponse:
    """
    Complete a story: snapshot it (with its tasks) into the archive as done and remove it
    from the board, atomically. Manager/admin only.
    """
    record = archive_story(db, story_id, user)
    return ArchiveResponse(archived_id=record.id)
