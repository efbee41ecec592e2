"""Pydantic schemas for live stories and tasks."""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import Field, StrictBool, StrictInt

from app.schemas.base import CamelModel

# Workflow statuses; any status may move to any other.
StoryStatus = Literal["backlog", "ready", "in-progress", "done"]

STORY_STATUSES: tuple[str, ...] = ("backlog", "ready", "in-progress", "done")

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 10_000
# Largest value the 32-bit estimate column holds.
MAX_ESTIMATE = 2_147_483_647


class TaskOut(CamelModel):
    id: int
    title: str
    done: bool
    created_at: datetime | None = None


class StoryOut(CamelModel):
    """Live story with its tasks in creation order."""

    id: int
    title: str
    description: str | None = None
    estimate: int
    status: str
    owner_id: int | None = None
    owner_name: str | None = None
    created_at: datetime | None = None
    tasks: list[TaskOut] = Field(default_factory=list)


class StoriesResponse(CamelModel):
    """Response for GET /stories."""

    stories: list[StoryOut]


class StoryCreateRequest(CamelModel):
    """
    Request body for POST /stories.

    estimate is taken as given and normalized to an integer >= 1 by the board.
    owner_id defaults to the caller; only privileged users may set another owner.
    """

    title: str = Field(..., max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    estimate: Any = Field(default=1, description="Story points; normalized to >= 1.")
    status: StoryStatus = "backlog"
    owner_id: int | None = None


class StoryUpdateRequest(CamelModel):
    """Request body for PATCH /stories/{id}: a new status, a new estimate, or both."""

    status: StoryStatus | None = None
    estimate: Annotated[StrictInt, Field(le=MAX_ESTIMATE)] | None = None


class StoryUpdateResponse(CamelModel):
    id: int
    status: str | None = None
    estimate: int | None = None


class TaskCreateRequest(CamelModel):
    title: str = Field(..., max_length=TITLE_MAX_LENGTH)


class TaskUpdateRequest(CamelModel):
    """Request body for PATCH /stories/{sid}/tasks/{tid}; done must be a JSON boolean."""

    done: StrictBool


class TaskUpdateResponse(CamelModel):
    id: int
    done: bool
