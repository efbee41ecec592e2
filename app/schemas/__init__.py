"""Pydantic request/response schemas."""

from app.schemas.archive import (
    AnalyticsRange,
    ArchiveAnalyticsResponse,
    ArchivedStoryOut,
    ArchiveResponse,
    ArchiveSummary,
    VelocityPoint,
)
from app.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.story import (
    STORY_STATUSES,
    StoriesResponse,
    StoryCreateRequest,
    StoryOut,
    StoryStatus,
    StoryUpdateRequest,
    StoryUpdateResponse,
    TaskCreateRequest,
    TaskOut,
    TaskUpdateRequest,
    TaskUpdateResponse,
)

__all__ = [
    "AnalyticsRange",
    "ArchiveAnalyticsResponse",
    "ArchiveResponse",
    "ArchiveSummary",
    "ArchivedStoryOut",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    "STORY_STATUSES",
    "StoriesResponse",
    "StoryCreateRequest",
    "StoryOut",
    "StoryStatus",
    "StoryUpdateRequest",
    "StoryUpdateResponse",
    "TaskCreateRequest",
    "TaskOut",
    "TaskUpdateRequest",
    "TaskUpdateResponse",
    "VelocityPoint",
]
