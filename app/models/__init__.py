"""SQLAlchemy ORM models."""

from app.models.archived_story import ArchivedStory
from app.models.base import Base
from app.models.story import Story, StoryTask
from app.models.user import User

__all__ = ["ArchivedStory", "Base", "Story", "StoryTask", "User"]
