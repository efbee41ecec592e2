"""ORM model for immutable archive records of completed stories."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB

from app.models.base import Base, utcnow


class ArchivedStory(Base):
    """
    Snapshot of a story taken when it was completed.

    Written once by the archive transition and never updated. owner_name and
    tasks_snapshot are value copies; they do not follow the live user or tasks.
    tasks_snapshot holds a JSON array of {id, title, done, createdAt}.
    """

    __tablename__ = "archived_stories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    original_story_id = Column(Integer, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    estimate = Column(Integer, nullable=False, default=1)
    status = Column(String(32), nullable=False, default="done")
    owner_id = Column(Integer, nullable=True)
    owner_name = Column(String(255), nullable=True)
    tasks_snapshot = Column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
    )
    completed_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )
