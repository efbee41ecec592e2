"""ORM models for live stories and their tasks."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from app.models.base import Base, utcnow


class StoryTask(Base):
    """Checklist item belonging to exactly one story."""

    __tablename__ = "story_tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    story_id = Column(
        Integer,
        ForeignKey("stories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    done = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    story = relationship("Story", back_populates="tasks")


class Story(Base):
    """
    A unit of planned work on the board.

    Owned by the board while live; removed by deletion or by the archive transition.
    """

    __tablename__ = "stories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    estimate = Column(Integer, nullable=False, default=1)
    status = Column(String(32), nullable=False, default="backlog", index=True)
    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    owner = relationship("User", lazy="joined")
    tasks = relationship(
        StoryTask,
        back_populates="story",
        cascade="all, delete-orphan",
        order_by=[StoryTask.created_at, StoryTask.id],
    )

    @property
    def owner_name(self) -> str | None:
        return self.owner.username if self.owner is not None else None
