"""Shared helpers for tests: in-memory SQLite database and row builders."""

import unittest
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import ArchivedStory, Base, Story, StoryTask, User
from app.schemas.auth import CurrentUser


def make_session_factory() -> tuple[Engine, sessionmaker]:
    """Create a fresh in-memory database with all tables; one shared connection."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine, sessionmaker(bind=engine, autocommit=False, autoflush=False)


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0, microsecond: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=timezone.utc)


class BoardTestCase(unittest.TestCase):
    """TestCase with a per-test database session and builders for users, stories and archive rows."""

    def setUp(self) -> None:
        self.engine, self.Session = make_session_factory()
        self.session = self.Session()

    def tearDown(self) -> None:
        self.session.close()
        self.engine.dispose()

    def add_user(self, username: str, role: str = "developer") -> CurrentUser:
        user = User(username=username, password_hash="not-a-real-hash", role=role)
        self.session.add(user)
        self.session.commit()
        return CurrentUser(id=user.id, username=user.username, role=user.role)

    def add_story(
        self,
        owner: CurrentUser | None,
        title: str = "Story",
        estimate: int = 3,
        status: str = "backlog",
        tasks: Iterable[tuple[str, bool]] = (),
        created_at: datetime | None = None,
    ) -> int:
        story = Story(
            title=title,
            description=f"{title} description",
            estimate=estimate,
            status=status,
            owner_id=owner.id if owner is not None else None,
        )
        if created_at is not None:
            story.created_at = created_at
        self.session.add(story)
        self.session.flush()
        for task_title, done in tasks:
            self.session.add(StoryTask(story_id=story.id, title=task_title, done=done))
            self.session.flush()
        self.session.commit()
        return story.id

    def add_archived(
        self,
        completed_at: datetime,
        estimate: int = 1,
        owner_name: str | None = None,
        tasks_snapshot: Any = None,
        title: str = "Archived",
        original_story_id: int = 1,
    ) -> int:
        row = ArchivedStory(
            original_story_id=original_story_id,
            title=title,
            description=None,
            estimate=estimate,
            status="done",
            owner_id=None,
            owner_name=owner_name,
            tasks_snapshot=[] if tasks_snapshot is None else tasks_snapshot,
            completed_at=completed_at,
        )
        self.session.add(row)
        self.session.commit()
        return row.id
