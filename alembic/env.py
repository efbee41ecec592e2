"""Alembic environment for the sprint board schema (users, stories, story_tasks, archived_stories)."""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy.pool import NullPool

os.environ.setdefault("APP_ENV", "dev")
from app.core.config import settings
from app.core.database import create_db_engine

# Registers every board table on Base.metadata.
from app.models import ArchivedStory, Base, Story, StoryTask, User  # noqa: F401

config = context.config
if config.config_file_name is not None:
    try:
        fileConfig(config.config_file_name)
    except KeyError:
        # alembic.ini carries no logging sections.
        pass

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL for the board schema without connecting."""
    context.configure(
        url=settings.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a single, unpooled connection."""
    engine = create_db_engine(settings.DATABASE_URL, poolclass=NullPool)
    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                compare_type=True,
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
