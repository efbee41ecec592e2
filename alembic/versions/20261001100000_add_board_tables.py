"""Add stories, story_tasks and archived_stories.

Revision ID: 20261001100000
Revises: 20261001000000
Create Date: 2026-10-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "20261001100000"
down_revision: Union[str, None] = "20261001000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "stories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("estimate", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="backlog"),
        sa.Column("owner_id", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="SET NULL"),
        sa.CheckConstraint("estimate >= 1", name="ck_stories_estimate_positive"),
        sa.CheckConstraint(
            "status IN ('backlog', 'ready', 'in-progress', 'done')",
            name="ck_stories_status",
        ),
    )
    op.create_index(op.f("ix_stories_status"), "stories", ["status"], unique=False)
    op.create_index(op.f("ix_stories_owner_id"), "stories", ["owner_id"], unique=False)

    op.create_table(
        "story_tasks",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("story_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["story_id"], ["stories.id"], ondelete="CASCADE"),
    )
    op.create_index(
        op.f("ix_story_tasks_story_id"), "story_tasks", ["story_id"], unique=False
    )

    op.create_table(
        "archived_stories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("original_story_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("estimate", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="done"),
        sa.Column("owner_id", sa.Integer(), nullable=True),
        sa.Column("owner_name", sa.String(length=255), nullable=True),
        sa.Column(
            "tasks_snapshot",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "completed_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_archived_stories_original_story_id"),
        "archived_stories",
        ["original_story_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_archived_stories_completed_at"),
        "archived_stories",
        ["completed_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_archived_stories_completed_at"), table_name="archived_stories")
    op.drop_index(
        op.f("ix_archived_stories_original_story_id"), table_name="archived_stories"
    )
    op.drop_table("archived_stories")
    op.drop_index(op.f("ix_story_tasks_story_id"), table_name="story_tasks")
    op.drop_table("story_tasks")
    op.drop_index(op.f("ix_stories_owner_id"), table_name="stories")
    op.drop_index(op.f("ix_stories_status"), table_name="stories")
    op.drop_table("stories")
