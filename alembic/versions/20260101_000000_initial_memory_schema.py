"""Initial schema for agentmem

Revision ID: 20260101_000000
Revises: None
Create Date: 2026-01-01 00:00:00.000000

This is the initial migration that creates the memory store tables:
- am_conversations
- am_messages
- am_users
- am_conversation_steps
- am_workflow_states

Timestamps are ISO-8601 UTC strings, so they are plain string columns.

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260101_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TIMESTAMP = sa.String(32)


def _json() -> sa.types.TypeEngine:
    # JSONB on PostgreSQL, generic JSON elsewhere
    return sa.JSON().with_variant(JSONB(), "postgresql")


def upgrade() -> None:
    """Create all tables and indexes."""

    # Create am_conversations table
    op.create_table(
        "am_conversations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("visible_id", sa.String(255), nullable=False),
        sa.Column("resource_id", sa.String(255), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("metadata", _json(), nullable=False),
        sa.Column("created_at", TIMESTAMP, nullable=False),
        sa.Column("updated_at", TIMESTAMP, nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_am_conversations_visible_id", "visible_id", unique=True),
        sa.Index("ix_am_conversations_resource_id", "resource_id"),
        sa.Index("ix_am_conversations_user_id", "user_id"),
        sa.Index("ix_am_conversations_user_id_updated_at", "user_id", "updated_at"),
    )

    # Create am_messages table
    op.create_table(
        "am_messages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("visible_id", sa.String(255), nullable=False),
        sa.Column("conversation_id", sa.String(255), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("role", sa.String(32), nullable=False),
        sa.Column("parts", _json(), nullable=False),
        sa.Column("metadata", _json(), nullable=True),
        sa.Column("created_at", TIMESTAMP, nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_am_messages_visible_id", "visible_id", unique=True),
        sa.Index("ix_am_messages_conversation_id", "conversation_id"),
        sa.Index("ix_am_messages_user_id", "user_id"),
        sa.Index("ix_am_messages_conversation_id_created_at", "conversation_id", "created_at"),
        sa.Index("ix_am_messages_conversation_id_user_id", "conversation_id", "user_id"),
    )

    # Create am_users table
    op.create_table(
        "am_users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("visible_id", sa.String(255), nullable=False),
        sa.Column("metadata", _json(), nullable=True),
        sa.Column("created_at", TIMESTAMP, nullable=False),
        sa.Column("updated_at", TIMESTAMP, nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_am_users_visible_id", "visible_id", unique=True),
    )

    # Create am_conversation_steps table
    op.create_table(
        "am_conversation_steps",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("visible_id", sa.String(255), nullable=False),
        sa.Column("conversation_id", sa.String(255), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("agent_id", sa.String(255), nullable=False),
        sa.Column("agent_name", sa.String(255), nullable=True),
        sa.Column("operation_id", sa.String(255), nullable=True),
        sa.Column("sub_agent_id", sa.String(255), nullable=True),
        sa.Column("sub_agent_name", sa.String(255), nullable=True),
        sa.Column("step_index", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(64), nullable=False),
        sa.Column("role", sa.String(32), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("arguments", _json(), nullable=True),
        sa.Column("result", _json(), nullable=True),
        sa.Column("usage", _json(), nullable=True),
        sa.Column("created_at", TIMESTAMP, nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_am_conversation_steps_visible_id", "visible_id", unique=True),
        sa.Index("ix_am_conversation_steps_conversation_id", "conversation_id"),
        sa.Index("ix_am_conversation_steps_user_id", "user_id"),
        sa.Index("ix_am_conversation_steps_conversation_id_step_index", "conversation_id", "step_index"),
        sa.Index("ix_am_conversation_steps_conversation_id_operation_id", "conversation_id", "operation_id"),
    )

    # Create am_workflow_states table
    op.create_table(
        "am_workflow_states",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("visible_id", sa.String(255), nullable=False),
        sa.Column("workflow_id", sa.String(255), nullable=False),
        sa.Column("workflow_name", sa.String(255), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("input", _json(), nullable=True),
        sa.Column("context", _json(), nullable=True),
        sa.Column("suspension", _json(), nullable=True),
        sa.Column("events", _json(), nullable=True),
        sa.Column("output", _json(), nullable=True),
        sa.Column("cancellation", _json(), nullable=True),
        sa.Column("user_id", sa.String(255), nullable=True),
        sa.Column("conversation_id", sa.String(255), nullable=True),
        sa.Column("metadata", _json(), nullable=True),
        sa.Column("created_at", TIMESTAMP, nullable=False),
        sa.Column("updated_at", TIMESTAMP, nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_am_workflow_states_visible_id", "visible_id", unique=True),
        sa.Index("ix_am_workflow_states_workflow_id", "workflow_id"),
        sa.Index("ix_am_workflow_states_status", "status"),
        sa.Index("ix_am_workflow_states_created_at", "created_at"),
        sa.Index("ix_am_workflow_states_workflow_id_status", "workflow_id", "status"),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("am_workflow_states")
    op.drop_table("am_conversation_steps")
    op.drop_table("am_users")
    op.drop_table("am_messages")
    op.drop_table("am_conversations")
