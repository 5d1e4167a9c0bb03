"""
Conversation step entity models.

This module contains the database entity for observability steps recorded
while an agent works on a conversation: tool calls, tool results, text
generations and sub-agent hand-offs, each numbered by ``step_index``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, Index, Text
from sqlmodel import Field

from ..base import Base


class ConversationStep(Base, table=True):
    """Entity for conversation observability steps.

    Table: am_conversation_steps
    """

    __tablename__ = "am_conversation_steps"
    __table_args__ = (
        Index("ix_am_conversation_steps_conversation_id_step_index", "conversation_id", "step_index"),
        Index("ix_am_conversation_steps_conversation_id_operation_id", "conversation_id", "operation_id"),
    )

    # Primary identifiers
    id: Optional[int] = Field(default=None, primary_key=True)
    visible_id: str = Field(max_length=255, unique=True, index=True)
    conversation_id: str = Field(max_length=255, index=True)
    user_id: str = Field(max_length=255, index=True)

    # Agent attribution
    agent_id: str = Field(max_length=255)
    agent_name: Optional[str] = Field(default=None, max_length=255)
    operation_id: Optional[str] = Field(default=None, max_length=255)
    sub_agent_id: Optional[str] = Field(default=None, max_length=255)
    sub_agent_name: Optional[str] = Field(default=None, max_length=255)

    # Step details
    step_index: int = Field(description="Position of the step within its operation")
    type: str = Field(max_length=64)
    role: str = Field(max_length=32)
    content: Optional[str] = Field(default=None, sa_column=Column("content", Text, nullable=True))
    arguments: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column("arguments", JSON, nullable=True))
    result: Optional[Any] = Field(default=None, sa_column=Column("result", JSON, nullable=True))
    usage: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column("usage", JSON, nullable=True))

    # Timestamp
    created_at: str = Field(max_length=32)

    def __repr__(self) -> str:
        return (
            f"ConversationStep(id={self.visible_id}, conversation_id={self.conversation_id}, "
            f"step_index={self.step_index}, type={self.type})"
        )
