"""
Message entity models.

This module contains the database entity for conversation messages. A
message holds an ordered list of typed parts (text, tool calls, reasoning,
...) and references its conversation by external id only.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column, Index
from sqlmodel import Field

from ..base import Base


class Message(Base, table=True):
    """Entity for conversation messages.

    ``conversation_id`` is a soft reference to ``Conversation.visible_id``;
    no foreign key is enforced.

    Table: am_messages
    """

    __tablename__ = "am_messages"
    __table_args__ = (
        Index("ix_am_messages_conversation_id_created_at", "conversation_id", "created_at"),
        Index("ix_am_messages_conversation_id_user_id", "conversation_id", "user_id"),
    )

    # Primary identifiers
    id: Optional[int] = Field(default=None, primary_key=True)
    visible_id: str = Field(max_length=255, unique=True, index=True)
    conversation_id: str = Field(max_length=255, index=True)
    user_id: str = Field(max_length=255, index=True)

    # Message content
    role: str = Field(max_length=32, description="Message sender role")
    parts: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column("parts", JSON, nullable=False))
    meta: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column("metadata", JSON, nullable=True))

    # Timestamp
    created_at: str = Field(max_length=32)

    def __repr__(self) -> str:
        return f"Message(id={self.visible_id}, role={self.role}, conversation_id={self.conversation_id})"
