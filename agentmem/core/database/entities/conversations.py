"""
Conversation entity models.

This module contains the database entity for conversations. A conversation
groups the messages and observability steps exchanged between a user and an
agent, and carries a free-form metadata map that also hosts the
conversation-scoped working memory.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, Index
from sqlmodel import Field

from ..base import Base


class ConversationBase(Base):
    """Base fields for conversation entity."""

    resource_id: str = Field(max_length=255, index=True, description="Resource (agent) the conversation belongs to")
    user_id: str = Field(max_length=255, index=True, description="Owning user identifier")
    title: str = Field(description="Conversation title")


class Conversation(ConversationBase, table=True):
    """Entity for conversations.

    ``visible_id`` is the caller-supplied identifier and the only one ever
    exposed; ``id`` is internal to the store.

    Table: am_conversations
    """

    __tablename__ = "am_conversations"
    __table_args__ = (Index("ix_am_conversations_user_id_updated_at", "user_id", "updated_at"),)

    # Primary identifiers
    id: Optional[int] = Field(default=None, primary_key=True)
    visible_id: str = Field(max_length=255, unique=True, index=True)

    meta: Dict[str, Any] = Field(default_factory=dict, sa_column=Column("metadata", JSON, nullable=False))

    # Timestamps
    created_at: str = Field(max_length=32)
    updated_at: str = Field(max_length=32)

    def __repr__(self) -> str:
        return f"Conversation(id={self.visible_id}, user_id={self.user_id}, title={self.title})"
