"""
Schema models for conversation requests and responses.

These schemas are used for validation and serialization and are separate
from the entity models to allow independent evolution of the contract.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import ConfigDict, Field

from ..entities.conversations import Conversation
from .common import CamelModel


class ConversationCreate(CamelModel):
    """Schema for creating a conversation."""

    id: str = Field(min_length=1, description="External conversation id")
    resource_id: str
    user_id: str
    title: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ConversationUpdate(CamelModel):
    """Schema for patching a conversation; only supplied fields are applied."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    resource_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class ConversationRead(CamelModel):
    """Schema for reading a conversation."""

    id: str
    resource_id: str
    user_id: str
    title: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: str
    updated_at: str

    @classmethod
    def from_entity(cls, row: Conversation) -> "ConversationRead":
        return cls(
            id=row.visible_id,
            resource_id=row.resource_id,
            user_id=row.user_id,
            title=row.title,
            metadata=dict(row.meta or {}),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
