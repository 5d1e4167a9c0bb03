"""
Schema models for message requests and responses.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from ..entities.messages import Message
from .common import CamelModel
from .message_parts import MessagePart


class MessageCreate(CamelModel):
    """Schema for upserting a message."""

    id: str = Field(min_length=1, description="External message id")
    conversation_id: str
    user_id: str
    role: str
    parts: List[MessagePart]
    metadata: Optional[Dict[str, Any]] = None


class MessageRead(CamelModel):
    """Schema for reading a message.

    ``metadata`` always contains ``createdAt`` so the runtime can restore the
    original creation time.
    """

    id: str
    role: str
    parts: List[Dict[str, Any]]
    metadata: Dict[str, Any]

    @classmethod
    def from_entity(cls, row: Message) -> "MessageRead":
        return cls(
            id=row.visible_id,
            role=row.role,
            parts=list(row.parts or []),
            metadata={**(row.meta or {}), "createdAt": row.created_at},
        )


class MessageUpsertResult(CamelModel):
    """Acknowledgment for a single message upsert."""

    id: str
    created: bool = False
    updated: bool = False
