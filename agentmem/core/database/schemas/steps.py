"""
Schema models for conversation step requests and responses.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import Field, JsonValue

from ..entities.conversation_steps import ConversationStep
from .common import CamelModel


class StepUsage(CamelModel):
    """Token accounting attached to a step."""

    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    reasoning_tokens: Optional[int] = None
    cached_input_tokens: Optional[int] = None


class ConversationStepCreate(CamelModel):
    """Schema for upserting a conversation step."""

    id: str = Field(min_length=1, description="External step id")
    conversation_id: str
    user_id: str
    agent_id: str
    agent_name: Optional[str] = None
    operation_id: Optional[str] = None
    step_index: int
    type: str
    role: str
    content: Optional[str] = None
    arguments: Optional[Dict[str, Any]] = None
    result: Optional[JsonValue] = None
    usage: Optional[StepUsage] = None
    sub_agent_id: Optional[str] = None
    sub_agent_name: Optional[str] = None
    created_at: Optional[str] = Field(default=None, description="ISO-8601 creation time, honored on first insert")


class ConversationStepRead(CamelModel):
    """Schema for reading a conversation step."""

    id: str
    conversation_id: str
    user_id: str
    agent_id: str
    agent_name: Optional[str] = None
    operation_id: Optional[str] = None
    step_index: int
    type: str
    role: str
    content: Optional[str] = None
    arguments: Optional[Dict[str, Any]] = None
    result: Optional[JsonValue] = None
    usage: Optional[StepUsage] = None
    sub_agent_id: Optional[str] = None
    sub_agent_name: Optional[str] = None
    created_at: str

    @classmethod
    def from_entity(cls, row: ConversationStep) -> "ConversationStepRead":
        return cls(
            id=row.visible_id,
            conversation_id=row.conversation_id,
            user_id=row.user_id,
            agent_id=row.agent_id,
            agent_name=row.agent_name,
            operation_id=row.operation_id,
            step_index=row.step_index,
            type=row.type,
            role=row.role,
            content=row.content,
            arguments=row.arguments,
            result=row.result,
            usage=StepUsage.model_validate(row.usage) if row.usage is not None else None,
            sub_agent_id=row.sub_agent_id,
            sub_agent_name=row.sub_agent_name,
            created_at=row.created_at,
        )
