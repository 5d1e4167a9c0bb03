"""
Workflow state entity models.

This module contains the database entity for suspendable workflow
executions. One row per execution records its status, input/output, the
serialized execution context, the event timeline and, while suspended, the
checkpoint required to resume.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column, Index
from sqlmodel import Field

from ..base import Base


class WorkflowStateRecord(Base, table=True):
    """Entity for workflow execution state.

    ``visible_id`` holds the execution id. ``status`` is stored as the plain
    string value of ``WorkflowStatus``.

    Table: am_workflow_states
    """

    __tablename__ = "am_workflow_states"
    __table_args__ = (Index("ix_am_workflow_states_workflow_id_status", "workflow_id", "status"),)

    # Primary identifiers
    id: Optional[int] = Field(default=None, primary_key=True)
    visible_id: str = Field(max_length=255, unique=True, index=True)
    workflow_id: str = Field(max_length=255, index=True)
    workflow_name: str = Field(max_length=255)

    # Status
    status: str = Field(max_length=32, index=True)

    # Execution payloads
    input: Optional[Any] = Field(default=None, sa_column=Column("input", JSON, nullable=True))
    context: Optional[List[Any]] = Field(default=None, sa_column=Column("context", JSON, nullable=True))
    suspension: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column("suspension", JSON, nullable=True))
    events: Optional[List[Dict[str, Any]]] = Field(default=None, sa_column=Column("events", JSON, nullable=True))
    output: Optional[Any] = Field(default=None, sa_column=Column("output", JSON, nullable=True))
    cancellation: Optional[Dict[str, Any]] = Field(
        default=None, sa_column=Column("cancellation", JSON, nullable=True)
    )

    # Soft references
    user_id: Optional[str] = Field(default=None, max_length=255)
    conversation_id: Optional[str] = Field(default=None, max_length=255)
    meta: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column("metadata", JSON, nullable=True))

    # Timestamps
    created_at: str = Field(max_length=32, index=True)
    updated_at: str = Field(max_length=32)

    def __repr__(self) -> str:
        return f"WorkflowStateRecord(id={self.visible_id}, workflow_id={self.workflow_id}, status={self.status})"
