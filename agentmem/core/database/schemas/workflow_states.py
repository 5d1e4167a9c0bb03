"""
Schema models for workflow execution state.

These schemas describe a suspendable workflow run: its status, the event
timeline, the suspension checkpoint used to resume it and the cancellation
record. Opaque payloads (input, output, suspend data, checkpoint state) are
any JSON value.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ConfigDict, Field, JsonValue, field_validator

from ..base import to_iso
from ..entities.workflow_states import WorkflowStateRecord
from .common import CamelModel

# Serialized execution context: ordered (key, value) pairs
WorkflowContext = List[Tuple[JsonValue, JsonValue]]


def _coerce_timestamp(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_iso(value)
    return value


class WorkflowStatus(str, Enum):
    """Known workflow execution statuses.

    The store records whatever status the workflow engine reports; it does
    not check that a transition between two statuses is legal.
    """

    RUNNING = "running"
    SUSPENDED = "suspended"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ERROR = "error"


class SuspensionCheckpoint(CamelModel):
    """Snapshot of in-flight step state captured at suspension."""

    step_execution_state: Optional[JsonValue] = None
    completed_steps_data: Optional[List[JsonValue]] = None


class Suspension(CamelModel):
    """Why and where a workflow was suspended."""

    suspended_at: str
    reason: Optional[str] = None
    suspended_step_index: Optional[int] = None
    last_event_sequence: Optional[int] = None
    suspend_data: Optional[JsonValue] = None
    checkpoint: Optional[SuspensionCheckpoint] = None

    @field_validator("suspended_at", mode="before")
    @classmethod
    def normalize_suspended_at(cls, value: Any) -> Any:
        return _coerce_timestamp(value)


class Cancellation(CamelModel):
    """Cancellation record of a workflow run."""

    cancelled_at: str
    reason: Optional[str] = None

    @field_validator("cancelled_at", mode="before")
    @classmethod
    def normalize_cancelled_at(cls, value: Any) -> Any:
        return _coerce_timestamp(value)


class WorkflowEvent(CamelModel):
    """One entry of a workflow run's event timeline."""

    id: str
    type: str
    name: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    start_time: str
    end_time: Optional[str] = None
    status: Optional[str] = None
    input: Optional[JsonValue] = None
    output: Optional[JsonValue] = None
    metadata: Optional[Dict[str, Any]] = None
    context: Optional[Dict[str, Any]] = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def normalize_times(cls, value: Any) -> Any:
        return _coerce_timestamp(value)


class WorkflowStateSet(CamelModel):
    """Full create-or-replace payload for a workflow execution."""

    workflow_id: str
    workflow_name: str
    status: WorkflowStatus
    input: Optional[JsonValue] = None
    context: Optional[WorkflowContext] = None
    suspension: Optional[Suspension] = None
    events: Optional[List[WorkflowEvent]] = None
    output: Optional[JsonValue] = None
    cancellation: Optional[Cancellation] = None
    user_id: Optional[str] = None
    conversation_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: str
    updated_at: str

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def normalize_timestamps(cls, value: Any) -> Any:
        return _coerce_timestamp(value)

    @field_validator("context", mode="before")
    @classmethod
    def context_from_mapping(cls, value: Any) -> Any:
        # A mapping is flattened into pairs in its iteration order
        if isinstance(value, dict):
            return [[key, item] for key, item in value.items()]
        return value


class WorkflowStateUpdate(CamelModel):
    """Sparse patch for a workflow execution; only explicitly set fields are written.

    Fields outside the patch, such as ``updatedAt`` or ``workflowName``, are
    dropped: the store stamps ``updated_at`` itself.
    """

    model_config = ConfigDict(extra="ignore")

    status: Optional[WorkflowStatus] = None
    suspension: Optional[Suspension] = None
    events: Optional[List[WorkflowEvent]] = None
    output: Optional[JsonValue] = None
    cancellation: Optional[Cancellation] = None
    metadata: Optional[Dict[str, Any]] = None


class WorkflowStateRead(WorkflowStateSet):
    """Schema for reading a workflow execution, including its execution id."""

    id: str

    def context_dict(self) -> Dict[Any, Any]:
        """Rebuild the execution context mapping in its original order."""
        return {key: value for key, value in (self.context or [])}

    @classmethod
    def from_entity(cls, row: WorkflowStateRecord) -> "WorkflowStateRead":
        return cls(
            id=row.visible_id,
            workflow_id=row.workflow_id,
            workflow_name=row.workflow_name,
            status=row.status,
            input=row.input,
            context=row.context,
            suspension=row.suspension,
            events=row.events,
            output=row.output,
            cancellation=row.cancellation,
            user_id=row.user_id,
            conversation_id=row.conversation_id,
            metadata=row.meta,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


def storage_value(value: Any) -> Any:
    """Convert a validated schema value into its JSON column representation."""
    if isinstance(value, CamelModel):
        return value.to_record()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [storage_value(item) for item in value]
    if isinstance(value, tuple):
        return [storage_value(item) for item in value]
    return value
