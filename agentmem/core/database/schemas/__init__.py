"""
Schema models used for validation and serialization at the repository boundary.

Every write is validated against these models before any statement reaches
the database, so malformed input never partially applies.
"""

from .common import JsonMap, MutationResult
from .conversations import ConversationCreate, ConversationRead, ConversationUpdate
from .message_parts import MessagePart, dump_parts, validate_parts
from .messages import MessageCreate, MessageRead, MessageUpsertResult
from .steps import ConversationStepCreate, ConversationStepRead, StepUsage
from .workflow_states import (
    Cancellation,
    Suspension,
    SuspensionCheckpoint,
    WorkflowEvent,
    WorkflowStateRead,
    WorkflowStateSet,
    WorkflowStateUpdate,
    WorkflowStatus,
)
from .working_memory import WORKING_MEMORY_KEY, WorkingMemoryScope

__all__ = [
    "Cancellation",
    "ConversationCreate",
    "ConversationRead",
    "ConversationStepCreate",
    "ConversationStepRead",
    "ConversationUpdate",
    "JsonMap",
    "MessageCreate",
    "MessagePart",
    "MessageRead",
    "MessageUpsertResult",
    "MutationResult",
    "StepUsage",
    "Suspension",
    "SuspensionCheckpoint",
    "WORKING_MEMORY_KEY",
    "WorkflowEvent",
    "WorkflowStateRead",
    "WorkflowStateSet",
    "WorkflowStateUpdate",
    "WorkflowStatus",
    "WorkingMemoryScope",
    "dump_parts",
    "validate_parts",
]
