"""Error types for the memory store.

Defines a small hierarchy of exceptions raised by repositories when a write
targets a missing entity or collides with an existing external identifier.
Each error carries an ``ErrorKind`` so callers can branch on the kind rather
than on the message text.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Stable error taxonomy exposed across the repository boundary."""

    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    INVALID_SCOPE = "invalid_scope"


class MemoryStoreError(Exception):
    """Base error for all memory store exceptions."""

    kind: ErrorKind


class ConversationAlreadyExistsError(MemoryStoreError):
    """Raised when creating a conversation whose external id is taken."""

    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, conversation_id: str) -> None:
        self.conversation_id = conversation_id
        super().__init__(f"Conversation already exists: '{conversation_id}'")


class ConversationNotFoundError(MemoryStoreError):
    """Raised when updating, removing or writing working memory for a missing conversation."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, conversation_id: str) -> None:
        self.conversation_id = conversation_id
        super().__init__(f"Conversation not found: '{conversation_id}'")


class WorkflowStateNotFoundError(MemoryStoreError):
    """Raised when patching a workflow execution that was never recorded."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, execution_id: str) -> None:
        self.execution_id = execution_id
        super().__init__(f"Workflow state not found: '{execution_id}'")
