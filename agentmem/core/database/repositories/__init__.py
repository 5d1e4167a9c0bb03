"""
Database repository layer using SQLModel.

Each module provides async data access operations for one entity of the
memory store. Writes are validated against the pydantic schemas before any
statement is issued and every operation commits its own transaction.

Modules:
- base: AsyncBaseRepository with lookups by external id
- conversations: Conversation lifecycle and queries
- messages: Message upserts, history windows and clearing
- steps: Conversation step upserts and reads
- working_memory: Conversation- and user-scoped working memory
- workflow_states: Suspendable workflow execution state
- bundle: RepoBundle over a single session
"""

from .base import AsyncBaseRepository
from .bundle import RepoBundle, build_repos
from .conversations import ConversationRepository
from .messages import MessageRepository
from .steps import StepRepository
from .workflow_states import WorkflowStateRepository
from .working_memory import WorkingMemoryRepository

__all__ = [
    "AsyncBaseRepository",
    "ConversationRepository",
    "MessageRepository",
    "RepoBundle",
    "StepRepository",
    "WorkflowStateRepository",
    "WorkingMemoryRepository",
    "build_repos",
]
