"""
Database entity models.

This package contains all database entity models organized by business domain
and table relationships. Each module represents a single database table.

Modules:
- conversations: Conversation metadata and conversation-scoped working memory
- messages: Messages of a conversation with their typed parts
- users: Users holding user-scoped working memory
- conversation_steps: Observability steps recorded per conversation
- workflow_states: Suspendable workflow execution state
"""

from . import (
    conversation_steps,
    conversations,
    messages,
    users,
    workflow_states,
)
from .conversation_steps import ConversationStep
from .conversations import Conversation
from .messages import Message
from .users import User
from .workflow_states import WorkflowStateRecord

__all__ = [
    "Conversation",
    "ConversationStep",
    "Message",
    "User",
    "WorkflowStateRecord",
    "conversation_steps",
    "conversations",
    "messages",
    "users",
    "workflow_states",
]
