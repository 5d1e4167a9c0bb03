"""
Runtime-facing storage adapter.

``MemoryAdapter`` is what an agent runtime talks to. It converts between the
runtime's ``datetime`` values and the ISO-8601 strings kept in the store,
generates ids for messages that arrive without one, and runs every operation
in its own session so each call is one transaction.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import Field, JsonValue, field_validator
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from agentmem.core.database.base import from_iso, to_iso
from agentmem.core.database.repositories import RepoBundle, build_repos
from agentmem.core.database.schemas import (
    Cancellation,
    ConversationCreate,
    ConversationRead,
    ConversationStepCreate,
    ConversationStepRead,
    MutationResult,
    Suspension,
    WorkflowEvent,
    WorkflowStateRead,
    WorkflowStateSet,
    WorkflowStatus,
    WorkingMemoryScope,
)
from agentmem.core.database.schemas.common import CamelModel
from agentmem.core.database.schemas.workflow_states import WorkflowContext


class UIMessage(CamelModel):
    """A message as exchanged with the agent runtime."""

    id: Optional[str] = None
    role: str
    parts: List[Dict[str, Any]] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None


class WorkflowStateEntry(CamelModel):
    """Workflow execution state with ``datetime`` timestamps."""

    id: Optional[str] = None
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
    created_at: datetime
    updated_at: datetime

    @field_validator("context", mode="before")
    @classmethod
    def context_from_mapping(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return [[key, item] for key, item in value.items()]
        return value

    @classmethod
    def from_read(cls, state: WorkflowStateRead) -> "WorkflowStateEntry":
        return cls(
            id=state.id,
            workflow_id=state.workflow_id,
            workflow_name=state.workflow_name,
            status=state.status,
            input=state.input,
            context=state.context,
            suspension=state.suspension,
            events=state.events,
            output=state.output,
            cancellation=state.cancellation,
            user_id=state.user_id,
            conversation_id=state.conversation_id,
            metadata=state.metadata,
            created_at=from_iso(state.created_at),
            updated_at=from_iso(state.updated_at),
        )

    def to_state(self) -> WorkflowStateSet:
        return WorkflowStateSet(
            workflow_id=self.workflow_id,
            workflow_name=self.workflow_name,
            status=self.status,
            input=self.input,
            context=self.context,
            suspension=self.suspension,
            events=self.events,
            output=self.output,
            cancellation=self.cancellation,
            user_id=self.user_id,
            conversation_id=self.conversation_id,
            metadata=self.metadata,
            created_at=to_iso(self.created_at),
            updated_at=to_iso(self.updated_at),
        )


def _iso_or_none(value: Optional[datetime]) -> Optional[str]:
    return to_iso(value) if value is not None else None


class MemoryAdapter:
    """Storage adapter persisting conversations, memory and workflow state.

    Example:
        ```python
        engine = create_engine("postgresql://user:pass@db/agentmem")
        adapter = MemoryAdapter(create_sessionmaker(engine))
        await adapter.create_conversation(
            {"id": "c1", "resourceId": "agent-1", "userId": "u1", "title": "Support"}
        )
        ```
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        debug: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if session_factory is None:
            raise ValueError("A session factory is required")

        self._session_factory = session_factory
        self.debug = debug
        self.logger = logger or logging.getLogger(__name__)

        self._log("Memory adapter initialized")

    def _log(self, message: str) -> None:
        if self.debug:
            self.logger.debug(message)

    @asynccontextmanager
    async def _repos(self) -> AsyncIterator[RepoBundle]:
        async with self._session_factory() as session:
            yield build_repos(session)

    @staticmethod
    def _generate_id() -> str:
        return str(uuid.uuid4())

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def add_message(
        self, message: Union[UIMessage, Mapping[str, Any]], user_id: str, conversation_id: str
    ) -> None:
        """Add or overwrite a single message of a conversation."""
        message = UIMessage.model_validate(message)
        async with self._repos() as repos:
            await repos.messages.add(
                message.id or self._generate_id(),
                conversation_id,
                user_id,
                message.role,
                message.parts,
                message.metadata,
            )
        self._log(f"Added message to conversation {conversation_id}")

    async def add_messages(
        self, messages: Sequence[Union[UIMessage, Mapping[str, Any]]], user_id: str, conversation_id: str
    ) -> None:
        """Add or overwrite several messages of a conversation, in order."""
        batch = []
        for raw in messages:
            message = UIMessage.model_validate(raw)
            batch.append(
                {
                    "id": message.id or self._generate_id(),
                    "conversation_id": conversation_id,
                    "user_id": user_id,
                    "role": message.role,
                    "parts": message.parts,
                    "metadata": message.metadata,
                }
            )
        async with self._repos() as repos:
            await repos.messages.add_many(batch)
        self._log(f"Added {len(batch)} messages to conversation {conversation_id}")

    async def get_messages(
        self,
        user_id: str,
        conversation_id: str,
        limit: Optional[int] = None,
        before: Optional[datetime] = None,
        after: Optional[datetime] = None,
        roles: Optional[Sequence[str]] = None,
    ) -> List[UIMessage]:
        """Get the most recent messages of a conversation, oldest first.

        Each message's metadata carries ``createdAt`` as a ``datetime``.
        """
        async with self._repos() as repos:
            rows = await repos.messages.get(
                user_id,
                conversation_id,
                limit=limit,
                before=_iso_or_none(before),
                after=_iso_or_none(after),
                roles=roles,
            )

        messages = []
        for row in rows:
            created_at = row.metadata.get("createdAt")
            metadata = {
                **row.metadata,
                "createdAt": from_iso(created_at) if created_at else datetime.now(timezone.utc),
            }
            messages.append(UIMessage(id=row.id, role=row.role, parts=row.parts, metadata=metadata))
        return messages

    async def clear_messages(self, user_id: str, conversation_id: Optional[str] = None) -> None:
        """Clear a user's messages and steps, optionally within one conversation."""
        async with self._repos() as repos:
            await repos.messages.clear(user_id, conversation_id)
        self._log(f"Cleared messages for user {user_id}")

    # ------------------------------------------------------------------
    # Conversation steps
    # ------------------------------------------------------------------

    async def save_conversation_steps(self, steps: Sequence[Union[ConversationStepCreate, Mapping[str, Any]]]) -> None:
        """Save observability steps; an empty list is ignored."""
        if not steps:
            return
        async with self._repos() as repos:
            await repos.steps.save(steps)
        self._log(f"Saved {len(steps)} conversation steps")

    async def get_conversation_steps(
        self,
        user_id: str,
        conversation_id: str,
        limit: Optional[int] = None,
        operation_id: Optional[str] = None,
    ) -> List[ConversationStepRead]:
        async with self._repos() as repos:
            return await repos.steps.get(user_id, conversation_id, limit=limit, operation_id=operation_id)

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    async def create_conversation(self, data: Union[ConversationCreate, Mapping[str, Any]]) -> ConversationRead:
        """Create a conversation.

        Raises:
            ConversationAlreadyExistsError: If the id is already taken
        """
        payload = ConversationCreate.model_validate(data)
        async with self._repos() as repos:
            conversation = await repos.conversations.create(
                payload.id, payload.resource_id, payload.user_id, payload.title, payload.metadata
            )
        self._log(f"Created conversation {payload.id}")
        return conversation

    async def get_conversation(self, conversation_id: str) -> Optional[ConversationRead]:
        async with self._repos() as repos:
            return await repos.conversations.get(conversation_id)

    async def get_conversations(self, resource_id: str) -> List[ConversationRead]:
        async with self._repos() as repos:
            return await repos.conversations.get_by_resource_id(resource_id)

    async def get_conversations_by_user_id(
        self,
        user_id: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[str] = None,
        order_direction: Optional[str] = None,
    ) -> List[ConversationRead]:
        async with self._repos() as repos:
            return await repos.conversations.get_by_user_id(
                user_id, limit=limit, offset=offset, order_by=order_by, order_direction=order_direction
            )

    async def query_conversations(
        self,
        user_id: Optional[str] = None,
        resource_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[str] = None,
        order_direction: Optional[str] = None,
    ) -> List[ConversationRead]:
        async with self._repos() as repos:
            return await repos.conversations.query_conversations(
                user_id=user_id,
                resource_id=resource_id,
                limit=limit,
                offset=offset,
                order_by=order_by,
                order_direction=order_direction,
            )

    async def update_conversation(
        self,
        conversation_id: str,
        title: Optional[str] = None,
        resource_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ConversationRead:
        """Patch a conversation.

        Raises:
            ConversationNotFoundError: If the conversation does not exist
        """
        async with self._repos() as repos:
            conversation = await repos.conversations.update(
                conversation_id, title=title, resource_id=resource_id, metadata=metadata
            )
        self._log(f"Updated conversation {conversation_id}")
        return conversation

    async def delete_conversation(self, conversation_id: str) -> None:
        """Delete a conversation with its messages and steps.

        Raises:
            ConversationNotFoundError: If the conversation does not exist
        """
        async with self._repos() as repos:
            await repos.conversations.remove(conversation_id)
        self._log(f"Deleted conversation {conversation_id}")

    # ------------------------------------------------------------------
    # Working memory
    # ------------------------------------------------------------------

    async def get_working_memory(
        self,
        scope: Union[WorkingMemoryScope, str],
        conversation_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Optional[str]:
        async with self._repos() as repos:
            return await repos.working_memory.get(scope, conversation_id=conversation_id, user_id=user_id)

    async def set_working_memory(
        self,
        scope: Union[WorkingMemoryScope, str],
        content: str,
        conversation_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> MutationResult:
        """Write working memory.

        Raises:
            ConversationNotFoundError: For conversation scope when the conversation is missing
        """
        async with self._repos() as repos:
            result = await repos.working_memory.set(
                scope, content, conversation_id=conversation_id, user_id=user_id
            )
        self._log(f"Set working memory for {scope}")
        return result

    async def delete_working_memory(
        self,
        scope: Union[WorkingMemoryScope, str],
        conversation_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> MutationResult:
        async with self._repos() as repos:
            result = await repos.working_memory.remove(scope, conversation_id=conversation_id, user_id=user_id)
        self._log(f"Deleted working memory for {scope}")
        return result

    # ------------------------------------------------------------------
    # Workflow state
    # ------------------------------------------------------------------

    async def get_workflow_state(self, execution_id: str) -> Optional[WorkflowStateEntry]:
        async with self._repos() as repos:
            state = await repos.workflow_states.get(execution_id)
        return WorkflowStateEntry.from_read(state) if state is not None else None

    async def query_workflow_runs(
        self,
        workflow_id: Optional[str] = None,
        status: Optional[Union[WorkflowStatus, str]] = None,
        from_: Optional[datetime] = None,
        to: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[WorkflowStateEntry]:
        async with self._repos() as repos:
            states = await repos.workflow_states.query_runs(
                workflow_id=workflow_id,
                status=status,
                from_=_iso_or_none(from_),
                to=_iso_or_none(to),
                limit=limit,
                offset=offset,
            )
        return [WorkflowStateEntry.from_read(state) for state in states]

    async def set_workflow_state(
        self, execution_id: str, state: Union[WorkflowStateEntry, Mapping[str, Any]]
    ) -> None:
        """Create or fully replace the state of a workflow execution."""
        entry = WorkflowStateEntry.model_validate(state)
        async with self._repos() as repos:
            await repos.workflow_states.set(execution_id, entry.to_state())
        self._log(f"Set workflow state {execution_id}")

    async def update_workflow_state(self, execution_id: str, **updates: Any) -> None:
        """Patch the supplied fields of a workflow execution.

        Raises:
            WorkflowStateNotFoundError: If the execution was never recorded
        """
        async with self._repos() as repos:
            await repos.workflow_states.update(execution_id, **updates)
        self._log(f"Updated workflow state {execution_id}")

    async def get_suspended_workflow_states(self, workflow_id: str) -> List[WorkflowStateEntry]:
        async with self._repos() as repos:
            states = await repos.workflow_states.get_suspended(workflow_id)
        return [WorkflowStateEntry.from_read(state) for state in states]
