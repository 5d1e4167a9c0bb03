"""
Conversation repository interface and implementation.

This module provides data access operations for conversations: creation,
lookup by user or resource, filtered and paginated queries, patching and
cascading removal of the conversation's messages and steps.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from agentmem.core.config import settings
from agentmem.core.errors import ConversationAlreadyExistsError, ConversationNotFoundError

from ..base import utc_now_iso
from ..entities.conversation_steps import ConversationStep
from ..entities.conversations import Conversation
from ..entities.messages import Message
from ..schemas.common import MutationResult
from ..schemas.conversations import ConversationCreate, ConversationRead, ConversationUpdate
from .base import AsyncBaseRepository

logger = logging.getLogger(__name__)

# Accepted ``order_by`` values, in either spelling
ORDER_FIELDS = {
    "createdAt": Conversation.created_at,
    "created_at": Conversation.created_at,
    "updatedAt": Conversation.updated_at,
    "updated_at": Conversation.updated_at,
    "title": Conversation.title,
}


def _apply_order_and_page(
    stmt,
    limit: Optional[int],
    offset: Optional[int],
    order_by: Optional[str],
    order_direction: Optional[str],
):
    column = ORDER_FIELDS.get(order_by or "createdAt", Conversation.created_at)
    if order_direction == "ASC":
        stmt = stmt.order_by(column.asc(), Conversation.id.asc())  # type: ignore[union-attr]
    else:
        stmt = stmt.order_by(column.desc(), Conversation.id.desc())  # type: ignore[union-attr]
    return stmt.offset(offset or 0).limit(limit or settings.memory.default_conversation_limit)


class ConversationRepository(AsyncBaseRepository[Conversation]):
    """Repository for conversation data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Conversation)

    async def create(
        self,
        conversation_id: str,
        resource_id: str,
        user_id: str,
        title: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ConversationRead:
        """Create a new conversation.

        Raises:
            ConversationAlreadyExistsError: If the external id is already taken
        """
        payload = ConversationCreate(
            id=conversation_id,
            resource_id=resource_id,
            user_id=user_id,
            title=title,
            metadata=metadata or {},
        )
        if await self.get_by_visible_id(payload.id) is not None:
            raise ConversationAlreadyExistsError(payload.id)

        now = utc_now_iso()
        row = Conversation(
            visible_id=payload.id,
            resource_id=payload.resource_id,
            user_id=payload.user_id,
            title=payload.title,
            meta=dict(payload.metadata),
            created_at=now,
            updated_at=now,
        )
        self.session.add(row)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConversationAlreadyExistsError(payload.id) from e
        await self.session.refresh(row)
        logger.info(f"Created conversation {payload.id} for user {payload.user_id}")
        return ConversationRead.from_entity(row)

    async def get(self, conversation_id: str) -> Optional[ConversationRead]:
        """Get a conversation by its external id."""
        row = await self.get_by_visible_id(conversation_id)
        return ConversationRead.from_entity(row) if row is not None else None

    async def get_by_resource_id(self, resource_id: str) -> List[ConversationRead]:
        """Get every conversation attached to a resource."""
        stmt = select(Conversation).where(Conversation.resource_id == resource_id).order_by(Conversation.id)
        result = await self.session.exec(stmt)
        return [ConversationRead.from_entity(row) for row in result]

    async def get_by_user_id(
        self,
        user_id: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[str] = None,
        order_direction: Optional[str] = None,
    ) -> List[ConversationRead]:
        """Get a page of a user's conversations.

        Args:
            user_id: Owning user
            limit: Page size; falsy means the configured default (50)
            offset: Records to skip
            order_by: ``createdAt``, ``updatedAt`` or ``title`` (snake_case accepted)
            order_direction: ``ASC`` for ascending, anything else descending

        Returns:
            List of conversations
        """
        stmt = select(Conversation).where(Conversation.user_id == user_id)
        stmt = _apply_order_and_page(stmt, limit, offset, order_by, order_direction)
        result = await self.session.exec(stmt)
        rows = [ConversationRead.from_entity(row) for row in result]
        logger.debug(f"Loaded {len(rows)} conversations for user {user_id}")
        return rows

    async def query_conversations(
        self,
        user_id: Optional[str] = None,
        resource_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[str] = None,
        order_direction: Optional[str] = None,
    ) -> List[ConversationRead]:
        """Query conversations by user and/or resource.

        Without either filter only the most recently created conversations,
        up to the configured cap, are considered before ordering and paging.
        """
        stmt = select(Conversation)
        if user_id:
            stmt = stmt.where(Conversation.user_id == user_id)
            if resource_id:
                stmt = stmt.where(Conversation.resource_id == resource_id)
        elif resource_id:
            stmt = stmt.where(Conversation.resource_id == resource_id)
        else:
            recent = (
                select(Conversation.id)
                .order_by(Conversation.id.desc())  # type: ignore[union-attr]
                .limit(settings.memory.unfiltered_query_cap)
                .subquery()
            )
            stmt = stmt.where(Conversation.id.in_(select(recent.c.id)))  # type: ignore[union-attr]

        stmt = _apply_order_and_page(stmt, limit, offset, order_by, order_direction)
        result = await self.session.exec(stmt)
        return [ConversationRead.from_entity(row) for row in result]

    async def update(
        self,
        conversation_id: str,
        title: Optional[str] = None,
        resource_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ConversationRead:
        """Patch a conversation; ``None`` arguments are left untouched.

        Raises:
            ConversationNotFoundError: If the conversation does not exist
        """
        supplied = {
            key: value
            for key, value in (("title", title), ("resource_id", resource_id), ("metadata", metadata))
            if value is not None
        }
        patch = ConversationUpdate(**supplied)

        row = await self.get_by_visible_id(conversation_id)
        if row is None:
            raise ConversationNotFoundError(conversation_id)

        if patch.title is not None:
            row.title = patch.title
        if patch.resource_id is not None:
            row.resource_id = patch.resource_id
        if patch.metadata is not None:
            row.meta = dict(patch.metadata)
        row.updated_at = utc_now_iso()

        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return ConversationRead.from_entity(row)

    async def remove(self, conversation_id: str) -> MutationResult:
        """Delete a conversation together with its messages and steps.

        Children are deleted first and the conversation last, all in a single
        commit.

        Raises:
            ConversationNotFoundError: If the conversation does not exist
        """
        row = await self.get_by_visible_id(conversation_id)
        if row is None:
            raise ConversationNotFoundError(conversation_id)

        messages = await self._delete_where(Message, Message.conversation_id == conversation_id)
        steps = await self._delete_where(ConversationStep, ConversationStep.conversation_id == conversation_id)
        await self.session.delete(row)
        await self.session.commit()

        logger.info(f"Removed conversation {conversation_id} with {messages} messages and {steps} steps")
        return MutationResult(success=True, id=conversation_id)
