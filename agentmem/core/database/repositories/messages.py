"""
Message repository interface and implementation.

This module provides data access operations for conversation messages:
idempotent upserts keyed by the external message id, windowed history
reads and bulk clearing of a user's history.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from agentmem.core.config import settings

from ..base import utc_now_iso
from ..entities.conversation_steps import ConversationStep
from ..entities.conversations import Conversation
from ..entities.messages import Message
from ..schemas.common import MutationResult
from ..schemas.message_parts import dump_parts
from ..schemas.messages import MessageCreate, MessageRead, MessageUpsertResult
from .base import AsyncBaseRepository

logger = logging.getLogger(__name__)


class MessageRepository(AsyncBaseRepository[Message]):
    """Repository for message data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Message)

    async def _upsert(self, message: MessageCreate) -> MessageUpsertResult:
        parts = dump_parts(message.parts)
        row = await self.get_by_visible_id(message.id)
        if row is not None:
            row.role = message.role
            row.parts = parts
            row.meta = dict(message.metadata) if message.metadata is not None else None
            self.session.add(row)
            await self.session.commit()
            return MessageUpsertResult(id=message.id, updated=True)

        row = Message(
            visible_id=message.id,
            conversation_id=message.conversation_id,
            user_id=message.user_id,
            role=message.role,
            parts=parts,
            meta=dict(message.metadata) if message.metadata is not None else None,
            created_at=utc_now_iso(),
        )
        self.session.add(row)
        await self.session.commit()
        return MessageUpsertResult(id=message.id, created=True)

    async def add(
        self,
        message_id: str,
        conversation_id: str,
        user_id: str,
        role: str,
        parts: Sequence[Any],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> MessageUpsertResult:
        """Insert a message or overwrite the role, parts and metadata of an existing one.

        The conversation is not required to exist. ``created_at`` of an
        existing message is preserved.
        """
        message = MessageCreate(
            id=message_id,
            conversation_id=conversation_id,
            user_id=user_id,
            role=role,
            parts=list(parts),
            metadata=metadata,
        )
        result = await self._upsert(message)
        logger.debug(f"Upserted message {message.id} in conversation {conversation_id} (created={result.created})")
        return result

    async def add_many(self, messages: Sequence[Union[MessageCreate, Mapping[str, Any]]]) -> List[MessageUpsertResult]:
        """Upsert a batch of messages in order.

        The whole batch is validated first; each message is then committed on
        its own, so a failure midway leaves the earlier messages stored.
        """
        validated = [MessageCreate.model_validate(message) for message in messages]
        results = []
        for message in validated:
            results.append(await self._upsert(message))
        logger.debug(f"Upserted {len(results)} messages")
        return results

    async def get(
        self,
        user_id: str,
        conversation_id: str,
        limit: Optional[int] = None,
        before: Optional[str] = None,
        after: Optional[str] = None,
        roles: Optional[Sequence[str]] = None,
    ) -> List[MessageRead]:
        """Get the most recent messages of a conversation in chronological order.

        Args:
            user_id: Message owner
            conversation_id: Conversation to read
            limit: Window size; None or non-positive means the configured default (100)
            before: Only messages created strictly before this timestamp
            after: Only messages created strictly after this timestamp
            roles: Only messages with one of these roles; empty means all

        Returns:
            Up to ``limit`` newest matching messages, oldest first
        """
        stmt = select(Message).where(Message.conversation_id == conversation_id, Message.user_id == user_id)
        if roles:
            stmt = stmt.where(Message.role.in_(list(roles)))  # type: ignore[attr-defined]
        if before:
            stmt = stmt.where(Message.created_at < before)
        if after:
            stmt = stmt.where(Message.created_at > after)
        stmt = stmt.order_by(Message.created_at.desc(), Message.id.desc()).limit(  # type: ignore[union-attr]
            limit if limit and limit > 0 else settings.memory.default_message_limit
        )

        result = await self.session.exec(stmt)
        rows = list(result)
        rows.reverse()
        logger.debug(f"Loaded {len(rows)} messages from conversation {conversation_id}")
        return [MessageRead.from_entity(row) for row in rows]

    async def clear(self, user_id: str, conversation_id: Optional[str] = None) -> MutationResult:
        """Delete messages and steps, keeping the conversations themselves.

        With ``conversation_id`` only that user's records in that conversation
        are removed; otherwise every record of every conversation the user owns.
        """
        if conversation_id:
            count = await self._delete_where(
                Message, Message.conversation_id == conversation_id, Message.user_id == user_id
            )
            count += await self._delete_where(
                ConversationStep,
                ConversationStep.conversation_id == conversation_id,
                ConversationStep.user_id == user_id,
            )
        else:
            owned = await self.session.exec(select(Conversation.visible_id).where(Conversation.user_id == user_id))
            count = 0
            for visible_id in list(owned):
                count += await self._delete_where(Message, Message.conversation_id == visible_id)
                count += await self._delete_where(ConversationStep, ConversationStep.conversation_id == visible_id)

        await self.session.commit()
        logger.info(f"Cleared {count} messages and steps for user {user_id}")
        return MutationResult(success=True, count=count)
