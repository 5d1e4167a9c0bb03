"""
Working memory repository interface and implementation.

Working memory lives under the ``workingMemory`` key of a conversation's or
a user's metadata map. Conversation-scoped memory requires the conversation
to exist; user-scoped memory creates the user row on first write.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from agentmem.core.errors import ConversationNotFoundError, ErrorKind

from ..base import utc_now_iso
from ..entities.conversations import Conversation
from ..entities.users import User
from ..schemas.common import MutationResult
from ..schemas.working_memory import WORKING_MEMORY_KEY, WorkingMemoryScope
from .base import AsyncBaseRepository

logger = logging.getLogger(__name__)

ScopeArg = Union[WorkingMemoryScope, str]


def _invalid_scope() -> MutationResult:
    return MutationResult(success=False, error=ErrorKind.INVALID_SCOPE)


class WorkingMemoryRepository(AsyncBaseRepository[User]):
    """Repository for scoped working memory using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def _conversation(self, conversation_id: str) -> Optional[Conversation]:
        result = await self.session.exec(select(Conversation).where(Conversation.visible_id == conversation_id))
        return result.first()

    async def get(
        self,
        scope: ScopeArg,
        conversation_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Optional[str]:
        """Read working memory for a scope; None when absent or the scope is invalid."""
        meta: Optional[Dict[str, Any]] = None
        if scope == WorkingMemoryScope.CONVERSATION and conversation_id:
            conversation = await self._conversation(conversation_id)
            meta = conversation.meta if conversation is not None else None
        elif scope == WorkingMemoryScope.USER and user_id:
            user = await self.get_by_visible_id(user_id)
            meta = user.meta if user is not None else None
        return (meta or {}).get(WORKING_MEMORY_KEY)

    async def set(
        self,
        scope: ScopeArg,
        content: str,
        conversation_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> MutationResult:
        """Write working memory for a scope, merging it into the existing metadata.

        Raises:
            ConversationNotFoundError: For conversation scope when the conversation is missing
        """
        now = utc_now_iso()
        if scope == WorkingMemoryScope.CONVERSATION and conversation_id:
            conversation = await self._conversation(conversation_id)
            if conversation is None:
                raise ConversationNotFoundError(conversation_id)
            conversation.meta = {**(conversation.meta or {}), WORKING_MEMORY_KEY: content}
            conversation.updated_at = now
            self.session.add(conversation)
            await self.session.commit()
            logger.debug(f"Set working memory for conversation {conversation_id}")
            return MutationResult(success=True, id=conversation_id)

        if scope == WorkingMemoryScope.USER and user_id:
            user = await self.get_by_visible_id(user_id)
            if user is None:
                user = User(visible_id=user_id, meta={WORKING_MEMORY_KEY: content}, created_at=now, updated_at=now)
                logger.info(f"Created user {user_id} for working memory")
            else:
                user.meta = {**(user.meta or {}), WORKING_MEMORY_KEY: content}
                user.updated_at = now
            self.session.add(user)
            await self.session.commit()
            return MutationResult(success=True, id=user_id)

        return _invalid_scope()

    async def remove(
        self,
        scope: ScopeArg,
        conversation_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> MutationResult:
        """Drop the working memory key for a scope; a missing entity or key is a no-op."""
        if scope == WorkingMemoryScope.CONVERSATION and conversation_id:
            row: Optional[Union[Conversation, User]] = await self._conversation(conversation_id)
            visible_id = conversation_id
        elif scope == WorkingMemoryScope.USER and user_id:
            row = await self.get_by_visible_id(user_id)
            visible_id = user_id
        else:
            return _invalid_scope()

        if row is not None and WORKING_MEMORY_KEY in (row.meta or {}):
            row.meta = {key: value for key, value in row.meta.items() if key != WORKING_MEMORY_KEY}
            row.updated_at = utc_now_iso()
            self.session.add(row)
            await self.session.commit()
            logger.debug(f"Removed working memory for {scope} {visible_id}")
        return MutationResult(success=True, id=visible_id)
