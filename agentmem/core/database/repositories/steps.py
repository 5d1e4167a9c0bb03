"""
Conversation step repository interface and implementation.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence, Union

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..base import utc_now_iso
from ..entities.conversation_steps import ConversationStep
from ..schemas.common import MutationResult
from ..schemas.steps import ConversationStepCreate, ConversationStepRead
from .base import AsyncBaseRepository

logger = logging.getLogger(__name__)


class StepRepository(AsyncBaseRepository[ConversationStep]):
    """Repository for conversation step data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ConversationStep)

    async def _upsert(self, step: ConversationStepCreate) -> None:
        usage = step.usage.to_record() if step.usage is not None else None
        row = await self.get_by_visible_id(step.id)
        if row is None:
            row = ConversationStep(
                visible_id=step.id,
                conversation_id=step.conversation_id,
                user_id=step.user_id,
                agent_id=step.agent_id,
                step_index=step.step_index,
                type=step.type,
                role=step.role,
                created_at=step.created_at or utc_now_iso(),
            )

        # Identity fields and created_at of an existing step are never rewritten
        row.agent_name = step.agent_name
        row.operation_id = step.operation_id
        row.step_index = step.step_index
        row.type = step.type
        row.role = step.role
        row.content = step.content
        row.arguments = step.arguments
        row.result = step.result
        row.usage = usage
        row.sub_agent_id = step.sub_agent_id
        row.sub_agent_name = step.sub_agent_name

        self.session.add(row)
        await self.session.commit()

    async def save(self, steps: Sequence[Union[ConversationStepCreate, Mapping[str, Any]]]) -> MutationResult:
        """Upsert a batch of steps by their external ids.

        Each step is committed on its own; an empty batch writes nothing.
        """
        validated = [ConversationStepCreate.model_validate(step) for step in steps]
        for step in validated:
            await self._upsert(step)
        if validated:
            logger.debug(f"Saved {len(validated)} steps")
        return MutationResult(success=True, count=len(validated))

    async def get(
        self,
        user_id: str,
        conversation_id: str,
        limit: Optional[int] = None,
        operation_id: Optional[str] = None,
    ) -> List[ConversationStepRead]:
        """Get a conversation's steps ordered by ``step_index``.

        A positive ``limit`` keeps only the last ``limit`` steps.
        """
        stmt = select(ConversationStep).where(
            ConversationStep.conversation_id == conversation_id, ConversationStep.user_id == user_id
        )
        if operation_id:
            stmt = stmt.where(ConversationStep.operation_id == operation_id)

        if limit is not None and limit > 0:
            stmt = stmt.order_by(ConversationStep.step_index.desc(), ConversationStep.id.desc()).limit(limit)  # type: ignore[union-attr]
            rows = list(await self.session.exec(stmt))
            rows.reverse()
        else:
            stmt = stmt.order_by(ConversationStep.step_index.asc(), ConversationStep.id.asc())  # type: ignore[union-attr]
            rows = list(await self.session.exec(stmt))

        return [ConversationStepRead.from_entity(row) for row in rows]
