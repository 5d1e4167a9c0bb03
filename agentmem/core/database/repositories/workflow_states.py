"""
Workflow state repository interface and implementation.

This module provides data access operations for suspendable workflow
executions: full create-or-replace writes, sparse patches, run history
queries and lookup of the runs waiting to be resumed.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Union

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from agentmem.core.errors import WorkflowStateNotFoundError

from ..base import utc_now_iso
from ..entities.workflow_states import WorkflowStateRecord
from ..schemas.common import MutationResult
from ..schemas.workflow_states import (
    WorkflowStateRead,
    WorkflowStateSet,
    WorkflowStateUpdate,
    WorkflowStatus,
    storage_value,
)
from .base import AsyncBaseRepository

logger = logging.getLogger(__name__)

# Payload fields rewritten by ``set``; identity and created_at are handled separately
_REPLACED_FIELDS = (
    "workflow_id",
    "workflow_name",
    "status",
    "input",
    "context",
    "suspension",
    "events",
    "output",
    "cancellation",
    "user_id",
    "conversation_id",
)


def _status_value(status: Union[WorkflowStatus, str]) -> str:
    # Unknown statuses are compared as-is and match nothing
    return status.value if isinstance(status, WorkflowStatus) else status


class WorkflowStateRepository(AsyncBaseRepository[WorkflowStateRecord]):
    """Repository for workflow execution state using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, WorkflowStateRecord)

    async def get(self, execution_id: str) -> Optional[WorkflowStateRead]:
        """Get a workflow execution by id."""
        row = await self.get_by_visible_id(execution_id)
        return WorkflowStateRead.from_entity(row) if row is not None else None

    async def query_runs(
        self,
        workflow_id: Optional[str] = None,
        status: Optional[Union[WorkflowStatus, str]] = None,
        from_: Optional[str] = None,
        to: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[WorkflowStateRead]:
        """Query workflow runs, newest first.

        Args:
            workflow_id: Restrict to one workflow definition
            status: Restrict to one status
            from_: Only runs created at or after this timestamp
            to: Only runs created at or before this timestamp
            limit: Page size; None returns every run after ``offset``
            offset: Runs to skip

        Returns:
            List of workflow executions
        """
        stmt = select(WorkflowStateRecord)
        if workflow_id:
            stmt = stmt.where(WorkflowStateRecord.workflow_id == workflow_id)
        if status:
            stmt = stmt.where(WorkflowStateRecord.status == _status_value(status))
        if from_:
            stmt = stmt.where(WorkflowStateRecord.created_at >= from_)
        if to:
            stmt = stmt.where(WorkflowStateRecord.created_at <= to)
        stmt = stmt.order_by(WorkflowStateRecord.created_at.desc(), WorkflowStateRecord.id.desc())  # type: ignore[union-attr]

        if limit is not None:
            stmt = stmt.offset(offset or 0).limit(limit)
        elif offset:
            stmt = stmt.offset(offset)

        result = await self.session.exec(stmt)
        return [WorkflowStateRead.from_entity(row) for row in result]

    async def set(self, execution_id: str, state: Union[WorkflowStateSet, Mapping[str, Any]]) -> MutationResult:
        """Create or fully replace a workflow execution.

        Every field of an existing record is overwritten, unsupplied optionals
        becoming null, except ``created_at`` which keeps its first value.
        """
        payload = WorkflowStateSet.model_validate(state)
        values = {name: storage_value(getattr(payload, name)) for name in _REPLACED_FIELDS}
        meta = dict(payload.metadata) if payload.metadata is not None else None

        row = await self.get_by_visible_id(execution_id)
        if row is None:
            row = WorkflowStateRecord(
                visible_id=execution_id,
                meta=meta,
                created_at=payload.created_at,
                updated_at=payload.updated_at,
                **values,
            )
            logger.info(f"Recorded workflow execution {execution_id} ({payload.workflow_name})")
        else:
            for name, value in values.items():
                setattr(row, name, value)
            row.meta = meta
            row.updated_at = payload.updated_at

        self.session.add(row)
        await self.session.commit()
        return MutationResult(success=True, id=execution_id)

    async def update(self, execution_id: str, **fields: Any) -> MutationResult:
        """Patch the explicitly supplied fields of a workflow execution.

        Accepts ``status``, ``suspension``, ``events``, ``output``,
        ``cancellation`` and ``metadata``; an explicit ``None`` clears the field.
        Other fields are ignored and ``updated_at`` is always set to now.

        Raises:
            WorkflowStateNotFoundError: If the execution was never recorded
        """
        patch = WorkflowStateUpdate.model_validate(fields)

        row = await self.get_by_visible_id(execution_id)
        if row is None:
            raise WorkflowStateNotFoundError(execution_id)

        for name in patch.model_fields_set:
            value = storage_value(getattr(patch, name))
            if name == "metadata":
                row.meta = dict(value) if value is not None else None
            else:
                setattr(row, name, value)
        row.updated_at = utc_now_iso()

        self.session.add(row)
        await self.session.commit()
        logger.debug(f"Updated workflow execution {execution_id}: {sorted(patch.model_fields_set)}")
        return MutationResult(success=True, id=execution_id)

    async def get_suspended(self, workflow_id: str) -> List[WorkflowStateRead]:
        """Get every suspended run of a workflow, newest first."""
        stmt = (
            select(WorkflowStateRecord)
            .where(
                WorkflowStateRecord.workflow_id == workflow_id,
                WorkflowStateRecord.status == WorkflowStatus.SUSPENDED.value,
            )
            .order_by(WorkflowStateRecord.created_at.desc(), WorkflowStateRecord.id.desc())  # type: ignore[union-attr]
        )
        result = await self.session.exec(stmt)
        return [WorkflowStateRead.from_entity(row) for row in result]
