"""
Base repository interfaces and utilities.

This module provides the foundational repository pattern shared by every
repository of the memory store. Repositories address rows by their external
``visible_id``; the integer primary key never leaves the database layer.
"""

from __future__ import annotations

from abc import ABC
from typing import Any, Generic, Optional, Type, TypeVar

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(ABC, Generic[EntityType]):
    """Base async repository with the lookups common to every entity."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with async database session and SQLModel entity class.

        Args:
            session: Async SQLModel session for database operations
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model

    async def get_by_visible_id(self, visible_id: str) -> Optional[EntityType]:
        """Get an entity by its external identifier.

        Args:
            visible_id: Caller-supplied identifier

        Returns:
            Entity instance or None if not found
        """
        stmt = select(self.model).where(self.model.visible_id == visible_id)  # type: ignore[attr-defined]
        result = await self.session.exec(stmt)
        return result.first()

    async def _delete_where(self, model: Type[SQLModel], *criteria: Any) -> int:
        """Delete every row of ``model`` matching ``criteria`` without committing.

        Returns:
            Number of deleted rows
        """
        result = await self.session.exec(select(model).where(*criteria))
        rows = list(result)
        for row in rows:
            await self.session.delete(row)
        return len(rows)
