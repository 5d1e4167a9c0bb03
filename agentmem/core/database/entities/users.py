"""
User entity models.

Users are created lazily the first time user-scoped working memory is
written; they carry nothing but a metadata map.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base


class User(Base, table=True):
    """Entity for users holding user-scoped working memory.

    Table: am_users
    """

    __tablename__ = "am_users"

    id: Optional[int] = Field(default=None, primary_key=True)
    visible_id: str = Field(max_length=255, unique=True, index=True)

    meta: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column("metadata", JSON, nullable=True))

    created_at: str = Field(max_length=32)
    updated_at: str = Field(max_length=32)

    def __repr__(self) -> str:
        return f"User(id={self.visible_id})"
