"""
Database layer of the memory store.

Structure:
- entities/: SQLModel table definitions and their indexes
- schemas/: pydantic models validating input and shaping output
- repositories/: async data access, one repository per entity
- session.py: Global engine and session factory management
- utils.py: Engine and session factory helpers
"""

from .base import Base, from_iso, to_iso, utc_now_iso
from .repositories import RepoBundle, build_repos
from .session import async_session_maker, engine, get_session
from .utils import create_all, create_engine, create_sessionmaker, normalize_url

__all__ = [
    "Base",
    "RepoBundle",
    "async_session_maker",
    "build_repos",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "from_iso",
    "get_session",
    "normalize_url",
    "to_iso",
    "utc_now_iso",
]
