"""Shared fixtures: an in-memory SQLite store and a deterministic clock."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import AsyncGenerator

import pytest
from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from agentmem.core.database import entities  # noqa: F401
from agentmem.core.database.base import Base, to_iso
from agentmem.core.database.utils import create_sessionmaker

TEST_ROOT = Path(__file__).resolve().parent

# Load test/.env so fixtures and settings can read local overrides
load_dotenv(TEST_ROOT / ".env", override=False)

# Modules that stamp records with the current time
CLOCK_MODULES = (
    "agentmem.core.database.repositories.conversations",
    "agentmem.core.database.repositories.messages",
    "agentmem.core.database.repositories.steps",
    "agentmem.core.database.repositories.working_memory",
    "agentmem.core.database.repositories.workflow_states",
)


class FakeClock:
    """Returns strictly increasing storage timestamps, one second apart."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, tzinfo=timezone.utc)) -> None:
        self.current = start

    def __call__(self) -> str:
        self.current += timedelta(seconds=1)
        return to_iso(self.current)

    def peek(self) -> str:
        return to_iso(self.current)


@pytest.fixture(scope="function")
async def in_memory_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(in_memory_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the in-memory engine."""
    return create_sessionmaker(in_memory_engine)


@pytest.fixture(scope="function")
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    """Replace the repositories' wall clock with a ticking fake."""
    fake = FakeClock()
    for module in CLOCK_MODULES:
        monkeypatch.setattr(f"{module}.utc_now_iso", fake)
    return fake
