"""
Process-wide engine and session factory.

Both are built from ``settings.database`` at import time. Creating the engine
does not open a connection; the first query does.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlmodel.ext.asyncio.session import AsyncSession

from agentmem.core.config import settings

from .utils import create_engine, create_sessionmaker

engine = create_engine(settings.database.url, echo=settings.database.echo)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session from the process-wide factory, closing it afterwards."""
    async with async_session_maker() as session:
        yield session
