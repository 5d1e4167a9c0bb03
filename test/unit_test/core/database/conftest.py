"""Test configuration for database unit tests.

Builds on the shared in-memory store fixtures with a session, a repository
bundle and sample payloads.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
from sqlmodel.ext.asyncio.session import AsyncSession

from agentmem.core.database.repositories import build_repos


@pytest.fixture(scope="function")
async def in_memory_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with session_factory() as session:
        yield session


@pytest.fixture(scope="function")
def repos(in_memory_session: AsyncSession):
    """All repositories sharing the test session."""
    return build_repos(in_memory_session)


@pytest.fixture(scope="function")
def sample_conversation_data() -> dict:
    """Sample conversation data for testing."""
    return {
        "conversation_id": "conv-1",
        "resource_id": "agent-1",
        "user_id": "user-1",
        "title": "Support chat",
        "metadata": {"channel": "web"},
    }


@pytest.fixture(scope="function")
def text_parts() -> list:
    """A single text part, as the runtime sends it."""
    return [{"type": "text", "text": "hello"}]


@pytest.fixture(scope="function")
def sample_workflow_state() -> dict:
    """Sample full workflow state payload."""
    return {
        "workflowId": "wf-1",
        "workflowName": "Order fulfilment",
        "status": "running",
        "input": {"orderId": 42},
        "context": [["tenant", "acme"], ["attempt", 1]],
        "userId": "user-1",
        "conversationId": "conv-1",
        "metadata": {"source": "test"},
        "createdAt": "2026-01-01T00:00:00.000Z",
        "updatedAt": "2026-01-01T00:00:00.000Z",
    }
