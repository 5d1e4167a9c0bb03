"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances
sharing one session, for use by services that span several entities.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlmodel.ext.asyncio.session import AsyncSession

from .conversations import ConversationRepository
from .messages import MessageRepository
from .steps import StepRepository
from .workflow_states import WorkflowStateRepository
from .working_memory import WorkingMemoryRepository


@dataclass(frozen=True)
class RepoBundle:
    """Convenience bundle of all memory repositories for dependency injection."""

    conversations: ConversationRepository
    messages: MessageRepository
    steps: StepRepository
    working_memory: WorkingMemoryRepository
    workflow_states: WorkflowStateRepository


def build_repos(session: AsyncSession) -> RepoBundle:
    """Build a RepoBundle over an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return RepoBundle(
        conversations=ConversationRepository(session),
        messages=MessageRepository(session),
        steps=StepRepository(session),
        working_memory=WorkingMemoryRepository(session),
        workflow_states=WorkflowStateRepository(session),
    )
