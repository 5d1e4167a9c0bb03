"""Unit tests for the repository bundle."""

from __future__ import annotations

import dataclasses

import pytest

from agentmem.core.database.repositories import (
    ConversationRepository,
    MessageRepository,
    StepRepository,
    WorkflowStateRepository,
    WorkingMemoryRepository,
    build_repos,
)


class TestBuildRepos:
    """Test bundle construction."""

    def test_bundle_shares_one_session(self, in_memory_session):
        bundle = build_repos(in_memory_session)

        assert isinstance(bundle.conversations, ConversationRepository)
        assert isinstance(bundle.messages, MessageRepository)
        assert isinstance(bundle.steps, StepRepository)
        assert isinstance(bundle.working_memory, WorkingMemoryRepository)
        assert isinstance(bundle.workflow_states, WorkflowStateRepository)
        assert {id(repo.session) for repo in (getattr(bundle, f.name) for f in dataclasses.fields(bundle))} == {
            id(in_memory_session)
        }

    def test_bundle_is_frozen(self, in_memory_session):
        bundle = build_repos(in_memory_session)

        with pytest.raises(dataclasses.FrozenInstanceError):
            bundle.messages = None
