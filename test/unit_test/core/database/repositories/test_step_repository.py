"""Unit tests for StepRepository."""

from __future__ import annotations

import pytest
from pydantic import ValidationError


def _step(step_id: str, step_index: int, **overrides) -> dict:
    step = {
        "id": step_id,
        "conversationId": "conv-1",
        "userId": "user-1",
        "agentId": "agent-1",
        "agentName": "Helper",
        "operationId": "op-1",
        "stepIndex": step_index,
        "type": "tool_call",
        "role": "assistant",
        "arguments": {"query": "weather"},
        "usage": {"promptTokens": 10, "completionTokens": 5, "totalTokens": 15},
    }
    step.update(overrides)
    return step


class TestStepSave:
    """Test step upserts."""

    @pytest.mark.asyncio
    async def test_save_returns_count(self, repos):
        result = await repos.steps.save([_step("s1", 0), _step("s2", 1)])

        assert result.success is True
        assert result.count == 2

    @pytest.mark.asyncio
    async def test_save_empty_is_noop(self, repos):
        result = await repos.steps.save([])

        assert result.count == 0
        assert await repos.steps.get("user-1", "conv-1") == []

    @pytest.mark.asyncio
    async def test_save_honors_caller_created_at(self, repos):
        await repos.steps.save([_step("s1", 0, createdAt="2025-06-01T10:00:00.000Z")])

        step = (await repos.steps.get("user-1", "conv-1"))[0]

        assert step.created_at == "2025-06-01T10:00:00.000Z"

    @pytest.mark.asyncio
    async def test_save_defaults_created_at_to_now(self, repos, clock):
        await repos.steps.save([_step("s1", 0)])

        step = (await repos.steps.get("user-1", "conv-1"))[0]

        assert step.created_at == clock.peek()

    @pytest.mark.asyncio
    async def test_upsert_patches_content_but_not_identity(self, repos):
        await repos.steps.save([_step("s1", 0, createdAt="2025-06-01T10:00:00.000Z")])

        await repos.steps.save(
            [
                _step(
                    "s1",
                    3,
                    conversationId="conv-other",
                    userId="user-other",
                    agentId="agent-other",
                    type="tool_result",
                    result={"temperature": 21},
                    subAgentId="sub-1",
                    subAgentName="Weather",
                    createdAt="2030-01-01T00:00:00.000Z",
                )
            ]
        )

        steps = await repos.steps.get("user-1", "conv-1")
        assert len(steps) == 1
        step = steps[0]
        assert step.conversation_id == "conv-1"
        assert step.user_id == "user-1"
        assert step.agent_id == "agent-1"
        assert step.created_at == "2025-06-01T10:00:00.000Z"
        assert step.step_index == 3
        assert step.type == "tool_result"
        assert step.result == {"temperature": 21}
        assert step.sub_agent_id == "sub-1"
        assert step.sub_agent_name == "Weather"

    @pytest.mark.asyncio
    async def test_usage_round_trip(self, repos):
        await repos.steps.save([_step("s1", 0)])

        step = (await repos.steps.get("user-1", "conv-1"))[0]

        assert step.usage is not None
        assert step.usage.to_record() == {"promptTokens": 10, "completionTokens": 5, "totalTokens": 15}

    @pytest.mark.asyncio
    async def test_invalid_step_is_rejected(self, repos):
        with pytest.raises(ValidationError):
            await repos.steps.save([_step("s1", 0), _step("s2", "not-an-index")])

        assert await repos.steps.get("user-1", "conv-1") == []


class TestStepGet:
    """Test step reads."""

    @pytest.mark.asyncio
    async def test_get_orders_by_step_index(self, repos):
        await repos.steps.save([_step("s2", 2), _step("s0", 0), _step("s1", 1)])

        steps = await repos.steps.get("user-1", "conv-1")

        assert [s.id for s in steps] == ["s0", "s1", "s2"]

    @pytest.mark.asyncio
    async def test_positive_limit_keeps_last_steps(self, repos):
        await repos.steps.save([_step(f"s{index}", index) for index in range(6)])

        steps = await repos.steps.get("user-1", "conv-1", limit=2)

        assert [s.id for s in steps] == ["s4", "s5"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1, None])
    async def test_non_positive_limit_returns_everything(self, repos, limit):
        await repos.steps.save([_step(f"s{index}", index) for index in range(4)])

        steps = await repos.steps.get("user-1", "conv-1", limit=limit)

        assert len(steps) == 4

    @pytest.mark.asyncio
    async def test_filter_by_operation_and_user(self, repos):
        await repos.steps.save(
            [
                _step("s0", 0, operationId="op-1"),
                _step("s1", 1, operationId="op-2"),
                _step("s2", 2, operationId="op-1", userId="user-2"),
            ]
        )

        steps = await repos.steps.get("user-1", "conv-1", operation_id="op-1")

        assert [s.id for s in steps] == ["s0"]
