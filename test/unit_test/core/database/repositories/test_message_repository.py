"""Unit tests for MessageRepository."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from agentmem.core.config import settings


async def _add_sequence(repos, count: int, conversation_id: str = "conv-1", user_id: str = "user-1"):
    for index in range(count):
        role = "user" if index % 2 == 0 else "assistant"
        await repos.messages.add(
            f"m{index}", conversation_id, user_id, role, [{"type": "text", "text": f"message {index}"}]
        )


class TestMessageUpsert:
    """Test idempotent message upserts."""

    @pytest.mark.asyncio
    async def test_add_new_message_is_created(self, repos, text_parts):
        result = await repos.messages.add("m1", "conv-1", "user-1", "user", text_parts)

        assert result.id == "m1"
        assert result.created is True
        assert result.updated is False

    @pytest.mark.asyncio
    async def test_add_does_not_require_conversation(self, repos, text_parts):
        await repos.messages.add("m1", "no-such-conversation", "user-1", "user", text_parts)

        messages = await repos.messages.get("user-1", "no-such-conversation")
        assert [m.id for m in messages] == ["m1"]

    @pytest.mark.asyncio
    async def test_upsert_is_idempotent(self, repos, clock, text_parts):
        await repos.messages.add("m1", "conv-1", "user-1", "user", text_parts, {"a": 1})
        first = await repos.messages.get("user-1", "conv-1")

        result = await repos.messages.add("m1", "conv-1", "user-1", "user", text_parts, {"a": 1})
        second = await repos.messages.get("user-1", "conv-1")

        assert result.updated is True
        assert [m.model_dump() for m in second] == [m.model_dump() for m in first]

    @pytest.mark.asyncio
    async def test_upsert_overwrites_content_and_keeps_created_at(self, repos, clock, text_parts):
        await repos.messages.add("m1", "conv-1", "user-1", "user", text_parts, {"draft": True})
        created_at = (await repos.messages.get("user-1", "conv-1"))[0].metadata["createdAt"]

        await repos.messages.add("m1", "conv-1", "user-1", "assistant", [{"type": "text", "text": "edited"}])

        messages = await repos.messages.get("user-1", "conv-1")
        assert len(messages) == 1
        assert messages[0].role == "assistant"
        assert messages[0].parts == [{"type": "text", "text": "edited"}]
        assert messages[0].metadata == {"createdAt": created_at}

    @pytest.mark.asyncio
    async def test_parts_round_trip_exactly(self, repos):
        parts = [
            {"type": "text", "text": "Let me check", "providerMetadata": {"openai": {"itemId": "x"}}},
            {"type": "tool-call", "toolCallId": "t1", "toolName": "search", "args": {"q": "weather"}, "state": "call"},
            {"type": "tool-result", "toolCallId": "t1", "toolName": "search", "result": [1, "two", None]},
            {"type": "reasoning", "text": "thinking"},
            {"type": "source", "sourceType": "url", "id": "s1", "url": "https://example.com"},
        ]

        await repos.messages.add("m1", "conv-1", "user-1", "assistant", parts)

        assert (await repos.messages.get("user-1", "conv-1"))[0].parts == parts

    @pytest.mark.asyncio
    async def test_unknown_part_type_is_rejected(self, repos):
        with pytest.raises(ValidationError):
            await repos.messages.add("m1", "conv-1", "user-1", "user", [{"type": "video", "url": "x"}])

        assert await repos.messages.get("user-1", "conv-1") == []

    @pytest.mark.asyncio
    async def test_add_many_returns_one_result_per_input(self, repos, text_parts):
        await repos.messages.add("m1", "conv-1", "user-1", "user", text_parts)

        results = await repos.messages.add_many(
            [
                {"id": "m1", "conversationId": "conv-1", "userId": "user-1", "role": "user", "parts": text_parts},
                {"id": "m2", "conversationId": "conv-1", "userId": "user-1", "role": "user", "parts": text_parts},
            ]
        )

        assert [(r.id, r.created, r.updated) for r in results] == [("m1", False, True), ("m2", True, False)]

    @pytest.mark.asyncio
    async def test_add_many_validates_before_writing(self, repos, text_parts):
        with pytest.raises(ValidationError):
            await repos.messages.add_many(
                [
                    {"id": "m1", "conversationId": "conv-1", "userId": "user-1", "role": "user", "parts": text_parts},
                    {"id": "m2", "conversationId": "conv-1", "userId": "user-1", "role": "user"},
                ]
            )

        assert await repos.messages.get("user-1", "conv-1") == []


class TestMessageWindow:
    """Test windowed message reads."""

    @pytest.mark.asyncio
    async def test_get_returns_chronological_order(self, repos, clock):
        await _add_sequence(repos, 4)

        messages = await repos.messages.get("user-1", "conv-1")

        assert [m.id for m in messages] == ["m0", "m1", "m2", "m3"]

    @pytest.mark.asyncio
    async def test_limit_keeps_most_recent(self, repos, clock):
        await _add_sequence(repos, 150)

        messages = await repos.messages.get("user-1", "conv-1", limit=10)

        assert [m.id for m in messages] == [f"m{index}" for index in range(140, 150)]

    @pytest.mark.asyncio
    async def test_default_limit_is_one_hundred(self, repos, clock):
        await _add_sequence(repos, 150)

        messages = await repos.messages.get("user-1", "conv-1")

        assert len(messages) == settings.memory.default_message_limit == 100
        assert messages[0].id == "m50"
        assert messages[-1].id == "m149"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1])
    async def test_non_positive_limit_uses_default(self, repos, clock, limit):
        await _add_sequence(repos, 105)

        messages = await repos.messages.get("user-1", "conv-1", limit=limit)

        assert len(messages) == settings.memory.default_message_limit
        assert messages[-1].id == "m104"

    @pytest.mark.asyncio
    async def test_identical_timestamps_keep_insertion_order(self, repos, monkeypatch, text_parts):
        monkeypatch.setattr(
            "agentmem.core.database.repositories.messages.utc_now_iso", lambda: "2026-01-01T00:00:00.000Z"
        )
        for index in range(5):
            await repos.messages.add(f"m{index}", "conv-1", "user-1", "user", text_parts)

        messages = await repos.messages.get("user-1", "conv-1", limit=3)

        assert [m.id for m in messages] == ["m2", "m3", "m4"]

    @pytest.mark.asyncio
    async def test_roles_filter(self, repos, clock):
        await _add_sequence(repos, 4)

        assistant = await repos.messages.get("user-1", "conv-1", roles=["assistant"])
        everything = await repos.messages.get("user-1", "conv-1", roles=[])

        assert [m.id for m in assistant] == ["m1", "m3"]
        assert len(everything) == 4

    @pytest.mark.asyncio
    async def test_before_and_after_are_strict(self, repos, clock):
        await _add_sequence(repos, 5)
        stamps = [m.metadata["createdAt"] for m in await repos.messages.get("user-1", "conv-1")]

        between = await repos.messages.get("user-1", "conv-1", after=stamps[1], before=stamps[4])

        assert [m.id for m in between] == ["m2", "m3"]

    @pytest.mark.asyncio
    async def test_metadata_carries_created_at(self, repos, clock, text_parts):
        await repos.messages.add("m1", "conv-1", "user-1", "user", text_parts, {"source": "web"})

        message = (await repos.messages.get("user-1", "conv-1"))[0]

        assert message.metadata == {"source": "web", "createdAt": clock.peek()}

    @pytest.mark.asyncio
    async def test_get_is_scoped_to_user(self, repos, text_parts):
        await repos.messages.add("m1", "conv-1", "user-1", "user", text_parts)
        await repos.messages.add("m2", "conv-1", "user-2", "user", text_parts)

        assert [m.id for m in await repos.messages.get("user-1", "conv-1")] == ["m1"]


class TestMessageClear:
    """Test clearing message history."""

    @pytest.mark.asyncio
    async def test_clear_single_conversation(self, repos, text_parts):
        await repos.conversations.create("conv-1", "agent-1", "user-1", "One")
        await repos.messages.add("m1", "conv-1", "user-1", "user", text_parts)
        await repos.messages.add("m2", "conv-1", "user-2", "user", text_parts)
        await repos.messages.add("m3", "conv-2", "user-1", "user", text_parts)

        result = await repos.messages.clear("user-1", "conv-1")

        assert result.success is True
        assert result.count == 1
        assert await repos.messages.get("user-1", "conv-1") == []
        assert [m.id for m in await repos.messages.get("user-2", "conv-1")] == ["m2"]
        assert [m.id for m in await repos.messages.get("user-1", "conv-2")] == ["m3"]
        assert await repos.conversations.get("conv-1") is not None

    @pytest.mark.asyncio
    async def test_clear_all_conversations_of_user(self, repos, text_parts):
        await repos.conversations.create("conv-1", "agent-1", "user-1", "One")
        await repos.conversations.create("conv-2", "agent-1", "user-1", "Two")
        await repos.conversations.create("conv-3", "agent-1", "user-2", "Other user")
        for conversation_id in ("conv-1", "conv-2", "conv-3"):
            await repos.messages.add(f"{conversation_id}-m", conversation_id, "user-1", "user", text_parts)
        await repos.steps.save(
            [
                {
                    "id": "s1",
                    "conversationId": "conv-2",
                    "userId": "user-1",
                    "agentId": "agent-1",
                    "stepIndex": 0,
                    "type": "text",
                    "role": "assistant",
                }
            ]
        )

        result = await repos.messages.clear("user-1")

        assert result.count == 3
        assert await repos.messages.get("user-1", "conv-1") == []
        assert await repos.messages.get("user-1", "conv-2") == []
        assert await repos.steps.get("user-1", "conv-2") == []
        assert [m.id for m in await repos.messages.get("user-1", "conv-3")] == ["conv-3-m"]
        assert len(await repos.conversations.get_by_user_id("user-1")) == 2
