"""
Tests for the in-memory conversation repository.
"""

from datetime import datetime, timedelta

import pytest

from intake_bot.core.constants import ConversationState, MessageSender
from intake_bot.domain.conversation import ConversationRecord, Participant
from intake_bot.domain.proposal import Proposal
from intake_bot.repositories.conversation_repo import InMemoryConversationRepository


async def _completed(
    repository: InMemoryConversationRepository,
    conversation_id: str,
    participant: Participant,
    proposal: Proposal,
    idle_minutes: int,
) -> ConversationRecord:
    record = ConversationRecord.create(conversation_id, participant)
    record.set_proposal(proposal)
    record.set_state(ConversationState.COMPLETED)
    record.updated_at = datetime.utcnow() - timedelta(minutes=idle_minutes)
    await repository.save(record)
    return record


class TestInMemoryConversationRepository:
    """Tests for InMemoryConversationRepository."""

    @pytest.mark.asyncio
    async def test_get_or_create_is_idempotent(
        self,
        repository: InMemoryConversationRepository,
        participant: Participant,
    ):
        first = await repository.get_or_create("19:thread-1", participant)
        first.append_message("hola", MessageSender.USER)
        await repository.save(first)

        second = await repository.get_or_create("19:thread-1", participant)

        assert second.key == first.key
        assert second.message_count == 1

    @pytest.mark.asyncio
    async def test_unsaved_changes_do_not_leak(
        self,
        repository: InMemoryConversationRepository,
        participant: Participant,
    ):
        record = await repository.get_or_create("19:thread-1", participant)
        record.append_message("hola", MessageSender.USER)

        stored = await repository.get(record.key)

        assert stored.message_count == 0

    @pytest.mark.asyncio
    async def test_delete_and_exists(
        self,
        repository: InMemoryConversationRepository,
        participant: Participant,
    ):
        record = await repository.get_or_create("19:thread-1", participant)

        assert await repository.exists(record.key)
        assert await repository.delete(record.key)
        assert not await repository.exists(record.key)
        assert not await repository.delete(record.key)
        assert await repository.get(record.key) is None

    @pytest.mark.asyncio
    async def test_list_filters_by_state(
        self,
        repository: InMemoryConversationRepository,
        participant: Participant,
        sample_proposal: Proposal,
    ):
        await repository.get_or_create("19:active", participant)
        await _completed(repository, "19:done", participant, sample_proposal, idle_minutes=5)

        active = await repository.list(filters={"state": "active"})
        completed = await repository.list(filters={"state": ConversationState.COMPLETED})

        assert [r.id for r in active] == ["19:active"]
        assert [r.id for r in completed] == ["19:done"]

    @pytest.mark.asyncio
    async def test_list_orders_by_recent_activity(
        self,
        repository: InMemoryConversationRepository,
        participant: Participant,
        sample_proposal: Proposal,
    ):
        await _completed(repository, "19:old", participant, sample_proposal, idle_minutes=30)
        await _completed(repository, "19:recent", participant, sample_proposal, idle_minutes=1)

        records = await repository.list(limit=1)

        assert [r.id for r in records] == ["19:recent"]

    @pytest.mark.asyncio
    async def test_lock_is_per_key(self, repository: InMemoryConversationRepository):
        assert repository.lock("a:1") is repository.lock("a:1")
        assert repository.lock("a:1") is not repository.lock("b:1")

    @pytest.mark.asyncio
    async def test_delete_under_lock_forgets_the_lock(
        self,
        repository: InMemoryConversationRepository,
        participant: Participant,
    ):
        record = await repository.get_or_create("19:thread-1", participant)

        async with repository.lock(record.key):
            assert await repository.delete(record.key)

        assert repository._locks == {}

    @pytest.mark.asyncio
    async def test_deleting_unknown_keys_does_not_accumulate_locks(
        self,
        repository: InMemoryConversationRepository,
    ):
        for index in range(50):
            key = f"19:ghost-{index}:29:nobody"
            async with repository.lock(key):
                assert not await repository.delete(key)

        assert repository._locks == {}

    @pytest.mark.asyncio
    async def test_cleanup_evicts_idle_completed_only(
        self,
        repository: InMemoryConversationRepository,
        participant: Participant,
        sample_proposal: Proposal,
    ):
        stale_active = await repository.get_or_create("19:active", participant)
        stale_active.updated_at = datetime.utcnow() - timedelta(minutes=600)
        await repository.save(stale_active)
        await _completed(repository, "19:idle", participant, sample_proposal, idle_minutes=120)
        await _completed(repository, "19:fresh", participant, sample_proposal, idle_minutes=5)

        evicted = await repository.cleanup_expired(max_idle_minutes=60)

        assert evicted == 1
        assert await repository.exists("19:active:29:user-1")
        assert await repository.exists("19:fresh:29:user-1")
        assert not await repository.exists("19:idle:29:user-1")

    @pytest.mark.asyncio
    async def test_cleanup_skips_locked_conversations(
        self,
        repository: InMemoryConversationRepository,
        participant: Participant,
        sample_proposal: Proposal,
    ):
        record = await _completed(repository, "19:idle", participant, sample_proposal, idle_minutes=120)

        async with repository.lock(record.key):
            assert await repository.cleanup_expired(max_idle_minutes=60) == 0

        assert await repository.cleanup_expired(max_idle_minutes=60) == 1
