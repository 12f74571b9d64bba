"""
Conversation repository for managing conversation records.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from intake_bot.core.constants import ConversationState
from intake_bot.core.logging import get_logger
from intake_bot.domain.conversation import ConversationRecord, Participant

logger = get_logger(__name__)


class BaseConversationRepository(ABC):
    """
    Store of conversation records keyed by ``conversation_id:user_id``.

    Callers hold ``lock(key)`` for the whole read-modify-save of a turn so
    that at most one mutation per key is in flight.
    """

    @abstractmethod
    async def get(self, id: str) -> Optional[ConversationRecord]:
        """Get a conversation by key."""
        ...

    @abstractmethod
    async def save(self, entity: ConversationRecord) -> ConversationRecord:
        """Save a conversation under its key."""
        ...

    @abstractmethod
    async def delete(self, id: str) -> bool:
        """
        Delete a conversation by key.

        Also forgets the key's lock, so callers may delete while holding it.
        """
        ...

    @abstractmethod
    async def list(
        self,
        filters: Optional[dict[str, Any]] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[ConversationRecord]:
        """List conversations; filters may hold ``state`` and ``user_id``."""
        ...

    @abstractmethod
    async def exists(self, id: str) -> bool:
        """Check if a conversation exists."""
        ...

    @abstractmethod
    def lock(self, key: str) -> asyncio.Lock:
        """Get the lock serializing mutations of one conversation."""
        ...

    @abstractmethod
    async def get_or_create(
        self,
        conversation_id: str,
        participant: Participant,
    ) -> ConversationRecord:
        """Get the record for this thread and user, creating it if missing."""
        ...

    @abstractmethod
    async def cleanup_expired(self, max_idle_minutes: int) -> int:
        """Evict completed conversations idle for longer than the bound."""
        ...


class InMemoryConversationRepository(BaseConversationRepository):
    """
    In-memory conversation repository.

    Records are stored as copies so that a caller's unsaved edits never leak
    into the store.
    """

    def __init__(self) -> None:
        self._records: dict[str, ConversationRecord] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def lock(self, key: str) -> asyncio.Lock:
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    async def get(self, id: str) -> Optional[ConversationRecord]:
        """Get a conversation by key."""
        record = self._records.get(id)
        return record.model_copy(deep=True) if record else None

    async def get_or_create(
        self,
        conversation_id: str,
        participant: Participant,
    ) -> ConversationRecord:
        record = ConversationRecord.create(conversation_id, participant)
        existing = await self.get(record.key)
        if existing is not None:
            return existing

        self._records[record.key] = record.model_copy(deep=True)
        logger.info(
            "Conversation created",
            conversation_key=record.key,
            user_id=participant.user_id,
        )
        return record

    async def save(self, entity: ConversationRecord) -> ConversationRecord:
        """Save a conversation."""
        self._records[entity.key] = entity.model_copy(deep=True)
        logger.debug("Conversation saved", conversation_key=entity.key, state=entity.state)
        return entity

    async def delete(self, id: str) -> bool:
        """Delete a conversation by key and drop its lock entry."""
        self._locks.pop(id, None)
        if id not in self._records:
            return False

        del self._records[id]
        logger.debug("Conversation deleted", conversation_key=id)
        return True

    async def list(
        self,
        filters: Optional[dict[str, Any]] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[ConversationRecord]:
        """List conversations with optional filters."""
        records = list(self._records.values())

        if filters:
            if "state" in filters:
                state = ConversationState(filters["state"])
                records = [r for r in records if r.state == state]
            if "user_id" in filters:
                records = [r for r in records if r.participant.user_id == filters["user_id"]]

        # Most recently active first
        records.sort(key=lambda r: r.updated_at, reverse=True)

        return [r.model_copy(deep=True) for r in records[offset : offset + limit]]

    async def exists(self, id: str) -> bool:
        """Check if a conversation exists."""
        return id in self._records

    async def cleanup_expired(self, max_idle_minutes: int) -> int:
        """Clean up completed conversations nobody has touched for a while."""
        now = datetime.utcnow()
        expired_keys = []

        for key, record in self._records.items():
            if record.state != ConversationState.COMPLETED:
                continue
            if self.lock(key).locked():
                continue
            idle_minutes = (now - record.updated_at).total_seconds() / 60
            if idle_minutes >= max_idle_minutes:
                expired_keys.append(key)

        for key in expired_keys:
            del self._records[key]
            self._locks.pop(key, None)

        if expired_keys:
            logger.info("Evicted idle conversations", count=len(expired_keys))

        return len(expired_keys)
