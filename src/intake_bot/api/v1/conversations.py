"""
Conversation administration endpoints.
"""

from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from intake_bot.api.deps import get_conversation_repository
from intake_bot.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ConversationState
from intake_bot.core.exceptions import ConversationNotFoundError
from intake_bot.core.logging import get_logger
from intake_bot.domain.conversation import ConversationRecord
from intake_bot.repositories.conversation_repo import BaseConversationRepository

logger = get_logger(__name__)

router = APIRouter()


class ConversationSummary(BaseModel):
    """Summary of a conversation for list views."""

    conversation_key: str
    conversation_id: str
    user_id: str
    user_name: str
    state: str
    message_count: int
    has_proposal: bool
    ticket_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: ConversationRecord) -> "ConversationSummary":
        return cls(
            conversation_key=record.key,
            conversation_id=record.id,
            user_id=record.participant.user_id,
            user_name=record.participant.name,
            state=record.state,
            message_count=record.message_count,
            has_proposal=record.pending_proposal is not None,
            ticket_id=record.ticket.ticket_id if record.ticket else None,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class ConversationListResponse(BaseModel):
    """Page of conversation summaries."""

    conversations: list[ConversationSummary]
    total: int


@router.get("/conversations", response_model=ConversationListResponse)
async def list_conversations(
    state: Optional[ConversationState] = Query(default=None, description="Filter by lifecycle state"),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    repository: BaseConversationRepository = Depends(get_conversation_repository),
) -> ConversationListResponse:
    """List conversations, most recently active first."""
    filters = {"state": state} if state else None
    records = await repository.list(filters=filters, limit=limit)

    return ConversationListResponse(
        conversations=[ConversationSummary.from_record(r) for r in records],
        total=len(records),
    )


@router.get("/conversations/{conversation_key}")
async def get_conversation(
    conversation_key: str,
    repository: BaseConversationRepository = Depends(get_conversation_repository),
) -> dict[str, Any]:
    """Get a conversation with its full transcript."""
    record = await repository.get(conversation_key)
    if record is None:
        raise ConversationNotFoundError(conversation_key)

    return {"conversation_key": record.key, **record.model_dump(mode="json")}


@router.delete("/conversations/{conversation_key}")
async def delete_conversation(
    conversation_key: str,
    repository: BaseConversationRepository = Depends(get_conversation_repository),
) -> dict[str, str]:
    """Forget a conversation."""
    async with repository.lock(conversation_key):
        deleted = await repository.delete(conversation_key)
    if not deleted:
        raise ConversationNotFoundError(conversation_key)

    logger.info("Conversation deleted", conversation_key=conversation_key)
    return {"status": "deleted", "conversation_key": conversation_key}
