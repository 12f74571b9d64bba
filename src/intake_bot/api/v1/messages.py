"""
Inbound chat message endpoint.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from intake_bot.api.deps import get_outbound_sink, get_turn_controller
from intake_bot.core.logging import get_logger
from intake_bot.domain.conversation import Participant
from intake_bot.domain.proposal import Proposal
from intake_bot.domain.ticket import TicketReceipt
from intake_bot.services.delivery import OutboundSink
from intake_bot.services.turn_controller import TurnController

logger = get_logger(__name__)

router = APIRouter()


# Request/Response models
class ParticipantPayload(BaseModel):
    """Sender of an inbound message."""

    user_id: str = Field(..., min_length=1, description="Stable user identifier")
    name: Optional[str] = Field(default=None, description="Display name")
    email: Optional[str] = Field(default=None, description="Email address")


class InboundMessage(BaseModel):
    """Activity forwarded by the chat channel."""

    type: str = Field(default="message", description="Activity type; only 'message' is handled")
    conversation_id: str = Field(..., min_length=1, description="Chat thread identifier")
    participant: ParticipantPayload
    text: Optional[str] = Field(default=None, description="Message text")
    channel_id: Optional[str] = Field(default=None, description="Originating channel")


class MessageResponse(BaseModel):
    """Outcome of an inbound message."""

    status: str
    conversation_key: Optional[str] = None
    reply: Optional[str] = None
    state: Optional[str] = None
    proposal: Optional[Proposal] = None
    ticket: Optional[TicketReceipt] = None
    delivered: Optional[bool] = None


@router.post("/messages", response_model=MessageResponse, response_model_exclude_none=True)
async def receive_message(
    message: InboundMessage,
    controller: TurnController = Depends(get_turn_controller),
    outbound: OutboundSink = Depends(get_outbound_sink),
) -> MessageResponse:
    """
    Handle one chat activity.

    Activities that are not messages, and messages without text, are
    acknowledged and ignored.
    """
    text = (message.text or "").strip()
    if message.type != "message" or not text:
        logger.debug(
            "Ignoring activity",
            activity_type=message.type,
            conversation_id=message.conversation_id,
        )
        return MessageResponse(status="ignored")

    participant = Participant(
        channel_id=message.channel_id,
        **message.participant.model_dump(exclude_none=True),
    )

    logger.info(
        "Processing inbound message",
        conversation_id=message.conversation_id,
        user_id=participant.user_id,
        message_length=len(text),
    )

    result = await controller.handle_message(message.conversation_id, participant, text)
    delivered = await outbound.deliver(result.conversation_key, result.reply)

    return MessageResponse(
        status="processed",
        conversation_key=result.conversation_key,
        reply=result.reply,
        state=result.state.value,
        proposal=result.proposal,
        ticket=result.ticket,
        delivered=delivered,
    )
