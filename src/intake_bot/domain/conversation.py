"""
Conversation record domain model.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from intake_bot.core.constants import ConversationState, MessageSender
from intake_bot.core.exceptions import StateTransitionError
from intake_bot.domain.proposal import Proposal
from intake_bot.domain.ticket import TicketReceipt
from intake_bot.orchestration.state_machine import CONVERSATION_LIFECYCLE


def conversation_key(conversation_id: str, user_id: str) -> str:
    """Registry key for one user inside one chat thread."""
    return f"{conversation_id}:{user_id}"


class Participant(BaseModel):
    """Identity of the person talking to the bot."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1)
    name: str = Field(default="Usuario")
    email: Optional[str] = None
    channel_id: Optional[str] = None


class ConversationMessage(BaseModel):
    """A message in a conversation."""

    model_config = ConfigDict(use_enum_values=True)

    content: str
    sender: MessageSender
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ConversationRecord(BaseModel):
    """
    Transcript and lifecycle of one user/thread pair.

    All mutation goes through the methods below; they keep
    ``pending_proposal`` set exactly while the record is awaiting
    confirmation.
    """

    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(..., description="Chat thread identifier")
    participant: Participant
    messages: list[ConversationMessage] = Field(default_factory=list)
    state: ConversationState = Field(default=ConversationState.ACTIVE)
    pending_proposal: Optional[Proposal] = None
    ticket: Optional[TicketReceipt] = Field(
        default=None, description="Receipt of the ticket filed from this conversation"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @model_validator(mode="after")
    def check_proposal_invariant(self) -> "ConversationRecord":
        awaiting = self.state == ConversationState.AWAITING_CONFIRMATION
        if awaiting != (self.pending_proposal is not None):
            raise ValueError("pending_proposal must be set exactly while awaiting confirmation")
        return self

    @classmethod
    def create(cls, conversation_id: str, participant: Participant) -> "ConversationRecord":
        """Start a fresh, active conversation."""
        return cls(id=conversation_id, participant=participant)

    @property
    def key(self) -> str:
        return conversation_key(self.id, self.participant.user_id)

    @property
    def message_count(self) -> int:
        return len(self.messages)

    def _touch(self) -> None:
        self.updated_at = datetime.utcnow()

    def append_message(self, content: str, sender: MessageSender | str) -> ConversationMessage:
        """Append a message to the transcript."""
        message = ConversationMessage(content=content, sender=sender)
        self.messages.append(message)
        self._touch()
        return message

    def history(self) -> str:
        """Render the transcript as ``sender: content`` lines, oldest first."""
        return "\n".join(f"{message.sender}: {message.content}" for message in self.messages)

    def set_state(self, state: ConversationState | str) -> None:
        """
        Move the conversation to another lifecycle state.

        Raises:
            StateTransitionError: If the lifecycle does not allow the move, or
                awaiting confirmation is requested without a proposal
        """
        current = ConversationState(self.state)
        target = ConversationState(state)

        if not CONVERSATION_LIFECYCLE.can_transition(current.value, target.value):
            raise StateTransitionError(current.value, target.value)
        if target == ConversationState.AWAITING_CONFIRMATION and self.pending_proposal is None:
            raise StateTransitionError(
                current.value,
                target.value,
                message="Awaiting confirmation requires a pending proposal",
            )

        if target != ConversationState.AWAITING_CONFIRMATION:
            self.pending_proposal = None
        self.state = target.value
        self._touch()

    def set_proposal(self, proposal: Proposal) -> None:
        """Store a proposal and wait for the user's feedback on it."""
        current = ConversationState(self.state)
        target = ConversationState.AWAITING_CONFIRMATION
        if not CONVERSATION_LIFECYCLE.can_transition(current.value, target.value):
            raise StateTransitionError(current.value, target.value)

        self.pending_proposal = proposal
        self.state = target.value
        self._touch()

    def record_ticket(self, receipt: TicketReceipt) -> None:
        """Mark the pending proposal as filed and close the conversation."""
        self.set_state(ConversationState.COMPLETED)
        self.ticket = receipt

    def clear_for_new_topic(self) -> None:
        """Forget the transcript and proposal, keeping who we are talking to."""
        self.messages = []
        self.pending_proposal = None
        self.ticket = None
        self.state = ConversationState.ACTIVE.value
        self._touch()

    def is_awaiting_confirmation(self) -> bool:
        return self.state == ConversationState.AWAITING_CONFIRMATION

    @property
    def is_completed(self) -> bool:
        return self.state == ConversationState.COMPLETED
