"""
Turn controller: runs one inbound message through the conversation lifecycle.
"""

import re
from typing import Optional

from pydantic import BaseModel

from intake_bot.agentic.feedback_classifier import FeedbackClassifier
from intake_bot.agentic.guide import ConversationGuide
from intake_bot.agentic.proposal_generator import ProposalGenerator
from intake_bot.agentic.readiness import ReadinessOracle
from intake_bot.core.constants import (
    GREETING_WORDS,
    NEW_TOPIC_PHRASES,
    Confidence,
    ConversationState,
    FeedbackAction,
    MessageSender,
)
from intake_bot.core.exceptions import TicketSubmissionError
from intake_bot.core.logging import LogContext, get_logger
from intake_bot.domain.conversation import ConversationRecord, Participant, conversation_key
from intake_bot.domain.proposal import Proposal
from intake_bot.domain.ticket import TicketReceipt
from intake_bot.repositories.conversation_repo import BaseConversationRepository
from intake_bot.services.replies import ReplyTemplates
from intake_bot.services.ticket_service import TicketRequest, TicketSink

logger = get_logger(__name__)


def _normalize(text: str) -> str:
    return " ".join(re.findall(r"\w+", text.lower()))


def is_greeting(text: str) -> bool:
    """True when the text is nothing but greeting words and punctuation."""
    tokens = re.findall(r"\w+", text.lower())
    return bool(tokens) and all(token in GREETING_WORDS for token in tokens)


def is_new_topic(text: str) -> bool:
    """True when the user asks to start over with another initiative."""
    padded = f" {_normalize(text)} "
    return any(f" {_normalize(phrase)} " in padded for phrase in NEW_TOPIC_PHRASES)


class TurnResult(BaseModel):
    """Outcome of one handled message."""

    conversation_key: str
    reply: str
    state: ConversationState
    proposal: Optional[Proposal] = None
    ticket: Optional[TicketReceipt] = None


class TurnController:
    """
    Orchestrates a conversation turn.

    Each turn holds the conversation's lock, works on a private copy of the
    record and saves it only once the reply is ready. If anything unexpected
    fails the copy is dropped, so the stored record is exactly as it was
    before the message arrived.
    """

    def __init__(
        self,
        repository: BaseConversationRepository,
        readiness: ReadinessOracle,
        guide: ConversationGuide,
        generator: ProposalGenerator,
        classifier: FeedbackClassifier,
        ticket_sink: TicketSink,
        replies: Optional[ReplyTemplates] = None,
    ) -> None:
        self.repository = repository
        self.readiness = readiness
        self.guide = guide
        self.generator = generator
        self.classifier = classifier
        self.ticket_sink = ticket_sink
        self.replies = replies or ReplyTemplates()

    async def handle_message(
        self,
        conversation_id: str,
        participant: Participant,
        text: str,
    ) -> TurnResult:
        """
        Handle one user message and produce the bot's reply.

        Args:
            conversation_id: Chat thread identifier
            participant: Who sent the message
            text: Message text

        Returns:
            The reply together with the resulting conversation state
        """
        key = conversation_key(conversation_id, participant.user_id)

        async with self.repository.lock(key):
            with LogContext(conversation_key=key):
                conversation = await self.repository.get_or_create(conversation_id, participant)
                previous_state = conversation.state

                try:
                    reply = await self._run_turn(conversation, text)
                    conversation.append_message(reply, MessageSender.BOT)
                    await self.repository.save(conversation)
                except Exception as e:
                    logger.exception("Turn failed, conversation left unchanged", error=str(e))
                    stored = await self.repository.get(key)
                    return TurnResult(
                        conversation_key=key,
                        reply=self.replies.apology(),
                        state=stored.state if stored else previous_state,
                        proposal=stored.pending_proposal if stored else None,
                        ticket=stored.ticket if stored else None,
                    )

                logger.info(
                    "Turn handled",
                    from_state=previous_state,
                    to_state=conversation.state,
                    message_count=conversation.message_count,
                )
                return TurnResult(
                    conversation_key=key,
                    reply=reply,
                    state=conversation.state,
                    proposal=conversation.pending_proposal,
                    ticket=conversation.ticket,
                )

    async def _run_turn(self, conversation: ConversationRecord, text: str) -> str:
        if conversation.is_completed:
            if not is_new_topic(text):
                conversation.append_message(text, MessageSender.USER)
                return self.replies.completed_reminder(conversation.ticket)
            logger.info("Starting a new topic")
            conversation.clear_for_new_topic()

        conversation.append_message(text, MessageSender.USER)

        if conversation.is_awaiting_confirmation():
            return await self._handle_feedback(conversation, text)
        return await self._handle_active(conversation, text)

    async def _handle_active(self, conversation: ConversationRecord, text: str) -> str:
        if conversation.message_count == 1 and is_greeting(text):
            return self.replies.greeting(conversation.participant.name)

        drafted = await self._draft_if_ready(conversation)
        return drafted or await self.guide.next_question(conversation)

    async def _draft_if_ready(self, conversation: ConversationRecord) -> Optional[str]:
        if not await self.readiness.decide(conversation):
            return None

        proposal = await self.generator.generate(conversation)
        conversation.set_proposal(proposal)
        return self.replies.proposal(proposal)

    async def _handle_feedback(self, conversation: ConversationRecord, text: str) -> str:
        proposal = conversation.pending_proposal
        decision = await self.classifier.classify(text, proposal)
        action = FeedbackAction(decision.action)

        if action == FeedbackAction.CONFIRM:
            request = TicketRequest(
                conversation_id=conversation.id,
                participant=conversation.participant,
                transcript=conversation.history(),
                proposal=proposal,
            )
            try:
                receipt = await self.ticket_sink.submit(request)
            except TicketSubmissionError as e:
                logger.warning("Ticket submission failed, proposal kept", error=e.message)
                return self.replies.submission_failed()

            conversation.record_ticket(receipt)
            return self.replies.ticket_created(receipt)

        if action == FeedbackAction.REJECT:
            conversation.set_state(ConversationState.COMPLETED)
            return self.replies.rejected()

        if action == FeedbackAction.MODIFY:
            logger.info("Proposal changes requested", changes=decision.changes)
            conversation.set_state(ConversationState.ACTIVE)

            # A concrete change request may be enough to redraft right away
            if decision.changes and Confidence(decision.confidence) != Confidence.LOW:
                drafted = await self._draft_if_ready(conversation)
                if drafted:
                    return drafted
            return decision.natural_response or self.replies.modify_follow_up()

        return decision.natural_response or self.replies.unclear()
