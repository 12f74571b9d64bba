"""
Domain models.
"""

from intake_bot.domain.conversation import (
    ConversationMessage,
    ConversationRecord,
    Participant,
    conversation_key,
)
from intake_bot.domain.proposal import FeedbackDecision, Proposal, priority_from_scores
from intake_bot.domain.taxonomy import DEFAULT_TAXONOMY, Taxonomy
from intake_bot.domain.ticket import TicketReceipt

__all__ = [
    "ConversationMessage",
    "ConversationRecord",
    "Participant",
    "conversation_key",
    "FeedbackDecision",
    "Proposal",
    "priority_from_scores",
    "DEFAULT_TAXONOMY",
    "Taxonomy",
    "TicketReceipt",
]
