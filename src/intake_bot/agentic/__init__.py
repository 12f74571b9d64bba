"""
Oracle-backed judgment components: readiness, guidance, drafting and
feedback classification.
"""

from intake_bot.agentic.feedback_classifier import FeedbackClassifier, classify_by_keywords
from intake_bot.agentic.guide import ConversationGuide
from intake_bot.agentic.proposal_generator import ProposalGenerator
from intake_bot.agentic.readiness import ReadinessOracle, parse_readiness_answer

__all__ = [
    "FeedbackClassifier",
    "classify_by_keywords",
    "ConversationGuide",
    "ProposalGenerator",
    "ReadinessOracle",
    "parse_readiness_answer",
]
