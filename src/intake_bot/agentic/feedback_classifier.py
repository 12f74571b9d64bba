"""
Feedback classifier: reads the user's answer to a pending proposal.
"""

import re
from typing import Any, Optional

from intake_bot.core.config import settings
from intake_bot.core.constants import (
    CONFIRM_WORDS,
    LEADING_CONFIRM_WORDS,
    REJECT_PHRASES,
    REJECT_WORDS,
    Confidence,
    FeedbackAction,
)
from intake_bot.core.exceptions import OracleError
from intake_bot.core.logging import get_logger
from intake_bot.domain.proposal import FeedbackDecision, Proposal
from intake_bot.oracle.client import CompletionClient
from intake_bot.oracle.fallback import call_with_fallback, extract_json_object
from intake_bot.oracle.prompts import PromptRubric

logger = get_logger(__name__)

# Older prompt revisions answered with "cancel"
ACTION_ALIASES = {
    "cancel": FeedbackAction.REJECT,
    "cancelar": FeedbackAction.REJECT,
    "confirmar": FeedbackAction.CONFIRM,
    "modificar": FeedbackAction.MODIFY,
}


def _tokens(text: str) -> list[str]:
    return re.findall(r"\w+", text.lower())


def classify_by_keywords(utterance: str) -> FeedbackDecision:
    """
    Keyword classification used when the oracle is unavailable.

    Reject phrases such as "mejor no" win over the confirm words they may
    contain; anything unrecognised is treated as a change request.
    """
    tokens = _tokens(utterance)
    padded = f" {' '.join(tokens)} "

    for phrase in REJECT_PHRASES:
        if f" {' '.join(_tokens(phrase))} " in padded:
            return FeedbackDecision(action=FeedbackAction.REJECT, confidence=Confidence.MEDIUM)

    if tokens:
        if tokens[0] in LEADING_CONFIRM_WORDS:
            return FeedbackDecision(action=FeedbackAction.CONFIRM, confidence=Confidence.MEDIUM)
        if tokens[0] in REJECT_WORDS:
            return FeedbackDecision(action=FeedbackAction.REJECT, confidence=Confidence.MEDIUM)

    if any(token in CONFIRM_WORDS for token in tokens):
        return FeedbackDecision(action=FeedbackAction.CONFIRM, confidence=Confidence.MEDIUM)
    if any(token in REJECT_WORDS for token in tokens):
        return FeedbackDecision(action=FeedbackAction.REJECT, confidence=Confidence.MEDIUM)

    return FeedbackDecision(
        action=FeedbackAction.MODIFY,
        changes=utterance,
        confidence=Confidence.LOW,
    )


def _changes_text(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        parts = [f"{key}: {val}" for key, val in value.items()]
        return "; ".join(parts) or None
    if value is None:
        return None
    return str(value).strip() or None


class FeedbackClassifier:
    """Classifies feedback into confirm / reject / modify / unclear."""

    def __init__(
        self,
        client: CompletionClient,
        rubric: Optional[PromptRubric] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.client = client
        self.rubric = rubric or PromptRubric()
        self.timeout = timeout if timeout is not None else settings.oracle.timeout

    def parse_decision(self, answer: str, utterance: str) -> FeedbackDecision:
        """
        Build a decision from an oracle answer.

        Raises:
            OracleError: If the answer carries no known action
        """
        data = extract_json_object(answer)

        raw_action = str(data.get("action", "")).strip().lower()
        action = ACTION_ALIASES.get(raw_action)
        if action is None:
            try:
                action = FeedbackAction(raw_action)
            except ValueError as e:
                raise OracleError("Unknown feedback action", details={"action": raw_action}) from e

        changes = _changes_text(data.get("changes", data.get("modifications")))
        if action == FeedbackAction.MODIFY and not changes:
            changes = utterance

        natural_response = _changes_text(
            data.get("natural_response", data.get("followUpQuestion"))
        )

        try:
            confidence = Confidence(str(data.get("confidence", "medium")).strip().lower())
        except ValueError:
            confidence = Confidence.MEDIUM

        return FeedbackDecision(
            action=action,
            changes=changes,
            natural_response=natural_response,
            confidence=confidence,
        )

    async def classify(self, utterance: str, proposal: Proposal) -> FeedbackDecision:
        """Classify the user's answer to the proposal."""
        prompt = self.rubric.feedback_prompt(utterance, proposal)
        decision = await call_with_fallback(
            "feedback",
            lambda: self.client.complete(prompt),
            lambda answer: self.parse_decision(answer, utterance),
            lambda: classify_by_keywords(utterance),
            self.timeout,
        )

        logger.info(
            "Feedback classified",
            action=decision.action,
            confidence=decision.confidence,
        )
        return decision
