"""
Proposal generator: drafts a structured initiative from the transcript.
"""

from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from intake_bot.core.config import settings
from intake_bot.core.constants import (
    ASSIGNEE_OPTIONS,
    DEFAULT_ASSIGNEE,
    FALLBACK_PROPOSAL_LABELS,
    FALLBACK_PROPOSAL_SUMMARY,
    FALLBACK_PROPOSAL_TITLE,
    MAX_SCORE,
    MIN_SCORE,
    UNDETERMINED,
    Confidence,
)
from intake_bot.core.exceptions import OracleError
from intake_bot.core.logging import get_logger
from intake_bot.domain.conversation import ConversationRecord
from intake_bot.domain.proposal import Proposal
from intake_bot.oracle.client import CompletionClient
from intake_bot.oracle.fallback import call_with_fallback, extract_json_object
from intake_bot.oracle.prompts import PromptRubric

logger = get_logger(__name__)

REQUIRED_FIELDS = ("title", "priority", "difficulty", "impact_score")


def parse_score(value: Any) -> Optional[int]:
    """Return a 1-3 score from an oracle value, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            return None
        value = int(value)
    if isinstance(value, int) and MIN_SCORE <= value <= MAX_SCORE:
        return value
    return None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _labels(value: Any) -> list[str]:
    if isinstance(value, str):
        return [label.strip() for label in value.split(",")]
    if isinstance(value, list):
        return [str(label) for label in value]
    return []


def _confidence(value: Any) -> Confidence:
    try:
        return Confidence(str(value).strip().lower())
    except ValueError:
        return Confidence.MEDIUM


class ProposalGenerator:
    """
    Turns a transcript into a Proposal.

    Never raises: malformed or missing oracle output yields a low-confidence
    generic proposal that embeds the transcript.
    """

    def __init__(
        self,
        client: CompletionClient,
        rubric: Optional[PromptRubric] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.client = client
        self.rubric = rubric or PromptRubric()
        self.timeout = timeout if timeout is not None else settings.oracle.timeout

    @property
    def taxonomy(self):
        return self.rubric.taxonomy

    def _canonical(self, value: Any, names: list[str]) -> Optional[str]:
        text = _text(value)
        if text is None:
            return None
        for name in names:
            if name.lower() == text.lower():
                return name
        return None

    def _tags(self, data: dict[str, Any], transcript: str) -> tuple[Optional[str], Optional[str]]:
        business_unit = self._canonical(data.get("business_unit"), self.taxonomy.business_unit_names())
        if business_unit is None:
            business_unit = self.taxonomy.infer_business_unit(transcript)

        project = self._canonical(data.get("project"), self.taxonomy.project_names())
        if project is None:
            project = self.taxonomy.infer_project(transcript, business_unit)

        return business_unit, project

    def parse_proposal(self, answer: str, transcript: str) -> Proposal:
        """
        Build a Proposal from an oracle answer.

        Raises:
            OracleError: If the answer is not a usable proposal
        """
        data = extract_json_object(answer)

        missing = [name for name in REQUIRED_FIELDS if _text(data.get(name)) is None]
        if missing:
            raise OracleError("Proposal is missing required fields", details={"missing": missing})

        difficulty = parse_score(data["difficulty"])
        impact_score = parse_score(data["impact_score"])
        if difficulty is None or impact_score is None:
            raise OracleError(
                "Proposal scores are not integers between 1 and 3",
                details={"difficulty": data["difficulty"], "impact_score": data["impact_score"]},
            )

        business_unit, project = self._tags(data, transcript)
        assignee = self._canonical(data.get("assignee_suggestion"), list(ASSIGNEE_OPTIONS))

        try:
            return Proposal(
                title=_text(data["title"])[:100],
                short_description=_text(data.get("short_description")) or "",
                description=_text(data.get("description")) or transcript,
                impact=_text(data.get("impact")) or UNDETERMINED,
                core_technology=_text(data.get("core_technology")) or UNDETERMINED,
                difficulty=difficulty,
                impact_score=impact_score,
                business_unit=business_unit,
                project=project,
                suggested_labels=_labels(data.get("suggested_labels")),
                assignee_suggestion=assignee or DEFAULT_ASSIGNEE,
                confidence=_confidence(data.get("confidence")),
            )
        except PydanticValidationError as e:
            raise OracleError("Proposal failed validation", details={"errors": e.errors()}) from e

    def fallback_proposal(self, transcript: str) -> Proposal:
        """Generic low-confidence proposal built without the oracle."""
        business_unit = self.taxonomy.infer_business_unit(transcript)
        return Proposal(
            title=FALLBACK_PROPOSAL_TITLE,
            short_description=FALLBACK_PROPOSAL_SUMMARY,
            description=f"Initiative generada automáticamente desde la conversación:\n\n{transcript}",
            difficulty=2,
            impact_score=2,
            business_unit=business_unit,
            project=self.taxonomy.infer_project(transcript, business_unit),
            suggested_labels=list(FALLBACK_PROPOSAL_LABELS),
            assignee_suggestion=DEFAULT_ASSIGNEE,
            confidence=Confidence.LOW,
        )

    async def generate(self, conversation: ConversationRecord) -> Proposal:
        """Draft a proposal for the conversation."""
        transcript = conversation.history()
        prompt = self.rubric.proposal_prompt(transcript)

        proposal = await call_with_fallback(
            "proposal",
            lambda: self.client.complete(prompt),
            lambda answer: self.parse_proposal(answer, transcript),
            lambda: self.fallback_proposal(transcript),
            self.timeout,
        )

        logger.info(
            "Proposal generated",
            conversation_key=conversation.key,
            title=proposal.title,
            priority=proposal.priority,
            confidence=proposal.confidence,
        )
        return proposal
