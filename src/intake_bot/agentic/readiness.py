"""
Readiness oracle: decides whether a conversation holds enough context to
draft a proposal.

A premature proposal yields a vague ticket while a late one only costs an
extra question, so every uncertain path answers "not ready".
"""

import re
from typing import Optional

from intake_bot.core.config import settings
from intake_bot.core.exceptions import OracleError
from intake_bot.core.logging import get_logger
from intake_bot.domain.conversation import ConversationRecord
from intake_bot.oracle.client import CompletionClient
from intake_bot.oracle.fallback import call_with_fallback
from intake_bot.oracle.prompts import PromptRubric

logger = get_logger(__name__)

_POSITIVE = frozenset({"true", "yes", "sí", "si"})
_NEGATIVE = frozenset({"false", "no"})


def parse_readiness_answer(answer: str) -> bool:
    """
    Read a true/false oracle answer.

    Only an unambiguous affirmative counts; mixed or unrecognised answers
    are treated as not ready.

    Raises:
        OracleError: If the answer is empty
    """
    tokens = set(re.findall(r"\w+", answer.lower()))
    if not tokens:
        raise OracleError("Readiness answer is empty")
    return bool(tokens & _POSITIVE) and not tokens & _NEGATIVE


class ReadinessOracle:
    """Gates proposal drafting on conversation length and oracle judgment."""

    def __init__(
        self,
        client: CompletionClient,
        rubric: Optional[PromptRubric] = None,
        min_messages: Optional[int] = None,
        fallback_messages: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize the readiness oracle.

        Args:
            client: Completion client consulted for the semantic check
            rubric: Prompt rubric
            min_messages: Messages, counting the reply about to be sent, required
                before the oracle is asked
            fallback_messages: Messages, counted the same way, required when the
                oracle is unavailable
            timeout: Seconds to wait for the oracle
        """
        self.client = client
        self.rubric = rubric or PromptRubric()
        self.min_messages = min_messages if min_messages is not None else settings.readiness.min_messages
        self.fallback_messages = (
            fallback_messages if fallback_messages is not None else settings.readiness.fallback_messages
        )
        self.timeout = timeout if timeout is not None else settings.oracle.timeout

    async def decide(self, conversation: ConversationRecord) -> bool:
        """
        Return True when a proposal can be drafted from the transcript.

        Called after the user message is appended, so the transcript ends on the
        user's turn. Thresholds are compared against the length it will
        have once this turn's reply is sent: three full exchanges reach six.
        """
        count = conversation.message_count
        projected = count + 1

        # A single opening message never justifies a draft
        if count <= 1 or projected < self.min_messages:
            logger.debug(
                "Not enough messages to consider drafting",
                conversation_key=conversation.key,
                message_count=count,
                min_messages=self.min_messages,
            )
            return False

        prompt = self.rubric.readiness_prompt(conversation.history())
        ready = await call_with_fallback(
            "readiness",
            lambda: self.client.complete(prompt),
            parse_readiness_answer,
            lambda: projected >= self.fallback_messages,
            self.timeout,
        )

        logger.info(
            "Readiness decided",
            conversation_key=conversation.key,
            message_count=count,
            ready=ready,
        )
        return ready
