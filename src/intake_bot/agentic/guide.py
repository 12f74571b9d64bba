"""
Conversation guide: asks the next discovery question while a conversation is
not ready for a proposal.
"""

from typing import Optional

from intake_bot.core.config import settings
from intake_bot.core.constants import MessageSender
from intake_bot.core.exceptions import OracleError
from intake_bot.core.logging import get_logger
from intake_bot.domain.conversation import ConversationRecord
from intake_bot.oracle.client import CompletionClient
from intake_bot.oracle.fallback import call_with_fallback
from intake_bot.oracle.prompts import PromptRubric

logger = get_logger(__name__)


class ConversationGuide:
    """Produces the bot's next question from the transcript."""

    def __init__(
        self,
        client: CompletionClient,
        rubric: Optional[PromptRubric] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.client = client
        self.rubric = rubric or PromptRubric()
        self.timeout = timeout if timeout is not None else settings.oracle.timeout

    def _clean(self, answer: str) -> str:
        reply = answer.strip()
        prefix = f"{self.rubric.bot_name}:"
        if reply.lower().startswith(prefix.lower()):
            reply = reply[len(prefix):]
        reply = reply.strip().strip('"').strip()
        if not reply:
            raise OracleError("Guide answer is empty")
        return reply

    def fallback_question(self, conversation: ConversationRecord) -> str:
        """Walk the discovery topics in order, one per bot turn."""
        asked = sum(1 for m in conversation.messages if m.sender == MessageSender.BOT)
        topics = self.rubric.discovery_topics
        if not topics:
            return "Cuéntame más detalles sobre la initiative que tienes en mente."
        return topics[asked % len(topics)]

    async def next_question(self, conversation: ConversationRecord) -> str:
        """Ask the oracle for the next question, or pick one locally."""
        prompt = self.rubric.guide_prompt(conversation.history())
        return await call_with_fallback(
            "guide",
            lambda: self.client.complete(prompt),
            self._clean,
            lambda: self.fallback_question(conversation),
            self.timeout,
        )
