"""
API dependencies for dependency injection.
"""

from typing import Optional

from intake_bot.agentic.feedback_classifier import FeedbackClassifier
from intake_bot.agentic.guide import ConversationGuide
from intake_bot.agentic.proposal_generator import ProposalGenerator
from intake_bot.agentic.readiness import ReadinessOracle
from intake_bot.core.config import settings
from intake_bot.oracle.client import CompletionClient, HttpCompletionClient
from intake_bot.oracle.prompts import PromptRubric
from intake_bot.repositories.conversation_repo import (
    BaseConversationRepository,
    InMemoryConversationRepository,
)
from intake_bot.services.delivery import OutboundSink, create_outbound_sink
from intake_bot.services.replies import ReplyTemplates
from intake_bot.services.ticket_service import TicketSink, create_ticket_sink
from intake_bot.services.turn_controller import TurnController


class ServiceContainer:
    """
    Container for all application services.
    Provides singleton instances of services.
    """

    _instance: Optional["ServiceContainer"] = None

    def __init__(self) -> None:
        self._initialized = False

    @classmethod
    def get_instance(cls) -> "ServiceContainer":
        """Get the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def initialize(self) -> None:
        """Initialize all services."""
        if self._initialized:
            return

        # Outside world
        self._completion_client = HttpCompletionClient()
        self._ticket_sink = create_ticket_sink()
        self._outbound_sink = create_outbound_sink()

        self._conversation_repository = InMemoryConversationRepository()

        # Oracle-backed components share one rubric
        rubric = PromptRubric(bot_name=settings.bot_name)
        readiness = ReadinessOracle(self._completion_client, rubric)
        guide = ConversationGuide(self._completion_client, rubric)
        generator = ProposalGenerator(self._completion_client, rubric)
        classifier = FeedbackClassifier(self._completion_client, rubric)

        self._turn_controller = TurnController(
            repository=self._conversation_repository,
            readiness=readiness,
            guide=guide,
            generator=generator,
            classifier=classifier,
            ticket_sink=self._ticket_sink,
            replies=ReplyTemplates(bot_name=settings.bot_name),
        )

        self._initialized = True

    async def close(self) -> None:
        """Release HTTP clients held by the services."""
        if not self._initialized:
            return
        await self._completion_client.close()
        await self._ticket_sink.close()
        await self._outbound_sink.close()

    @property
    def turn_controller(self) -> TurnController:
        """Get the turn controller."""
        self.initialize()
        return self._turn_controller

    @property
    def conversation_repository(self) -> BaseConversationRepository:
        """Get the conversation repository."""
        self.initialize()
        return self._conversation_repository

    @property
    def completion_client(self) -> CompletionClient:
        """Get the completion client."""
        self.initialize()
        return self._completion_client

    @property
    def ticket_sink(self) -> TicketSink:
        """Get the ticket sink."""
        self.initialize()
        return self._ticket_sink

    @property
    def outbound_sink(self) -> OutboundSink:
        """Get the outbound sink."""
        self.initialize()
        return self._outbound_sink


# Singleton container instance
container = ServiceContainer.get_instance()


# Dependency functions for FastAPI
def get_turn_controller() -> TurnController:
    """Get the turn controller instance."""
    return container.turn_controller


def get_conversation_repository() -> BaseConversationRepository:
    """Get the conversation repository instance."""
    return container.conversation_repository


def get_completion_client() -> CompletionClient:
    """Get the completion client instance."""
    return container.completion_client


def get_ticket_sink() -> TicketSink:
    """Get the ticket sink instance."""
    return container.ticket_sink


def get_outbound_sink() -> OutboundSink:
    """Get the outbound sink instance."""
    return container.outbound_sink
