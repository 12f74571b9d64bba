"""
Pytest configuration and fixtures.
"""

from typing import AsyncGenerator, Callable
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from intake_bot.agentic.feedback_classifier import FeedbackClassifier
from intake_bot.agentic.guide import ConversationGuide
from intake_bot.agentic.proposal_generator import ProposalGenerator
from intake_bot.agentic.readiness import ReadinessOracle
from intake_bot.api.deps import (
    get_completion_client,
    get_conversation_repository,
    get_outbound_sink,
    get_ticket_sink,
    get_turn_controller,
)
from intake_bot.core.constants import MessageSender
from intake_bot.domain.conversation import ConversationRecord, Participant
from intake_bot.domain.proposal import Proposal
from intake_bot.domain.ticket import TicketReceipt
from intake_bot.main import app
from intake_bot.oracle.client import CompletionClient
from intake_bot.repositories.conversation_repo import InMemoryConversationRepository
from intake_bot.services.delivery import OutboundSink
from intake_bot.services.ticket_service import TicketSink
from intake_bot.services.turn_controller import TurnController

# Six messages covering the problem, the technology and the benefit
READY_TRANSCRIPT = [
    ("Hola, quiero proponer una mejora en finanzas", MessageSender.USER),
    ("¿Qué proceso te gustaría mejorar?", MessageSender.BOT),
    ("Registramos a mano las facturas de proveedores y los pagos", MessageSender.USER),
    ("¿Qué tecnología crees que encajaría?", MessageSender.BOT),
    ("Un IDP que lea las facturas y las pase a contabilidad con RPA", MessageSender.USER),
    ("¿Qué impacto esperas?", MessageSender.BOT),
]


@pytest.fixture
def participant() -> Participant:
    """Sample chat participant."""
    return Participant(user_id="29:user-1", name="Ana", email="ana@example.com")


@pytest.fixture
def conversation(participant: Participant) -> ConversationRecord:
    """Fresh active conversation."""
    return ConversationRecord.create("19:thread-1", participant)


@pytest.fixture
def build_conversation(participant: Participant) -> Callable[[int], ConversationRecord]:
    """Build an active conversation with the first ``count`` scripted messages."""

    def _build(count: int) -> ConversationRecord:
        record = ConversationRecord.create("19:thread-1", participant)
        for index in range(count):
            content, sender = READY_TRANSCRIPT[index % len(READY_TRANSCRIPT)]
            record.append_message(content, sender)
        return record

    return _build


@pytest.fixture
def sample_proposal() -> Proposal:
    """Sample proposal as returned by the generator."""
    return Proposal(
        title="Lectura automática de facturas de proveedores",
        short_description="IDP + RPA para registrar facturas",
        description="Automatizar la captura de facturas de proveedores y su registro contable.",
        impact="Reduced processing costs",
        core_technology="RPA + IDP",
        difficulty=2,
        impact_score=3,
        business_unit="Finance",
        project="Invoicing",
        suggested_labels=["automation", "idp", "finance"],
        confidence="high",
    )


@pytest.fixture
def sample_receipt() -> TicketReceipt:
    """Sample ticket receipt."""
    return TicketReceipt(ticket_id="TICK-1700000000000", ticket_url="https://tickets.test/TICK-1700000000000")


@pytest.fixture
def completion_client() -> AsyncMock:
    """Mock completion client."""
    client = AsyncMock(spec=CompletionClient)
    client.is_configured = True
    return client


@pytest.fixture
def repository() -> InMemoryConversationRepository:
    """Empty in-memory conversation store."""
    return InMemoryConversationRepository()


@pytest.fixture
def readiness() -> AsyncMock:
    mock = AsyncMock(spec=ReadinessOracle)
    mock.decide.return_value = False
    return mock


@pytest.fixture
def guide() -> AsyncMock:
    mock = AsyncMock(spec=ConversationGuide)
    mock.next_question.return_value = "¿Qué tecnología te gustaría usar?"
    return mock


@pytest.fixture
def generator(sample_proposal: Proposal) -> AsyncMock:
    mock = AsyncMock(spec=ProposalGenerator)
    mock.generate.return_value = sample_proposal
    return mock


@pytest.fixture
def classifier() -> AsyncMock:
    return AsyncMock(spec=FeedbackClassifier)


@pytest.fixture
def ticket_sink(sample_receipt: TicketReceipt) -> AsyncMock:
    mock = AsyncMock(spec=TicketSink)
    mock.submit.return_value = sample_receipt
    mock.is_configured = True
    return mock


@pytest.fixture
def outbound_sink() -> AsyncMock:
    mock = AsyncMock(spec=OutboundSink)
    mock.deliver.return_value = True
    return mock


@pytest.fixture
def controller(
    repository: InMemoryConversationRepository,
    readiness: AsyncMock,
    guide: AsyncMock,
    generator: AsyncMock,
    classifier: AsyncMock,
    ticket_sink: AsyncMock,
) -> TurnController:
    """Turn controller over a real store and mocked collaborators."""
    return TurnController(
        repository=repository,
        readiness=readiness,
        guide=guide,
        generator=generator,
        classifier=classifier,
        ticket_sink=ticket_sink,
    )


@pytest.fixture
async def async_client(
    controller: TurnController,
    repository: InMemoryConversationRepository,
    completion_client: AsyncMock,
    ticket_sink: AsyncMock,
    outbound_sink: AsyncMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    app.dependency_overrides[get_turn_controller] = lambda: controller
    app.dependency_overrides[get_conversation_repository] = lambda: repository
    app.dependency_overrides[get_completion_client] = lambda: completion_client
    app.dependency_overrides[get_ticket_sink] = lambda: ticket_sink
    app.dependency_overrides[get_outbound_sink] = lambda: outbound_sink

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
