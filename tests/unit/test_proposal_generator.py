"""
Tests for the proposal generator.
"""

import json
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

from intake_bot.agentic.proposal_generator import ProposalGenerator, parse_score
from intake_bot.core.exceptions import OracleError
from intake_bot.domain.conversation import ConversationRecord


def _answer(**overrides: Any) -> str:
    data = {
        "title": "Lectura automática de facturas",
        "short_description": "IDP para facturas de proveedores",
        "description": "Capturar facturas y registrarlas en contabilidad.",
        "impact": "Reduced processing costs",
        "core_technology": "RPA + IDP",
        "difficulty": 2,
        "impact_score": 3,
        "priority": "P3",
        "business_unit": "Finance",
        "project": "Invoicing",
        "suggested_labels": ["automation", "idp"],
        "assignee_suggestion": "Tech Team",
        "confidence": "high",
    }
    data.update(overrides)
    data = {key: value for key, value in data.items() if value is not None}
    return f"```json\n{json.dumps(data, ensure_ascii=False)}\n```"


@pytest.mark.parametrize(
    "value,expected",
    [(1, 1), (3, 3), ("2", 2), (2.0, 2), (0, None), (4, None), ("alta", None), (2.5, None), (True, None)],
)
def test_parse_score(value: Any, expected: Any):
    assert parse_score(value) == expected


class TestProposalGenerator:
    """Tests for ProposalGenerator.generate."""

    @pytest.fixture
    def generator(self, completion_client: AsyncMock) -> ProposalGenerator:
        return ProposalGenerator(completion_client, timeout=1)

    @pytest.fixture
    def ready_conversation(
        self,
        build_conversation: Callable[[int], ConversationRecord],
    ) -> ConversationRecord:
        return build_conversation(6)

    @pytest.mark.asyncio
    async def test_well_formed_answer(
        self,
        generator: ProposalGenerator,
        completion_client: AsyncMock,
        ready_conversation: ConversationRecord,
    ):
        completion_client.complete.return_value = _answer()

        proposal = await generator.generate(ready_conversation)

        assert proposal.title == "Lectura automática de facturas"
        assert proposal.difficulty == 2
        assert proposal.impact_score == 3
        assert proposal.priority == "P1"
        assert proposal.business_unit == "Finance"
        assert proposal.project == "Invoicing"
        assert proposal.assignee_suggestion == "Tech Team"
        assert proposal.confidence == "high"

    @pytest.mark.asyncio
    async def test_priority_is_recomputed(
        self,
        generator: ProposalGenerator,
        completion_client: AsyncMock,
        ready_conversation: ConversationRecord,
    ):
        completion_client.complete.return_value = _answer(difficulty=3, impact_score=3, priority="P3")

        proposal = await generator.generate(ready_conversation)

        assert proposal.priority == "P0"

    @pytest.mark.asyncio
    async def test_missing_taxonomy_is_inferred(
        self,
        generator: ProposalGenerator,
        completion_client: AsyncMock,
        ready_conversation: ConversationRecord,
    ):
        completion_client.complete.return_value = _answer(business_unit=None, project=None)

        proposal = await generator.generate(ready_conversation)

        assert proposal.business_unit == "Finance"
        assert proposal.project == "Invoicing"

    @pytest.mark.asyncio
    async def test_optional_fields_get_defaults(
        self,
        generator: ProposalGenerator,
        completion_client: AsyncMock,
        ready_conversation: ConversationRecord,
    ):
        completion_client.complete.return_value = json.dumps(
            {"title": "Chatbot", "priority": "P2", "difficulty": 1, "impact_score": 2}
        )

        proposal = await generator.generate(ready_conversation)

        assert proposal.short_description == "Chatbot"
        assert proposal.impact == "Por determinar"
        assert proposal.core_technology == "Por determinar"
        assert proposal.assignee_suggestion == "AI Team"
        assert proposal.confidence == "medium"
        assert proposal.suggested_labels == []
        assert proposal.priority == "P2"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "answer",
        [
            "Lo siento, no puedo ayudarte con eso.",
            _answer(title=None),
            _answer(priority=None),
            _answer(difficulty=None),
            _answer(impact_score="muy alto"),
            _answer(difficulty=5),
        ],
    )
    async def test_malformed_answer_uses_fallback(
        self,
        generator: ProposalGenerator,
        completion_client: AsyncMock,
        ready_conversation: ConversationRecord,
        answer: str,
    ):
        completion_client.complete.return_value = answer

        proposal = await generator.generate(ready_conversation)

        assert proposal.title == "Initiative reportada desde Teams"
        assert proposal.confidence == "low"
        assert proposal.difficulty == 2
        assert proposal.impact_score == 2
        assert proposal.priority == "P2"
        assert proposal.suggested_labels == ["teams", "auto-generated"]
        assert ready_conversation.history() in proposal.description

    @pytest.mark.asyncio
    async def test_oracle_failure_uses_fallback(
        self,
        generator: ProposalGenerator,
        completion_client: AsyncMock,
        ready_conversation: ConversationRecord,
    ):
        completion_client.complete.side_effect = OracleError("unavailable")

        proposal = await generator.generate(ready_conversation)

        assert proposal.confidence == "low"
        assert proposal.business_unit == "Finance"

    @pytest.mark.asyncio
    async def test_prompt_lists_taxonomy(
        self,
        generator: ProposalGenerator,
        completion_client: AsyncMock,
        ready_conversation: ConversationRecord,
    ):
        completion_client.complete.return_value = _answer()

        await generator.generate(ready_conversation)

        prompt = completion_client.complete.await_args.args[0]
        assert "Finance|Sales|Legal|HR|Procurement" in prompt
        assert ready_conversation.history() in prompt
