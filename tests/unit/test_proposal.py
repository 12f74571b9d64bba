"""
Tests for proposal models and priority derivation.
"""

import pytest

from intake_bot.core.constants import Priority
from intake_bot.domain.proposal import FeedbackDecision, Proposal, priority_from_scores

EXPECTED_PRIORITY = {
    (1, 1): Priority.P3,
    (1, 2): Priority.P2,
    (2, 1): Priority.P2,
    (1, 3): Priority.P2,
    (2, 2): Priority.P2,
    (3, 1): Priority.P2,
    (2, 3): Priority.P1,
    (3, 2): Priority.P1,
    (3, 3): Priority.P0,
}


@pytest.mark.parametrize("scores,priority", list(EXPECTED_PRIORITY.items()))
def test_priority_from_scores(scores: tuple[int, int], priority: Priority):
    assert priority_from_scores(*scores) == priority


@pytest.mark.parametrize("scores,priority", list(EXPECTED_PRIORITY.items()))
@pytest.mark.parametrize("supplied", ["P0", "P3"])
def test_supplied_priority_is_overridden(
    scores: tuple[int, int],
    priority: Priority,
    supplied: str,
):
    proposal = Proposal(
        title="Initiative",
        difficulty=scores[0],
        impact_score=scores[1],
        priority=supplied,
    )

    assert proposal.priority == priority.value


def test_unparsable_scores_give_lowest_priority():
    assert priority_from_scores("alta", 2) == Priority.P3
    assert priority_from_scores(None, None) == Priority.P3


def test_defaults():
    proposal = Proposal(title="Chatbot de RRHH")

    assert proposal.short_description == "Chatbot de RRHH"
    assert proposal.impact == "Por determinar"
    assert proposal.core_technology == "Por determinar"
    assert proposal.assignee_suggestion == "AI Team"
    assert proposal.confidence == "medium"
    assert proposal.origin == "teams"
    assert proposal.suggested_labels == []
    assert proposal.priority == "P2"


def test_labels_are_deduplicated():
    proposal = Proposal(title="X", suggested_labels=["ai", " ai", "rpa", "", "ai"])

    assert proposal.suggested_labels == ["ai", "rpa"]


@pytest.mark.parametrize("score", [0, 4])
def test_scores_out_of_range_are_rejected(score: int):
    with pytest.raises(ValueError):
        Proposal(title="X", difficulty=score)


def test_empty_title_is_rejected():
    with pytest.raises(ValueError):
        Proposal(title="")


def test_feedback_decision_defaults():
    decision = FeedbackDecision(action="confirm")

    assert decision.action == "confirm"
    assert decision.changes is None
    assert decision.confidence == "medium"
