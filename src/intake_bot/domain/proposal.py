"""
Proposal and feedback domain models.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from intake_bot.core.constants import (
    DEFAULT_ASSIGNEE,
    DEFAULT_ORIGIN,
    MAX_SCORE,
    MIN_SCORE,
    PRIORITY_BY_TOTAL_SCORE,
    UNDETERMINED,
    Confidence,
    FeedbackAction,
    Priority,
)


def priority_from_scores(difficulty: Any, impact_score: Any) -> Priority:
    """
    Derive the ticket priority from difficulty + impact score.

    6 -> P0, 5 -> P1, 3-4 -> P2, anything else (including unparsable
    input) -> P3.
    """
    try:
        total = int(difficulty) + int(impact_score)
    except (TypeError, ValueError):
        return Priority.P3
    return PRIORITY_BY_TOTAL_SCORE.get(total, Priority.P3)


class Proposal(BaseModel):
    """Structured draft ticket awaiting user confirmation."""

    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(..., min_length=1, description="Short label")
    short_description: str = Field(default="", description="One-line scope")
    description: str = Field(default="", description="Narrative description")
    impact: str = Field(default=UNDETERMINED, description="Expected business impact")
    core_technology: str = Field(default=UNDETERMINED, description="Core technology or approach")
    difficulty: int = Field(default=2, ge=MIN_SCORE, le=MAX_SCORE)
    impact_score: int = Field(default=2, ge=MIN_SCORE, le=MAX_SCORE)
    priority: Priority = Field(default=Priority.P2, description="Always derived from the scores")
    business_unit: Optional[str] = None
    project: Optional[str] = None
    suggested_labels: list[str] = Field(default_factory=list)
    assignee_suggestion: str = Field(default=DEFAULT_ASSIGNEE)
    confidence: Confidence = Field(default=Confidence.MEDIUM)
    origin: str = Field(default=DEFAULT_ORIGIN)

    @field_validator("suggested_labels")
    @classmethod
    def dedupe_labels(cls, labels: list[str]) -> list[str]:
        seen: list[str] = []
        for label in labels:
            label = str(label).strip()
            if label and label not in seen:
                seen.append(label)
        return seen

    @model_validator(mode="after")
    def derive_priority(self) -> "Proposal":
        # Any externally supplied priority is replaced by the derived one
        self.priority = priority_from_scores(self.difficulty, self.impact_score).value
        if not self.short_description:
            self.short_description = self.title
        return self


class FeedbackDecision(BaseModel):
    """Classified user response to a pending proposal."""

    model_config = ConfigDict(use_enum_values=True)

    action: FeedbackAction
    changes: Optional[str] = Field(default=None, description="Requested changes, for modify")
    natural_response: Optional[str] = Field(
        default=None, description="Suggested reply to show the user"
    )
    confidence: Confidence = Field(default=Confidence.MEDIUM)
