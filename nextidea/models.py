from __future__ import annotations

"""
Domain models shared by the generator, the scoring engine and the API.

Everything here is a strict Pydantic object so that catalog rows,
request bodies and stored favorites all go through the same validation.
The two factories at the bottom (:func:`create_idea` and
:func:`create_idea_score`) are the only places that mint ids or blend
sub-scores into an overall score.
"""

import math
import uuid
from datetime import datetime, timezone
from typing import List, Literal, Tuple

import numpy as np
from pydantic import BaseModel, Field, field_validator, model_validator

from .config import (
    SCORE_MAX,
    SCORE_MIN,
    WEIGHT_COMPETITION,
    WEIGHT_DEMAND,
    WEIGHT_FEASIBILITY,
    WEIGHT_PROFITABILITY,
)

Level = Literal["LOW", "MEDIUM", "HIGH"]
BudgetLevel = Level
RiskTolerance = Level
ComplexityLevel = Level
BusinessType = Literal["SERVICE", "PRODUCT", "DIGITAL"]

Score = int


# ---------------------------
# User input
# ---------------------------

class Location(BaseModel):
    city: str
    state: str


class UserInputs(BaseModel):
    location: Location
    interests: List[str] = Field(default_factory=list)
    budget: BudgetLevel
    hours_per_week: int = Field(ge=0)
    business_type: BusinessType
    risk_tolerance: RiskTolerance

    @field_validator("interests")
    @classmethod
    def _drop_blank_interests(cls, value: List[str]) -> List[str]:
        return [item.strip() for item in value if item and item.strip()]


# ---------------------------
# Ideas
# ---------------------------

class CostRange(BaseModel):
    min: int = Field(ge=0)
    max: int = Field(ge=0)
    currency: Literal["USD"] = "USD"

    @model_validator(mode="after")
    def _check_bounds(self) -> "CostRange":
        if self.max < self.min:
            raise ValueError(f"cost range max ({self.max}) is below min ({self.min})")
        return self


class IdeaTemplate(BaseModel):
    """A hand-authored catalog entry, before it is handed to a user."""

    title: str = Field(min_length=1)
    summary: str
    target_customer: str
    steps_to_start: List[str]
    cost_range: CostRange
    complexity: ComplexityLevel
    local_viability_notes: str
    tags: List[str]
    why_now_signals: List[str]


class Idea(IdeaTemplate):
    id: str
    created_at: datetime


class IdeaScore(BaseModel):
    idea_id: str
    demand_score: Score = Field(ge=SCORE_MIN, le=SCORE_MAX)
    competition_score: Score = Field(ge=SCORE_MIN, le=SCORE_MAX)  # lower is better
    feasibility_score: Score = Field(ge=SCORE_MIN, le=SCORE_MAX)
    profitability_score: Score = Field(ge=SCORE_MIN, le=SCORE_MAX)
    overall_score: Score = Field(ge=SCORE_MIN, le=SCORE_MAX)
    reasons: List[str] = Field(min_length=3, max_length=3)


class IdeaWithScore(Idea):
    score: IdeaScore

    @model_validator(mode="after")
    def _score_belongs_to_idea(self) -> "IdeaWithScore":
        if self.score.idea_id != self.id:
            raise ValueError("score.idea_id does not match idea id")
        return self


class ScoringWeights(BaseModel):
    demand: float = Field(default=WEIGHT_DEMAND, ge=0)
    competition: float = Field(default=WEIGHT_COMPETITION, ge=0)
    feasibility: float = Field(default=WEIGHT_FEASIBILITY, ge=0)
    profitability: float = Field(default=WEIGHT_PROFITABILITY, ge=0)


DEFAULT_SCORING_WEIGHTS = ScoringWeights()


# ---------------------------
# Factories
# ---------------------------

def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return int(np.clip(value, SCORE_MIN, SCORE_MAX))


def create_idea(template: IdeaTemplate, **overrides) -> Idea:
    """Turn a template into a concrete idea with a fresh id and timestamp."""
    data = template.model_dump()
    data.update(overrides)
    data["id"] = str(uuid.uuid4())
    data["created_at"] = datetime.now(timezone.utc)
    return Idea(**data)


def _rank_reasons(
    demand: int, competition: int, feasibility: int, profitability: int
) -> List[str]:
    advantage = 100 - competition
    candidates: List[Tuple[str, int]] = [
        (f"Demand potential: {demand}/100", demand),
        (f"Low competition advantage: {advantage}/100", advantage),
        (f"Feasibility to execute: {feasibility}/100", feasibility),
        (f"Profitability potential: {profitability}/100", profitability),
    ]
    # sorted() is stable: equal values keep the order above
    ranked = sorted(candidates, key=lambda pair: pair[1], reverse=True)
    return [text for text, _ in ranked[:3]]


def create_idea_score(
    idea_id: str,
    demand_score: int,
    competition_score: int,
    feasibility_score: int,
    profitability_score: int,
    weights: ScoringWeights | None = None,
) -> IdeaScore:
    """Blend four sub-scores into an :class:`IdeaScore`.

    The overall score is the weighted sum of demand, inverted
    competition, feasibility and profitability, rounded half-up and
    clamped to ``[0, 100]``.  ``reasons`` lists the three strongest
    dimensions, strongest first.
    """
    w = weights or DEFAULT_SCORING_WEIGHTS
    overall = round_half_up(
        demand_score * w.demand
        + (100 - competition_score) * w.competition
        + feasibility_score * w.feasibility
        + profitability_score * w.profitability
    )
    return IdeaScore(
        idea_id=idea_id,
        demand_score=demand_score,
        competition_score=competition_score,
        feasibility_score=feasibility_score,
        profitability_score=profitability_score,
        overall_score=clamp_score(overall),
        reasons=_rank_reasons(demand_score, competition_score, feasibility_score, profitability_score),
    )
