from __future__ import annotations

"""
Deterministic scoring of business ideas against a user profile.

Each idea gets four independent sub-scores on a 0-100 scale:

- demand: interest/tag overlap plus why-now signals
- competition: category saturation (lower is better)
- feasibility: budget, time, number of steps and risk fit
- profitability: startup cost and typical margins by tag

The sub-scores are blended by :func:`~nextidea.models.create_idea_score`.
All tables live in :mod:`nextidea.config`.
"""

from typing import List, Optional, Sequence

from .config import (
    BUDGET_MAX_COST,
    BUDGET_STRETCH_FACTOR,
    COMPETITION_BASELINE,
    COMPETITION_BY_TAG,
    COMPETITION_NICHE_CUSTOMER_CHARS,
    COMPETITION_NICHE_DISCOUNT,
    COMPETITION_ONLINE_DISCOUNT,
    COMPETITION_ONLINE_TAGS,
    COMPLEXITY_HOURS_NEEDED,
    DEMAND_BASELINE,
    DEMAND_LOCATION_BONUS,
    DEMAND_TAG_MATCH_BONUS,
    DEMAND_WHY_NOW_BONUS,
    DEMAND_WHY_NOW_MIN_SIGNALS,
    FEASIBILITY_BASELINE,
    HOURS_TIGHT_FACTOR,
    PROFIT_MARGIN_BY_TAG,
    PROFIT_MARGIN_DEFAULT,
    PROFIT_SCALABLE_BONUS,
    PROFIT_SCALABLE_TAGS,
    PROFITABILITY_BASELINE,
    STEPS_LONG_MIN,
    STEPS_SIMPLE_MAX,
)
from .models import (
    Idea,
    IdeaScore,
    IdeaTemplate,
    ScoringWeights,
    UserInputs,
    clamp_score,
    create_idea_score,
    round_half_up,
)


def _lower_tags(idea: IdeaTemplate) -> List[str]:
    return [t.lower() for t in idea.tags]


# ---------------------------
# Sub-scores
# ---------------------------

def demand_score(idea: IdeaTemplate, user_inputs: UserInputs) -> int:
    score = DEMAND_BASELINE

    interests = {i.lower() for i in user_inputs.interests}
    matching = [t for t in _lower_tags(idea) if t in interests]
    score += len(matching) * DEMAND_TAG_MATCH_BONUS

    if len(idea.why_now_signals) >= DEMAND_WHY_NOW_MIN_SIGNALS:
        score += DEMAND_WHY_NOW_BONUS

    score += DEMAND_LOCATION_BONUS
    return clamp_score(score)


def competition_score(idea: IdeaTemplate) -> int:
    """Saturation estimate; 0 means an open field, 100 a crowded one."""
    tags = _lower_tags(idea)

    score = COMPETITION_BASELINE
    # first tag with a known saturation level wins
    for tag in tags:
        if tag in COMPETITION_BY_TAG:
            score = COMPETITION_BY_TAG[tag]
            break

    if len(idea.target_customer) > COMPETITION_NICHE_CUSTOMER_CHARS:
        score -= COMPETITION_NICHE_DISCOUNT

    if any(t in tags for t in COMPETITION_ONLINE_TAGS):
        score -= COMPETITION_ONLINE_DISCOUNT

    return clamp_score(score)


def feasibility_score(idea: IdeaTemplate, user_inputs: UserInputs) -> int:
    score = FEASIBILITY_BASELINE

    # Budget
    max_affordable = BUDGET_MAX_COST[user_inputs.budget]
    if idea.cost_range.max <= max_affordable:
        score += 15
    elif idea.cost_range.max <= max_affordable * BUDGET_STRETCH_FACTOR:
        score += 5
    else:
        score -= 10

    # Time vs complexity
    hours_needed = COMPLEXITY_HOURS_NEEDED[idea.complexity]
    if user_inputs.hours_per_week >= hours_needed:
        score += 15
    elif user_inputs.hours_per_week >= hours_needed * HOURS_TIGHT_FACTOR:
        score += 5
    else:
        score -= 10

    # Steps to start
    steps = len(idea.steps_to_start)
    if steps <= STEPS_SIMPLE_MAX:
        score += 10
    elif steps > STEPS_LONG_MIN:
        score -= 5

    # Risk fit, complexity as the risk proxy
    complexity, risk = idea.complexity, user_inputs.risk_tolerance
    if complexity == "LOW" and risk == "LOW":
        score += 15
    elif complexity == "HIGH" and risk == "HIGH":
        score += 10
    elif complexity == "HIGH" and risk == "LOW":
        score -= 20

    return clamp_score(score)


def profitability_score(idea: IdeaTemplate) -> int:
    score = PROFITABILITY_BASELINE

    cost_max = idea.cost_range.max
    if cost_max < 1000:
        score += 20
    elif cost_max < 3000:
        score += 10
    elif cost_max > 5000:
        score -= 5

    tags = _lower_tags(idea)
    best_margin = PROFIT_MARGIN_DEFAULT
    for tag in tags:
        margin = PROFIT_MARGIN_BY_TAG.get(tag)
        if margin is not None and margin > best_margin:
            best_margin = margin

    # half cost-driven, half margin-driven
    score = round_half_up(score * 0.5 + (best_margin / 100) * 50)

    if any(t in tags for t in PROFIT_SCALABLE_TAGS):
        score += PROFIT_SCALABLE_BONUS

    return clamp_score(score)


# ---------------------------
# Public API
# ---------------------------

def score_idea(
    idea: Idea,
    user_inputs: UserInputs,
    weights: Optional[ScoringWeights] = None,
) -> IdeaScore:
    """Score one idea.  ``idea`` must carry an ``id``."""
    return create_idea_score(
        idea.id,
        demand_score=demand_score(idea, user_inputs),
        competition_score=competition_score(idea),
        feasibility_score=feasibility_score(idea, user_inputs),
        profitability_score=profitability_score(idea),
        weights=weights,
    )


def score_ideas(
    ideas: Sequence[Idea],
    user_inputs: UserInputs,
    weights: Optional[ScoringWeights] = None,
) -> List[IdeaScore]:
    return [score_idea(idea, user_inputs, weights) for idea in ideas]
