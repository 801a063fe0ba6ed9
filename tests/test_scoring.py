"""
Scoring rule tests.

Each sub-score is checked against hand-computed values for small,
synthetic ideas; a final sweep scores the whole bundled catalog for a
few profiles and checks the output invariants.
"""

import re

import pytest

from nextidea.models import CostRange, ScoringWeights, create_idea
from nextidea.retrieval import get_idea_catalog
from nextidea.scoring import (
    competition_score,
    demand_score,
    feasibility_score,
    profitability_score,
    score_idea,
    score_ideas,
)


class TestScoreIdea:

    def test_pet_sitting_example(self, make_idea, make_inputs):
        idea = make_idea(
            title="Pet Sitting",
            summary="Pet sitting services",
            target_customer="Pet owners",
            steps_to_start=["Get certified", "Build network"],
            cost_range=CostRange(min=500, max=1000),
            complexity="LOW",
            tags=["service", "local", "pets"],
            why_now_signals=["Pet industry growing"],
        )
        score = score_idea(idea, make_inputs(interests=["pets", "service"]))

        assert score.idea_id == idea.id
        assert score.demand_score == 75
        assert score.competition_score == 60
        assert score.feasibility_score == 100
        assert score.profitability_score == 70
        assert score.overall_score == 73
        assert score.reasons == [
            "Feasibility to execute: 100/100",
            "Demand potential: 75/100",
            "Profitability potential: 70/100",
        ]

    def test_default_idea(self, make_idea, make_inputs):
        score = score_idea(make_idea(), make_inputs())
        assert (score.demand_score, score.competition_score, score.feasibility_score, score.profitability_score) == (55, 55, 100, 58)
        assert score.overall_score == 65

    def test_cheaper_idea_is_more_feasible_on_low_budget(self, make_idea, make_inputs):
        cheap = make_idea(cost_range=CostRange(min=100, max=500), complexity="MEDIUM")
        pricey = make_idea(cost_range=CostRange(min=5000, max=10000), complexity="MEDIUM")
        inputs = make_inputs()
        assert score_idea(cheap, inputs).feasibility_score > score_idea(pricey, inputs).feasibility_score

    def test_custom_weights(self, make_idea, make_inputs):
        only_demand = ScoringWeights(demand=1, competition=0, feasibility=0, profitability=0)
        score = score_idea(make_idea(), make_inputs(), only_demand)
        assert score.overall_score == score.demand_score

    def test_score_ideas_preserves_order(self, make_idea, make_inputs):
        ideas = [make_idea(title=f"Idea {i}") for i in range(3)]
        scores = score_ideas(ideas, make_inputs())
        assert [s.idea_id for s in scores] == [i.id for i in ideas]


class TestDemand:

    def test_tag_matches_are_case_insensitive(self, make_idea, make_inputs):
        idea = make_idea(tags=["pets", "service", "local"])
        assert demand_score(idea, make_inputs(interests=["Pets", "SERVICE"])) == 75

    def test_why_now_bonus_needs_two_signals(self, make_idea, make_inputs):
        idea = make_idea(why_now_signals=["a", "b"])
        assert demand_score(idea, make_inputs()) == 65

    def test_capped_at_100(self, make_idea, make_inputs):
        tags = [f"t{i}" for i in range(8)]
        idea = make_idea(tags=tags, why_now_signals=["a", "b"])
        assert demand_score(idea, make_inputs(interests=tags)) == 100


class TestCompetition:

    def test_baseline_for_unknown_tags(self, make_idea):
        assert competition_score(make_idea(tags=["pets"])) == 55

    def test_first_known_tag_wins(self, make_idea):
        assert competition_score(make_idea(tags=["local", "fitness", "social-media"])) == 75

    def test_specific_target_customer_discount(self, make_idea):
        idea = make_idea(tags=["design"], target_customer="x" * 61)
        assert competition_score(idea) == 65
        idea = make_idea(tags=["design"], target_customer="x" * 60)
        assert competition_score(idea) == 70

    def test_online_discount(self, make_idea):
        assert competition_score(make_idea(tags=["online"])) == 52
        assert competition_score(make_idea(tags=["Digital", "saas"])) == 69


class TestFeasibility:
    """MEDIUM complexity, four steps and MEDIUM risk leave only the budget/time terms."""

    STEPS = ["a", "b", "c", "d"]

    def _idea(self, make_idea, cost_max=500, **overrides):
        data = dict(cost_range=CostRange(min=0, max=cost_max), complexity="MEDIUM", steps_to_start=self.STEPS)
        data.update(overrides)
        return make_idea(**data)

    @pytest.mark.parametrize("cost_max,expected", [(1000, 80), (1500, 70), (1501, 55)])
    def test_budget(self, make_idea, make_inputs, cost_max, expected):
        inputs = make_inputs(risk_tolerance="MEDIUM")
        assert feasibility_score(self._idea(make_idea, cost_max), inputs) == expected

    @pytest.mark.parametrize("hours,expected", [(15, 80), (11, 70), (10, 55)])
    def test_hours(self, make_idea, make_inputs, hours, expected):
        inputs = make_inputs(risk_tolerance="MEDIUM", hours_per_week=hours)
        assert feasibility_score(self._idea(make_idea), inputs) == expected

    def test_long_setup_penalised(self, make_idea, make_inputs):
        idea = self._idea(make_idea, steps_to_start=list("abcdefg"))
        assert feasibility_score(idea, make_inputs(risk_tolerance="MEDIUM")) == 75

    def test_short_setup_rewarded(self, make_idea, make_inputs):
        idea = self._idea(make_idea, steps_to_start=["a", "b", "c"])
        assert feasibility_score(idea, make_inputs(risk_tolerance="MEDIUM")) == 90

    @pytest.mark.parametrize("risk,expected", [("LOW", 60), ("MEDIUM", 80), ("HIGH", 90)])
    def test_risk_fit_for_complex_ideas(self, make_idea, make_inputs, risk, expected):
        idea = self._idea(make_idea, complexity="HIGH")
        inputs = make_inputs(risk_tolerance=risk, hours_per_week=40)
        assert feasibility_score(idea, inputs) == expected

    def test_penalties_stack(self, make_idea, make_inputs):
        idea = self._idea(make_idea, cost_max=50000, complexity="HIGH", steps_to_start=list("abcdefgh"))
        inputs = make_inputs(hours_per_week=0, risk_tolerance="LOW")
        # 50 - 10 - 10 - 5 - 20
        assert feasibility_score(idea, inputs) == 5


class TestProfitability:

    def test_lean_service(self, make_idea):
        assert profitability_score(make_idea(tags=["service"])) == 75

    def test_rounds_half_up(self, make_idea):
        # 60*0.5 + 45/100*50 = 52.5
        idea = make_idea(cost_range=CostRange(min=0, max=2000), tags=["misc"])
        assert profitability_score(idea) == 53

    def test_best_margin_wins(self, make_idea):
        # 50*0.5 + 85/100*50 = 67.5 -> 68, +5 for digital
        idea = make_idea(cost_range=CostRange(min=1000, max=5000), tags=["digital", "saas"])
        assert profitability_score(idea) == 73

    def test_low_margin_tags_fall_back_to_default(self, make_idea):
        idea = make_idea(cost_range=CostRange(min=0, max=4000), tags=["product", "affiliate"])
        assert profitability_score(idea) == 48

    def test_capital_heavy(self, make_idea):
        idea = make_idea(cost_range=CostRange(min=0, max=6000), tags=["misc"])
        assert profitability_score(idea) == 45


_REASON_VALUE = re.compile(r"(\d+)/100$")


@pytest.mark.parametrize("budget,hours,risk", [("LOW", 0, "LOW"), ("MEDIUM", 15, "MEDIUM"), ("HIGH", 60, "HIGH")])
def test_catalog_scores_hold_invariants(make_inputs, budget, hours, risk):
    inputs = make_inputs(budget=budget, hours_per_week=hours, risk_tolerance=risk, interests=["design", "service", "content"])
    for template in get_idea_catalog():
        score = score_idea(create_idea(template), inputs)
        for value in (
            score.demand_score,
            score.competition_score,
            score.feasibility_score,
            score.profitability_score,
            score.overall_score,
        ):
            assert isinstance(value, int)
            assert 0 <= value <= 100
        assert len(score.reasons) == 3
        values = [int(_REASON_VALUE.search(r).group(1)) for r in score.reasons]
        assert values == sorted(values, reverse=True)
