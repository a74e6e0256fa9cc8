"""Tests for the SolutionScorer and the breakdown helpers."""

import pytest

from solution_engine.breakdown import (
    business_domain_alignment,
    calculate_breakdown,
    query_tokens,
    tags_relevance,
    time_to_value_score,
)
from solution_engine.config import BoostFactorsConfig, SolutionScoringConfig
from solution_engine.schema import ScoringContext, ValueRange
from solution_engine.scorer import RankingOptions, SolutionScorer, SortKey


@pytest.fixture
def scorer():
    return SolutionScorer()


class TestScore:
    """Tests for scoring a single solution."""

    def test_default_workflow(self, scorer, make_workflow):
        score = scorer.score(make_workflow())
        # Relevance neutral, quality mean(reviews 0, status 100), value
        # mean(60, 30, 80, 70), implementation mean(70, 80, 100)
        assert score.relevance_score == 75
        assert score.quality_score == 50
        assert score.business_value_score == 60
        assert score.implementation_score == 83
        # round(66.2) = 66, quick-setup boost 1.15 -> 76
        assert score.overall_score == 76
        assert score.confidence == 50
        assert score.ranking == 0

    def test_domain_hint_drives_relevance(self, scorer, make_workflow):
        solution = make_workflow(category="Finance & Accounting")
        assert scorer.score(solution, ScoringContext(business_domain="Finance")).relevance_score == 100
        assert scorer.score(solution, ScoringContext(business_domain="HR")).relevance_score == 40

    def test_missing_metrics_not_penalized(self, scorer, make_workflow):
        bare = scorer.score(make_workflow())
        rated = scorer.score(make_workflow(metrics={"userRating": 5.0}))
        assert rated.quality_score > bare.quality_score

    def test_boosts_capped_at_100(self, make_workflow):
        config = SolutionScoringConfig(boost_factors=BoostFactorsConfig(quick_setup=3.0))
        score = SolutionScorer(config).score(make_workflow())
        assert score.overall_score == 100

    def test_confidence_penalizes_beta(self, scorer, make_workflow):
        beta = scorer.score(make_workflow(status="Beta", metrics={"reviewCount": 12}))
        assert beta.confidence == 55

    def test_pricing_does_not_affect_quality(self, scorer, make_workflow):
        free = scorer.score(make_workflow(pricing="Free"))
        enterprise = scorer.score(make_workflow(pricing="Enterprise"))
        assert free.quality_score == enterprise.quality_score
        assert free.breakdown.cost_effectiveness == 100
        assert enterprise.breakdown.cost_effectiveness == 40

    def test_closer_automation_never_lowers_relevance(self, scorer, make_workflow):
        context = ScoringContext(automation_potential=80)
        previous = -1
        for potential in (0, 20, 40, 50, 60, 70, 80):
            relevance = scorer.score(
                make_workflow(automationPotential=potential), context
            ).relevance_score
            assert relevance >= previous
            previous = relevance

    def test_scores_in_range(self, scorer, make_workflow):
        score = scorer.score(make_workflow(
            automationPotential=100,
            estimatedROI="900-1000%",
            metrics={"userRating": 5, "successRate": 100, "performanceScore": 100, "reviewCount": 500},
        ))
        for value in (
            score.overall_score,
            score.relevance_score,
            score.quality_score,
            score.business_value_score,
            score.implementation_score,
        ):
            assert 0 <= value <= 100


class TestScoreAndRank:
    """Tests for ranking."""

    def test_ranks_are_one_based_and_contiguous(self, scorer, make_workflow):
        solutions = [make_workflow(f"wf-{i}") for i in range(4)]
        scores = scorer.score_and_rank(solutions)
        assert [s.ranking for s in scores] == [1, 2, 3, 4]

    def test_ties_break_on_id(self, scorer, make_workflow):
        solutions = [make_workflow("wf-b"), make_workflow("wf-a")]
        scores = scorer.score_and_rank(solutions)
        assert [s.solution_id for s in scores] == ["wf-a", "wf-b"]

    def test_higher_score_first(self, scorer, make_workflow):
        solutions = [
            make_workflow("weak", setupTime="Long", difficulty="Advanced"),
            make_workflow("strong", setupTime="Quick", difficulty="Beginner"),
        ]
        scores = scorer.score_and_rank(solutions)
        assert scores[0].solution_id == "strong"

    def test_limit_and_sort_key(self, scorer, make_workflow):
        solutions = [
            make_workflow("slow", setupTime="Long"),
            make_workflow("fast", setupTime="Quick"),
            make_workflow("mid"),
        ]
        scores = scorer.score_and_rank(
            solutions, options=RankingOptions(sort_by=SortKey.IMPLEMENTATION, limit=1)
        )
        assert [s.solution_id for s in scores] == ["fast"]

    def test_empty_input(self, scorer):
        assert scorer.score_and_rank([]) == []


class TestBreakdown:
    """Tests for the twelve-way breakdown helpers."""

    def test_absent_hints_are_neutral(self, make_workflow):
        breakdown = calculate_breakdown(make_workflow(), ScoringContext())
        assert breakdown.category_match == 75
        assert breakdown.difficulty_alignment == 75
        assert breakdown.tags_relevance == 75
        assert breakdown.business_domain_alignment == 75

    def test_business_domain_table(self, make_workflow):
        solution = make_workflow(category="Data Analysis")
        assert business_domain_alignment(solution, "Analytics") == 100
        assert business_domain_alignment(solution, "HR") == 30

    def test_tags_relevance(self, make_workflow):
        solution = make_workflow(tags=["invoice", "ocr"])
        context = ScoringContext(user_query="invoice approvals")
        assert tags_relevance(solution, context) == 50
        assert tags_relevance(make_workflow(), context) == 50

    def test_query_tokens(self):
        assert query_tokens("Send an email, send it now") == ["send", "email", "now"]

    @pytest.mark.parametrize("text,expected", [
        ("1-2 weeks", 100),
        ("2-4 weeks", 80),
        ("4-8 weeks", 60),
        ("8+ weeks", 40),
        ("3-5 weeks", 70),
        ("1-2 months", 70),
        ("soon", 70),
    ])
    def test_time_to_value(self, text, expected):
        assert time_to_value_score(ValueRange.parse(text)) == expected


class TestContextNormalization:
    """Blank hints are treated as absent."""

    def test_whitespace_domain_is_neutral(self, scorer, make_workflow):
        solution = make_workflow(category="Marketing & Sales")
        score = scorer.score(solution, ScoringContext(business_domain="  "))
        assert score.breakdown.category_match == 75
        assert score.breakdown.business_domain_alignment == 75
        assert score.relevance_score == 75

    def test_whitespace_query_is_neutral(self, scorer, make_workflow):
        score = scorer.score(make_workflow(tags=["invoice"]), ScoringContext(user_query=" "))
        assert score.breakdown.tags_relevance == 75


class TestDeterminism:
    """Repeated scoring of the same input gives identical output."""

    def test_score_is_repeatable(self, scorer, make_workflow):
        solution = make_workflow(
            category="Finance & Accounting",
            tags=["invoice", "ocr"],
            metrics={"userRating": 4.2, "reviewCount": 15},
        )
        context = ScoringContext(business_domain="Finance", user_query="invoice ocr", automation_potential=70)
        first = scorer.score(solution, context)
        second = scorer.score(solution, context)
        assert first.model_dump_json() == second.model_dump_json()
