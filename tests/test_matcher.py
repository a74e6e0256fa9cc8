"""Tests for subtask matching, ranking and roll-ups."""

import pytest

from solution_engine.matcher import SolutionMatcher
from solution_engine.schema import (
    AgentSolution,
    Priority,
    SolutionAdapter,
    Subtask,
)


@pytest.fixture
def matcher():
    return SolutionMatcher()


@pytest.fixture
def invoice_solutions(invoice_catalog):
    return [SolutionAdapter.validate_python(entry) for entry in invoice_catalog]


@pytest.fixture
def invoice_subtask():
    return Subtask(
        id="invoices",
        name="Invoice processing",
        business_domain="Finance",
        automation_potential=90,
        keywords=["invoice", "ocr"],
    )


class TestInvoiceScenario:
    """A finance agent should clearly beat an unrelated content writer."""

    def test_invoice_processor_ranks_first(self, matcher, invoice_subtask, invoice_solutions):
        match = matcher.match_subtask(invoice_subtask, invoice_solutions)
        ids = [r.solution.id for r in match.matched_solutions]
        assert ids[0] == "invoice-processor"
        assert match.matched_solutions[0].match_score > 60

    def test_content_writer_excluded(self, matcher, invoice_subtask, invoice_solutions):
        # 4.6 + 5.4 + 8.4 + 3.6 + 1.4 + 3.6 + 0 + 2.7 = 29.7
        assert matcher.calculate_match_score(invoice_subtask, invoice_solutions[1]) == 30
        match = matcher.match_subtask(invoice_subtask, invoice_solutions)
        assert [r.solution.id for r in match.matched_solutions] == ["invoice-processor"]

    def test_invoice_match_score(self, matcher, invoice_subtask, invoice_solutions):
        # 23 + 5.4 + 14 + 9 + 13.16 + 9 + 4 + 9 = 86.56
        assert matcher.calculate_match_score(invoice_subtask, invoice_solutions[0]) == 87

    def test_agent_recommendation_carries_both_scores(
        self, matcher, invoice_subtask, invoice_solutions
    ):
        match = matcher.match_subtask(invoice_subtask, invoice_solutions)
        top = match.matched_solutions[0]
        assert isinstance(top.solution, AgentSolution)
        assert top.agent_score is not None
        assert top.solution_score is not None
        assert top.solution_score.solution_id == "invoice-processor"
        assert top.reasoning[0] == "Excellent match for Invoice processing with 87% relevance"
        assert top.estimated_cost == "$50-200/month"
        assert top.expected_roi == "300-500%"
        assert top.implementation_steps[2] == "Configure AI agent parameters and training data"

    def test_workflow_has_no_agent_score(self, matcher, make_subtask, make_workflow):
        match = matcher.match_subtask(make_subtask(), [make_workflow()])
        rec = match.matched_solutions[0]
        assert rec.agent_score is None
        assert rec.solution_score is not None
        assert rec.implementation_steps[2] == "Import workflow configuration to n8n"

    def test_roll_ups(self, matcher, invoice_subtask, invoice_solutions):
        match = matcher.match_subtask(invoice_subtask, invoice_solutions[:1])
        assert match.total_match_score == 87.0
        assert match.implementation_priority == Priority.HIGH
        assert match.estimated_roi == 400
        assert match.estimated_roi_label == "400%"
        assert match.time_to_value == "1-2 weeks"


class TestFiltering:
    """Candidates at or below the minimum match score are dropped."""

    def test_score_at_threshold_dropped(self, matcher, make_workflow, make_subtask):
        subtask = make_subtask(automationPotential=100)
        weak = make_workflow(
            "weak",
            automationPotential=0,
            difficulty="Beginner",
            setupTime="Long",
            implementationPriority="Low",
        )
        # 4.6 + 5.4 + 8.4 + 3.6 + 0 + 3.6 + 2 + 2.7 = 30.3
        assert matcher.calculate_match_score(subtask, weak) == 30
        match = matcher.match_subtask(subtask, [weak])
        assert match.matched_solutions == []

    def test_no_candidates(self, matcher, make_subtask):
        match = matcher.match_subtask(make_subtask(), [])
        assert match.matched_solutions == []
        assert match.total_match_score == 0
        assert match.estimated_roi is None
        assert match.estimated_roi_label == "N/A"
        assert match.time_to_value == "N/A"
        assert match.implementation_priority == Priority.LOW

    def test_scores_within_bounds(self, matcher, make_workflow, make_subtask):
        solution = make_workflow(
            automationPotential=100,
            category="Finance & Accounting",
            difficulty="Advanced",
            setupTime="Quick",
            implementationPriority="High",
            tags=["ledger"],
            metrics={"userRating": 5},
        )
        subtask = make_subtask(
            automationPotential=100,
            category="Finance & Accounting",
            keywords=["ledger"],
        )
        assert matcher.calculate_match_score(subtask, solution) == 100


class TestRanking:
    """Ordering and alternatives."""

    def test_ties_break_on_id(self, matcher, make_workflow, make_subtask):
        solutions = [make_workflow("wf-b"), make_workflow("wf-a")]
        match = matcher.match_subtask(make_subtask(), solutions)
        assert [r.solution.id for r in match.matched_solutions] == ["wf-a", "wf-b"]

    def test_alternatives_share_type_and_category(self, matcher, make_workflow, make_agent, make_subtask):
        solutions = [
            make_workflow("wf-1"),
            make_workflow("wf-2"),
            make_agent("agent-1"),
            make_workflow("wf-other", category="Data Analysis"),
        ]
        match = matcher.match_subtask(make_subtask(), solutions)
        rec = next(r for r in match.matched_solutions if r.solution.id == "wf-1")
        assert [a.id for a in rec.alternatives] == ["wf-2"]

    def test_alternatives_capped(self, matcher, make_workflow, make_subtask):
        solutions = [make_workflow(f"wf-{i}") for i in range(6)]
        match = matcher.match_subtask(make_subtask(), solutions)
        assert all(len(r.alternatives) == 3 for r in match.matched_solutions)

    def test_duplicate_ids_first_wins(self, matcher, make_workflow, make_subtask):
        first = make_workflow("dup", name="First")
        second = make_workflow("dup", name="Second")
        result = matcher.match([make_subtask()], [first, second])
        assert result.total_solutions == 1
        names = [r.solution.name for r in result.subtask_matches[0].matched_solutions]
        assert names == ["First"]


class TestDeterminePriority:
    """Priority derived from total match score and automation potential."""

    @pytest.mark.parametrize("total,potential,expected", [
        (80, 70, Priority.HIGH),
        (95, 69, Priority.MEDIUM),
        (79.9, 90, Priority.MEDIUM),
        (60, 50, Priority.MEDIUM),
        (59.9, 90, Priority.LOW),
        (90, 49, Priority.LOW),
    ])
    def test_thresholds(self, matcher, total, potential, expected):
        assert matcher.determine_priority(total, potential) == expected


class TestMatch:
    """Tests for the full match() roll-up."""

    def test_summary(self, matcher, invoice_subtask, invoice_solutions):
        result = matcher.match([invoice_subtask], invoice_solutions)
        assert result.total_solutions == 2
        assert result.matched_solutions == len(result.subtask_matches[0].matched_solutions)
        assert result.average_match_score == result.subtask_matches[0].total_match_score
        assert len(result.implementation_roadmap.phases) == 3

    def test_quick_win_recommendation(self, matcher, invoice_subtask, invoice_solutions):
        result = matcher.match([invoice_subtask], invoice_solutions)
        assert "1 quick-win solutions available for rapid implementation" in result.recommendations

    def test_empty_subtasks(self, matcher, invoice_solutions):
        result = matcher.match([], invoice_solutions)
        assert result.subtask_matches == []
        assert result.average_match_score == 0.0
        assert result.recommendations == []

    def test_deterministic(self, matcher, invoice_subtask, invoice_solutions):
        first = matcher.match([invoice_subtask], invoice_solutions)
        second = matcher.match([invoice_subtask], invoice_solutions)
        assert first == second
