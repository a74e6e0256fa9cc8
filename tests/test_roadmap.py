"""Tests for the implementation roadmap and explanations."""

from solution_engine.explainer import RecommendationExplainer
from solution_engine.roadmap import RoadmapBuilder
from solution_engine.schema import (
    ExcludedSolution,
    ExclusionReasonDetail,
    Priority,
    SolutionRecommendation,
    SubtaskMatch,
)


def _match(name, priority, roi=None, solutions=()):
    return SubtaskMatch(
        subtask_id=name.lower(),
        subtask_name=name,
        business_domain="Finance",
        automation_potential=80,
        matched_solutions=[
            SolutionRecommendation(solution=s, match_score=70) for s in solutions
        ],
        implementation_priority=priority,
        estimated_roi=roi,
    )


class TestRoadmapBuilder:
    """Three sequential phases bucketed by subtask priority."""

    def test_phases_by_priority(self):
        roadmap = RoadmapBuilder().build([
            _match("Payroll", Priority.LOW),
            _match("Invoices", Priority.HIGH),
            _match("Expenses", Priority.MEDIUM),
            _match("Receipts", Priority.HIGH),
        ])
        assert [p.phase for p in roadmap.phases] == [1, 2, 3]
        assert roadmap.phases[0].solutions == ["Invoices", "Receipts"]
        assert roadmap.phases[1].solutions == ["Expenses"]
        assert roadmap.phases[2].solutions == ["Payroll"]

    def test_fixed_bands(self):
        roadmap = RoadmapBuilder().build([])
        assert all(p.solutions == [] for p in roadmap.phases)
        assert roadmap.total_estimated_time == "12-24 weeks"
        assert roadmap.total_estimated_cost == "$5500-15000"
        assert roadmap.expected_roi == "200-400%"
        assert roadmap.phases[1].dependencies == ["Phase 1 completion"]

    def test_critical_path_and_dependencies(self):
        roadmap = RoadmapBuilder().build([])
        assert roadmap.critical_path == [
            "Phase 1: Quick Wins & High ROI",
            "Phase 2: Medium Priority Solutions",
            "Phase 3: Advanced Solutions & Optimization",
        ]
        assert roadmap.dependencies == {"Phase 2": ["Phase 1"], "Phase 3": ["Phase 2"]}


class TestRecommendationExplainer:
    """Reasoning, steps, cost text and summaries."""

    def test_headline_bands(self, make_subtask, make_workflow):
        explainer = RecommendationExplainer()
        subtask = make_subtask(name="Invoices")
        solution = make_workflow()
        assert explainer.explain_match(subtask, solution, 80)[0].startswith("Excellent match")
        assert explainer.explain_match(subtask, solution, 60)[0].startswith("Good match")
        assert explainer.explain_match(subtask, solution, 59)[0].startswith("Moderate match")

    def test_domain_and_priority_reasons(self, make_subtask, make_workflow):
        explainer = RecommendationExplainer()
        subtask = make_subtask(automationPotential=50)
        solution = make_workflow(category="Finance & Accounting", implementationPriority="High")
        reasoning = explainer.explain_match(subtask, solution, 75)
        assert "High automation potential (60%) matches task requirements" in reasoning
        assert "Business domain alignment: Finance & Accounting matches Finance" in reasoning
        assert reasoning[-1] == "High implementation priority indicates proven effectiveness"

    def test_workflow_steps(self, make_workflow):
        steps = RecommendationExplainer().implementation_steps(make_workflow())
        assert len(steps) == 7
        assert steps[2] == "Import workflow configuration to n8n"

    def test_estimated_cost(self, make_workflow):
        explainer = RecommendationExplainer()
        assert explainer.estimated_cost(make_workflow(pricing="Free")) == "No additional cost"
        assert explainer.estimated_cost(make_workflow()) == "Cost varies based on usage"

    def test_summarize_matches(self, make_workflow):
        explainer = RecommendationExplainer()
        summary = explainer.summarize_matches([
            _match("Invoices", Priority.HIGH, roi=400, solutions=[make_workflow(setupTime="Quick")]),
            _match("Payroll", Priority.LOW, roi=100),
        ])
        assert summary == [
            "Focus on 1 high-priority solutions for immediate ROI",
            "1 solutions offer 300%+ ROI - prioritize these",
            "1 quick-win solutions available for rapid implementation",
        ]

    def test_format_exclusion_summary(self):
        excluded = [ExcludedSolution(
            solution_id="x",
            name="Legacy Sync",
            reasons=[
                ExclusionReasonDetail(reason_type="a", description="Status is Deprecated"),
                ExclusionReasonDetail(reason_type="b", description="No documentation"),
            ],
        )]
        assert RecommendationExplainer().format_exclusion_summary(excluded) == [
            "Legacy Sync: Status is Deprecated; No documentation"
        ]
