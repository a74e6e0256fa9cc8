"""Explainer - human-readable text for matching results.

Generates the reasoning attached to each recommendation, the generic
implementation steps, cost text and the run-level recommendations that
summarize a matching result.
"""

from typing import Optional

from .config import MatchingConfig, get_config
from .schema import (
    BaseSolution,
    ExcludedSolution,
    Priority,
    SetupTime,
    SolutionType,
    Subtask,
    SubtaskMatch,
)
from .tables import (
    AGENT_CONFIGURE_STEP,
    DEFAULT_COST_TEXT,
    IMPLEMENTATION_STEPS,
    PRICING_COST_TEXT,
    TYPE_STEP_POSITION,
    WORKFLOW_IMPORT_STEP,
)


class RecommendationExplainer:
    """Generates explanations for matched solutions.

    Principles:
    - Every recommendation carries at least one reason
    - Text is deterministic for identical inputs
    """

    def __init__(self, config: Optional[MatchingConfig] = None):
        self.config = config or get_config().matching

    def explain_match(
        self,
        subtask: Subtask,
        solution: BaseSolution,
        match_score: int,
    ) -> list[str]:
        """Explain why a solution was matched to a subtask.

        Args:
            subtask: The subtask being matched.
            solution: The candidate solution.
            match_score: The candidate's rounded match score.

        Returns:
            Ordered reasoning strings, headline first.
        """
        reasoning: list[str] = []

        if match_score >= 80:
            reasoning.append(f"Excellent match for {subtask.name} with {match_score}% relevance")
        elif match_score >= 60:
            reasoning.append(f"Good match for {subtask.name} with {match_score}% relevance")
        else:
            reasoning.append(f"Moderate match for {subtask.name} with {match_score}% relevance")

        if solution.automation_potential >= subtask.automation_potential * 0.8:
            reasoning.append(
                f"High automation potential ({solution.automation_potential}%) matches task requirements"
            )

        domain = subtask.business_domain
        if domain and domain.lower() in solution.category.value.lower():
            reasoning.append(
                f"Business domain alignment: {solution.category.value} matches {domain}"
            )

        if solution.implementation_priority == Priority.HIGH:
            reasoning.append("High implementation priority indicates proven effectiveness")

        return reasoning

    def implementation_steps(self, solution: BaseSolution) -> list[str]:
        steps = list(IMPLEMENTATION_STEPS)
        if solution.type == SolutionType.WORKFLOW:
            steps.insert(TYPE_STEP_POSITION, WORKFLOW_IMPORT_STEP)
        elif solution.type == SolutionType.AGENT:
            steps.insert(TYPE_STEP_POSITION, AGENT_CONFIGURE_STEP)
        return steps

    def estimated_cost(self, solution: BaseSolution) -> str:
        if solution.pricing is None:
            return DEFAULT_COST_TEXT
        return PRICING_COST_TEXT.get(solution.pricing, DEFAULT_COST_TEXT)

    def summarize_matches(self, subtask_matches: list[SubtaskMatch]) -> list[str]:
        """Run-level recommendations for a set of subtask matches."""
        recommendations: list[str] = []

        high_priority = [
            m for m in subtask_matches
            if m.implementation_priority == Priority.HIGH
        ]
        if high_priority:
            recommendations.append(
                f"Focus on {len(high_priority)} high-priority solutions for immediate ROI"
            )

        threshold = self.config.high_roi_threshold
        high_roi = [
            m for m in subtask_matches
            if m.estimated_roi is not None and m.estimated_roi >= threshold
        ]
        if high_roi:
            recommendations.append(
                f"{len(high_roi)} solutions offer {threshold}%+ ROI - prioritize these"
            )

        quick_wins = [
            m for m in subtask_matches
            if any(r.solution.setup_time == SetupTime.QUICK for r in m.matched_solutions)
        ]
        if quick_wins:
            recommendations.append(
                f"{len(quick_wins)} quick-win solutions available for rapid implementation"
            )

        return recommendations

    def format_exclusion_summary(self, excluded: list[ExcludedSolution]) -> list[str]:
        """Format exclusion reasons for display.

        Args:
            excluded: List of excluded solutions

        Returns:
            List of formatted exclusion strings
        """
        summaries = []
        for exc in excluded:
            reasons = "; ".join(r.description for r in exc.reasons)
            summaries.append(f"{exc.name}: {reasons}")
        return summaries
