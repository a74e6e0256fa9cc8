"""Solution matcher.

Matches business subtasks to catalog solutions with an eight-criterion
weighted score, drops weak candidates, ranks the rest and rolls the
results up into per-subtask priorities and a matching summary.
"""

import logging
from collections import Counter
from typing import Iterable, Optional

from .agent_scorer import AgentScorer
from .breakdown import overlaps, priority_score, setup_time_score
from .config import EngineConfig
from .explainer import RecommendationExplainer
from .roadmap import RoadmapBuilder
from .schema import (
    AgentScore,
    AgentSolution,
    BaseSolution,
    Difficulty,
    MatchingResult,
    Priority,
    ScoringContext,
    SolutionRecommendation,
    SolutionScore,
    Subtask,
    SubtaskMatch,
)
from .scorer import RankingOptions, SolutionScorer
from .tables import DOMAIN_CATEGORY_MAP, clamp, round_half_up

logger = logging.getLogger(__name__)


def unique_solutions(solutions: Iterable[BaseSolution]) -> list[BaseSolution]:
    """Drop repeated solution ids, keeping the first occurrence."""
    seen: set[str] = set()
    unique: list[BaseSolution] = []
    for solution in solutions:
        if solution.id in seen:
            logger.warning("Ignoring duplicate solution id: %s", solution.id)
            continue
        seen.add(solution.id)
        unique.append(solution)
    return unique


class SolutionMatcher:
    """Matches subtasks to solutions.

    Matching principles:
    - Candidates at or below the minimum match score are never returned
    - Ties break on implementation priority, then solution id
    - Every recommendation carries a solution score, and agents an agent score
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """Initialize the matcher.

        Raises:
            ConfigurationError: If any configured weight group is invalid.
        """
        self.config = config or EngineConfig()
        self.config.validate_weights()
        self.matching = self.config.matching
        self.solution_scorer = SolutionScorer(self.config.solution_scoring)
        self.agent_scorer = AgentScorer(self.config.agent_scoring)
        self.explainer = RecommendationExplainer(self.matching)
        self.roadmap_builder = RoadmapBuilder()

    def match(
        self,
        subtasks: list[Subtask],
        solutions: Iterable[BaseSolution],
    ) -> MatchingResult:
        """Match every subtask against the solution pool.

        Args:
            subtasks: Subtasks to match, in output order.
            solutions: Candidate catalog solutions.

        Returns:
            MatchingResult with per-subtask matches, aggregates and roadmap.
        """
        pool = unique_solutions(solutions)
        subtask_matches = [self._match_unique(subtask, pool) for subtask in subtasks]

        matched = sum(len(m.matched_solutions) for m in subtask_matches)
        average = 0.0
        if subtask_matches:
            average = round(
                sum(m.total_match_score for m in subtask_matches) / len(subtask_matches), 1
            )

        logger.debug(
            "Matched %s subtasks against %s solutions (%s recommendations)",
            len(subtask_matches), len(pool), matched,
        )

        return MatchingResult(
            subtask_matches=subtask_matches,
            total_solutions=len(pool),
            matched_solutions=matched,
            average_match_score=average,
            recommendations=self.explainer.summarize_matches(subtask_matches),
            implementation_roadmap=self.roadmap_builder.build(subtask_matches),
        )

    def match_subtask(
        self,
        subtask: Subtask,
        solutions: Iterable[BaseSolution],
    ) -> SubtaskMatch:
        """Match a single subtask against the solution pool."""
        return self._match_unique(subtask, unique_solutions(solutions))

    def score_solutions(
        self,
        solutions: Iterable[BaseSolution],
        context: Optional[ScoringContext] = None,
        options: Optional[RankingOptions] = None,
    ) -> list[SolutionScore]:
        return self.solution_scorer.score_and_rank(solutions, context, options)

    def score_agents(
        self,
        agents: Iterable[AgentSolution],
        context: Optional[ScoringContext] = None,
    ) -> list[AgentScore]:
        return self.agent_scorer.score_all(agents, context)

    def calculate_match_score(self, subtask: Subtask, solution: BaseSolution) -> int:
        """Weighted eight-criterion match score, 0-100."""
        weights = self.matching.weights
        total = (
            self._score_automation(subtask, solution) * weights.automation_potential
            + self._score_category(subtask, solution) * weights.category_relevance
            + self._score_difficulty(subtask, solution) * weights.difficulty_match
            + setup_time_score(solution.setup_time) * weights.setup_time
            + solution.metrics.user_rating * 20 * weights.user_rating
            + priority_score(solution.implementation_priority) * weights.implementation_priority
            + self._score_tags(subtask, solution) * weights.tags_relevance
            + self._score_business_domain(subtask, solution) * weights.business_domain
        )
        return int(clamp(round_half_up(total)))

    def _match_unique(self, subtask: Subtask, pool: list[BaseSolution]) -> SubtaskMatch:
        context = ScoringContext.for_subtask(subtask)
        recommendations: list[SolutionRecommendation] = []

        for solution in pool:
            score = self.calculate_match_score(subtask, solution)
            if score <= self.matching.minimum_match_score:
                continue
            recommendations.append(self._build_recommendation(
                subtask, solution, score, pool, context
            ))

        recommendations.sort(key=lambda r: (
            -r.match_score,
            -r.solution.implementation_priority.rank,
            r.solution.id,
        ))

        total = 0.0
        if recommendations:
            total = round(sum(r.match_score for r in recommendations) / len(recommendations), 1)

        roi = self._estimate_roi(recommendations)

        return SubtaskMatch(
            subtask_id=subtask.id,
            subtask_name=subtask.name,
            business_domain=subtask.business_domain,
            automation_potential=subtask.automation_potential,
            matched_solutions=recommendations,
            total_match_score=total,
            implementation_priority=self.determine_priority(total, subtask.automation_potential),
            estimated_roi=roi,
            estimated_roi_label=f"{roi}%" if roi is not None else "N/A",
            time_to_value=self._most_common_time_to_value(recommendations),
        )

    def _build_recommendation(
        self,
        subtask: Subtask,
        solution: BaseSolution,
        score: int,
        pool: list[BaseSolution],
        context: ScoringContext,
    ) -> SolutionRecommendation:
        agent_score = None
        if isinstance(solution, AgentSolution):
            agent_score = self.agent_scorer.score(solution, context)

        return SolutionRecommendation(
            solution=solution,
            match_score=score,
            reasoning=self.explainer.explain_match(subtask, solution, score),
            alternatives=self._find_alternatives(solution, pool),
            implementation_steps=self.explainer.implementation_steps(solution),
            estimated_cost=self.explainer.estimated_cost(solution),
            expected_roi=solution.estimated_roi.label,
            solution_score=self.solution_scorer.score(solution, context),
            agent_score=agent_score,
        )

    def _find_alternatives(
        self,
        solution: BaseSolution,
        pool: list[BaseSolution],
    ) -> list[BaseSolution]:
        """Same type and category, in catalog order."""
        alternatives = [
            s for s in pool
            if s.id != solution.id
            and s.type == solution.type
            and s.category == solution.category
        ]
        return alternatives[:self.matching.max_alternatives]

    def determine_priority(self, total_score: float, automation_potential: int) -> Priority:
        cfg = self.matching
        if total_score >= cfg.high_priority_score and automation_potential >= cfg.high_priority_potential:
            return Priority.HIGH
        if total_score >= cfg.medium_priority_score and automation_potential >= cfg.medium_priority_potential:
            return Priority.MEDIUM
        return Priority.LOW

    # -------------------------------------------------------------------------
    # Criteria
    # -------------------------------------------------------------------------

    def _score_automation(self, subtask: Subtask, solution: BaseSolution) -> int:
        difference = abs(subtask.automation_potential - solution.automation_potential)
        if difference <= 10:
            return 100
        if difference <= 25:
            return 80
        if difference <= 40:
            return 60
        if difference <= 60:
            return 40
        return 20

    def _score_category(self, subtask: Subtask, solution: BaseSolution) -> int:
        wanted = subtask.category.lower()
        actual = solution.category.value.lower()
        if wanted == actual:
            return 100
        if set(wanted.split()) & set(actual.split()):
            return 70
        return 30

    def _score_difficulty(self, subtask: Subtask, solution: BaseSolution) -> int:
        # Higher automation targets call for more capable solutions
        potential = subtask.automation_potential
        if potential >= 80 and solution.difficulty == Difficulty.ADVANCED:
            return 100
        if potential >= 60 and solution.difficulty == Difficulty.INTERMEDIATE:
            return 100
        if potential < 60 and solution.difficulty == Difficulty.BEGINNER:
            return 100
        return 60

    def _score_tags(self, subtask: Subtask, solution: BaseSolution) -> float:
        if not subtask.keywords or not solution.tags:
            return 50
        matched = [
            k for k in subtask.keywords
            if any(overlaps(k, tag) for tag in solution.tags)
        ]
        return len(matched) / len(subtask.keywords) * 100

    def _score_business_domain(self, subtask: Subtask, solution: BaseSolution) -> int:
        categories = DOMAIN_CATEGORY_MAP.get(subtask.business_domain, [])
        if solution.category in categories:
            return 100
        return 30

    # -------------------------------------------------------------------------
    # Roll-ups
    # -------------------------------------------------------------------------

    def _estimate_roi(self, recommendations: list[SolutionRecommendation]) -> Optional[int]:
        """Mean ROI midpoint; unparsed ROI text counts as zero."""
        if not recommendations:
            return None
        midpoints = [r.solution.estimated_roi.midpoint for r in recommendations]
        return round_half_up(sum(midpoints) / len(midpoints))

    def _most_common_time_to_value(self, recommendations: list[SolutionRecommendation]) -> str:
        labels = [r.solution.time_to_value.label for r in recommendations]
        labels = [label for label in labels if label]
        if not labels:
            return "N/A"
        counts = Counter(labels)
        best = max(counts.values())
        # First label reaching the top count wins ties
        return next(label for label in labels if counts[label] == best)
