"""Solution scorer.

Scores catalog solutions against an optional scoring context on four
axes (relevance, quality, business value, implementation), combines them
with configured weights and applies multiplicative boosts.
"""

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from .breakdown import (
    automation_alignment,
    calculate_breakdown,
    deployment_score,
    difficulty_alignment,
    difficulty_score,
    domain_alignment,
    priority_alignment,
    priority_score,
    review_score,
    roi_score,
    setup_time_alignment,
    setup_time_score,
    status_score,
    time_to_value_score,
)
from .config import SolutionScoringConfig
from .schema import BaseSolution, ScoringContext, SolutionScore, SolutionStatus
from .tables import NEUTRAL_SCORE, clamp, round_half_up


class SortKey(str, Enum):
    """Score axis used to order ranked solutions."""
    OVERALL = "overall"
    RELEVANCE = "relevance"
    QUALITY = "quality"
    BUSINESS_VALUE = "business_value"
    IMPLEMENTATION = "implementation"


class RankingOptions(BaseModel):
    """How score_and_rank orders and truncates its output."""
    sort_by: SortKey = SortKey.OVERALL
    descending: bool = True
    limit: Optional[int] = Field(None, ge=1)


_SORT_ATTRIBUTES = {
    SortKey.OVERALL: "overall_score",
    SortKey.RELEVANCE: "relevance_score",
    SortKey.QUALITY: "quality_score",
    SortKey.BUSINESS_VALUE: "business_value_score",
    SortKey.IMPLEMENTATION: "implementation_score",
}


class SolutionScorer:
    """Scores solutions on relevance, quality, business value and ease.

    Scoring principles:
    - Absent context hints score neutrally, never zero
    - Missing metrics are skipped rather than penalized
    - Pricing affects cost text and cost-effectiveness, never quality
    - Boosts compound and the result is capped at 100
    """

    def __init__(self, config: Optional[SolutionScoringConfig] = None):
        """Initialize scorer with optional custom configuration.

        Raises:
            ConfigurationError: If the configured weights are invalid.
        """
        self.config = config or SolutionScoringConfig()
        self.config.weights.validate_weights()

    def score(
        self,
        solution: BaseSolution,
        context: Optional[ScoringContext] = None,
    ) -> SolutionScore:
        """Score a single solution.

        Args:
            solution: Catalog solution to score.
            context: Optional hints; an empty context scores relevance at 75.

        Returns:
            SolutionScore with ranking 0 (unranked).
        """
        context = context or ScoringContext()

        relevance = self._score_relevance(solution, context)
        quality = self._score_quality(solution)
        business_value = self._score_business_value(solution)
        implementation = self._score_implementation(solution)

        weights = self.config.weights
        overall = round_half_up(
            relevance * weights.relevance
            + quality * weights.quality
            + business_value * weights.business_value
            + implementation * weights.implementation
        )
        overall = self._apply_boosts(overall, quality, business_value, implementation)

        return SolutionScore(
            solution_id=solution.id,
            overall_score=overall,
            relevance_score=relevance,
            quality_score=quality,
            business_value_score=business_value,
            implementation_score=implementation,
            breakdown=calculate_breakdown(solution, context),
            ranking=0,
            confidence=self._calculate_confidence(solution),
        )

    def score_and_rank(
        self,
        solutions: Iterable[BaseSolution],
        context: Optional[ScoringContext] = None,
        options: Optional[RankingOptions] = None,
    ) -> list[SolutionScore]:
        """Score, filter by minimum score, sort and assign 1-based ranks."""
        options = options or RankingOptions()
        minimum = self.config.thresholds.minimum_score

        scores = [self.score(s, context) for s in solutions]
        scores = [s for s in scores if s.overall_score >= minimum]

        attribute = _SORT_ATTRIBUTES[options.sort_by]
        scores.sort(key=lambda s: s.solution_id)
        scores.sort(key=lambda s: getattr(s, attribute), reverse=options.descending)

        if options.limit is not None:
            scores = scores[:options.limit]

        return [
            s.model_copy(update={"ranking": i})
            for i, s in enumerate(scores, start=1)
        ]

    def _score_relevance(self, solution: BaseSolution, context: ScoringContext) -> int:
        """Mean alignment over the hints present in the context."""
        scores: list[int] = []

        if context.business_domain:
            scores.append(domain_alignment(solution, context.business_domain))
        if context.automation_potential is not None:
            scores.append(automation_alignment(
                context.automation_potential, solution.automation_potential
            ))
        if context.difficulty is not None:
            scores.append(difficulty_alignment(context.difficulty, solution.difficulty))
        if context.setup_time is not None:
            scores.append(setup_time_alignment(context.setup_time, solution.setup_time))
        if context.priority is not None:
            scores.append(priority_alignment(context.priority, solution.implementation_priority))

        if not scores:
            return NEUTRAL_SCORE
        return round_half_up(sum(scores) / len(scores))

    def _score_quality(self, solution: BaseSolution) -> int:
        metrics = solution.metrics
        scores: list[float] = []

        if metrics.user_rating > 0:
            scores.append(metrics.user_rating * 20)
        if metrics.success_rate > 0:
            scores.append(metrics.success_rate)
        if metrics.performance_score > 0:
            scores.append(metrics.performance_score)

        scores.append(review_score(metrics.review_count))
        scores.append(status_score(solution.status))

        return round_half_up(sum(scores) / len(scores))

    def _score_business_value(self, solution: BaseSolution) -> int:
        scores: list[float] = [solution.automation_potential]

        roi = roi_score(solution.estimated_roi)
        if roi > 0:
            scores.append(roi)

        scores.append(time_to_value_score(solution.time_to_value))
        scores.append(priority_score(solution.implementation_priority))

        return round_half_up(sum(scores) / len(scores))

    def _score_implementation(self, solution: BaseSolution) -> int:
        scores: list[float] = [
            setup_time_score(solution.setup_time),
            difficulty_score(solution.difficulty),
            deployment_score(solution.deployment),
        ]
        # Documentation and demos count as extra terms
        if solution.documentation_url:
            scores.append(80)
        if solution.demo_url:
            scores.append(60)

        return round_half_up(sum(scores) / len(scores))

    def _apply_boosts(
        self,
        overall: int,
        quality: int,
        business_value: int,
        implementation: int,
    ) -> int:
        boosts = self.config.boost_factors
        multiplier = 1.0

        if business_value >= 80:
            multiplier *= boosts.high_roi
        if implementation >= 80:
            multiplier *= boosts.quick_setup
        if business_value >= 75:
            multiplier *= boosts.high_priority
        if quality >= 85:
            multiplier *= boosts.proven_track_record

        return min(round_half_up(overall * multiplier), 100)

    def _calculate_confidence(self, solution: BaseSolution) -> int:
        confidence = 50

        if solution.metrics.review_count >= 10:
            confidence += 20
        if solution.metrics.usage_count >= 100:
            confidence += 15
        if solution.documentation_url:
            confidence += 10
        if solution.demo_url:
            confidence += 5

        if solution.status == SolutionStatus.BETA:
            confidence -= 15
        if solution.status == SolutionStatus.DEPRECATED:
            confidence -= 30

        return int(clamp(confidence))
