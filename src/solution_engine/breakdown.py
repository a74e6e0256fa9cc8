"""Sub-score calculations shared by the scorers.

Each function maps one attribute of a solution (optionally against a
context hint) to a 0-100 score. All are pure.
"""

import re
from typing import Optional

from .schema import (
    BaseSolution,
    Deployment,
    Difficulty,
    PricingTier,
    Priority,
    ScoreBreakdown,
    ScoringContext,
    SetupTime,
    SolutionStatus,
    ValueRange,
)
from .tables import (
    DEFAULT_DEPLOYMENT_SCORE,
    DEFAULT_DIFFICULTY_SCORE,
    DEFAULT_PRICING_SCORE,
    DEFAULT_PRIORITY_SCORE,
    DEFAULT_SCALABILITY_SCORE,
    DEFAULT_SETUP_TIME_SCORE,
    DEFAULT_STATUS_SCORE,
    DEFAULT_TIME_TO_VALUE_SCORE,
    DEPLOYMENT_SCORES,
    DIFFICULTY_ONE_STEP_HARDER,
    DIFFICULTY_SCORES,
    DOMAIN_CATEGORY_MAP,
    NEUTRAL_SCORE,
    OPEN_ENDED_TIME_TO_VALUE_SCORE,
    PRICING_SCORES,
    PRIORITY_SCORES,
    SCALABILITY_SCORES,
    SETUP_TIME_ONE_STEP_LONGER,
    SETUP_TIME_SCORES,
    STATUS_SCORES,
    TIME_TO_VALUE_SCORES,
)


_TOKEN_RE = re.compile(r"[a-z0-9_]+")


def query_tokens(query: Optional[str], min_length: int = 3) -> list[str]:
    """Lower-cased query tokens of at least ``min_length`` characters."""
    if not query:
        return []
    tokens: list[str] = []
    for token in _TOKEN_RE.findall(query.lower()):
        if len(token) >= min_length and token not in tokens:
            tokens.append(token)
    return tokens


def overlaps(a: str, b: str) -> bool:
    """Case-insensitive substring match in either direction."""
    a, b = a.lower(), b.lower()
    return a in b or b in a


# =============================================================================
# Context alignment
# =============================================================================


def domain_alignment(solution: BaseSolution, domain: str) -> int:
    """How well the solution's category serves a business domain."""
    needle = domain.lower()
    if needle in solution.category.value.lower():
        return 100
    if any(needle in sub.lower() for sub in solution.subcategories):
        return 80
    return 40


def automation_alignment(target: int, actual: int) -> int:
    difference = abs(target - actual)
    if difference <= 10:
        return 100
    if difference <= 25:
        return 80
    if difference <= 40:
        return 60
    return 40


def difficulty_alignment(wanted: Difficulty, actual: Difficulty) -> int:
    if wanted == actual:
        return 100
    if (wanted, actual) in DIFFICULTY_ONE_STEP_HARDER:
        return 80
    return 60


def setup_time_alignment(wanted: SetupTime, actual: SetupTime) -> int:
    if wanted == actual:
        return 100
    if (wanted, actual) in SETUP_TIME_ONE_STEP_LONGER:
        return 80
    return 60


def priority_alignment(wanted: Priority, actual: Priority) -> int:
    if wanted == actual:
        return 100
    if wanted == Priority.HIGH and actual == Priority.MEDIUM:
        return 80
    return 60


def business_domain_alignment(solution: BaseSolution, domain: Optional[str]) -> int:
    """Domain-to-category table lookup, with containment as a fallback."""
    if not domain:
        return NEUTRAL_SCORE
    for key, categories in DOMAIN_CATEGORY_MAP.items():
        if key.lower() == domain.strip().lower() and solution.category in categories:
            return 100
    if domain.lower() in solution.category.value.lower():
        return 100
    return 30


def tags_relevance(solution: BaseSolution, context: ScoringContext) -> float:
    """Share of requested capabilities and query terms found in the tags."""
    terms = [c.lower() for c in context.required_capabilities if c]
    terms += [t for t in query_tokens(context.user_query) if t not in terms]
    if not terms:
        return NEUTRAL_SCORE
    if not solution.tags:
        return 50
    matched = [t for t in terms if any(overlaps(t, tag) for tag in solution.tags)]
    return len(matched) / len(terms) * 100


# =============================================================================
# Attribute scores
# =============================================================================


def status_score(status: SolutionStatus) -> int:
    return STATUS_SCORES.get(status, DEFAULT_STATUS_SCORE)


def setup_time_score(setup_time: SetupTime) -> int:
    return SETUP_TIME_SCORES.get(setup_time, DEFAULT_SETUP_TIME_SCORE)


def difficulty_score(difficulty: Difficulty) -> int:
    return DIFFICULTY_SCORES.get(difficulty, DEFAULT_DIFFICULTY_SCORE)


def deployment_score(deployment: Deployment) -> int:
    return DEPLOYMENT_SCORES.get(deployment, DEFAULT_DEPLOYMENT_SCORE)


def scalability_score(deployment: Deployment) -> int:
    return SCALABILITY_SCORES.get(deployment, DEFAULT_SCALABILITY_SCORE)


def priority_score(priority: Priority) -> int:
    return PRIORITY_SCORES.get(priority, DEFAULT_PRIORITY_SCORE)


def cost_effectiveness_score(pricing: Optional[PricingTier]) -> int:
    if pricing is None:
        return DEFAULT_PRICING_SCORE
    return PRICING_SCORES.get(pricing, DEFAULT_PRICING_SCORE)


def review_score(review_count: int) -> int:
    return min(review_count * 2, 100)


def roi_score(roi: ValueRange) -> float:
    """ROI midpoint scaled into 0-100; 0 when unknown."""
    return min(roi.midpoint / 5, 100)


def time_to_value_score(ttv: ValueRange) -> int:
    """Score a week range: faster value scores higher."""
    if not ttv.parsed or (ttv.unit and ttv.unit != "weeks"):
        return DEFAULT_TIME_TO_VALUE_SCORE
    if ttv.is_open_ended:
        return OPEN_ENDED_TIME_TO_VALUE_SCORE
    return TIME_TO_VALUE_SCORES.get((ttv.low, ttv.high), DEFAULT_TIME_TO_VALUE_SCORE)


def category_match(solution: BaseSolution, context: ScoringContext) -> int:
    if not context.business_domain:
        return NEUTRAL_SCORE
    return domain_alignment(solution, context.business_domain)


def difficulty_match(solution: BaseSolution, context: ScoringContext) -> int:
    if context.difficulty is None:
        return NEUTRAL_SCORE
    return difficulty_alignment(context.difficulty, solution.difficulty)


def calculate_breakdown(solution: BaseSolution, context: ScoringContext) -> ScoreBreakdown:
    """Build the twelve-way breakdown for a solution under a context."""
    return ScoreBreakdown(
        automation_potential=solution.automation_potential,
        category_match=category_match(solution, context),
        difficulty_alignment=difficulty_match(solution, context),
        setup_time_efficiency=setup_time_score(solution.setup_time),
        user_satisfaction=solution.metrics.user_rating * 20,
        implementation_priority=priority_score(solution.implementation_priority),
        tags_relevance=tags_relevance(solution, context),
        business_domain_alignment=business_domain_alignment(solution, context.business_domain),
        performance_metrics=solution.metrics.performance_score,
        cost_effectiveness=cost_effectiveness_score(solution.pricing),
        time_to_value=time_to_value_score(solution.time_to_value),
        scalability=scalability_score(solution.deployment),
    )
