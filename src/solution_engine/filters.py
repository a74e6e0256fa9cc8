"""Catalog filter - eligibility rules, text search and facets.

Filters out solutions that fail the caller's criteria and records every
failing rule, so excluded solutions can be explained rather than silently
dropped.
"""

from collections import Counter
from typing import Any, Iterable, Optional

from pydantic import Field

from .breakdown import business_domain_alignment
from .schema import (
    BaseSolution,
    Deployment,
    Difficulty,
    EngineModel,
    ExcludedSolution,
    ExclusionReasonDetail,
    PricingTier,
    Priority,
    SetupTime,
    SolutionCategory,
    SolutionStatus,
    SolutionType,
)
from .tables import SETUP_TIME_MINUTES


class FilterCriteria(EngineModel):
    """Eligibility criteria; empty lists and None values do not filter."""
    types: list[SolutionType] = Field(default_factory=list)
    categories: list[SolutionCategory] = Field(default_factory=list)
    difficulties: list[Difficulty] = Field(default_factory=list)
    setup_times: list[SetupTime] = Field(default_factory=list)
    deployments: list[Deployment] = Field(default_factory=list)
    statuses: list[SolutionStatus] = Field(default_factory=list)
    priorities: list[Priority] = Field(default_factory=list)
    price_tiers: list[PricingTier] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    business_domains: list[str] = Field(default_factory=list)
    authors: list[str] = Field(default_factory=list)
    min_automation_potential: Optional[int] = Field(None, ge=0, le=100)
    max_automation_potential: Optional[int] = Field(None, ge=0, le=100)
    min_rating: Optional[float] = Field(None, ge=0, le=5)
    max_setup_minutes: Optional[int] = Field(None, ge=0)
    has_documentation: Optional[bool] = None
    has_demo: Optional[bool] = None
    has_github: Optional[bool] = None


def _joined(values: Iterable[Any]) -> str:
    return ", ".join(getattr(v, "value", str(v)) for v in values)


class CatalogFilter:
    """Filters solutions against FilterCriteria.

    Unlike a first-failure gate, every rule is evaluated so the excluded
    entry lists all the reasons it was dropped.
    """

    def filter(
        self,
        solutions: Iterable[BaseSolution],
        criteria: FilterCriteria,
    ) -> tuple[list[BaseSolution], list[ExcludedSolution]]:
        """Filter solutions based on the criteria.

        Args:
            solutions: Candidate solutions.
            criteria: Eligibility criteria.

        Returns:
            Tuple of (eligible_solutions, excluded_solutions)
        """
        eligible = []
        excluded = []

        for solution in solutions:
            reasons = self._check_eligibility(solution, criteria)
            if reasons:
                excluded.append(ExcludedSolution(
                    solution_id=solution.id,
                    name=solution.name,
                    reasons=reasons,
                ))
            else:
                eligible.append(solution)

        return eligible, excluded

    def _check_eligibility(
        self,
        solution: BaseSolution,
        criteria: FilterCriteria,
    ) -> list[ExclusionReasonDetail]:
        reasons: list[Optional[ExclusionReasonDetail]] = [
            self._check_member("type", solution.type, criteria.types),
            self._check_member("category", solution.category, criteria.categories),
            self._check_member("difficulty", solution.difficulty, criteria.difficulties),
            self._check_member("setup_time", solution.setup_time, criteria.setup_times),
            self._check_member("deployment", solution.deployment, criteria.deployments),
            self._check_member("status", solution.status, criteria.statuses),
            self._check_member(
                "priority", solution.implementation_priority, criteria.priorities
            ),
            self._check_pricing(solution, criteria),
            self._check_automation_range(solution, criteria),
            self._check_rating(solution, criteria),
            self._check_setup_minutes(solution, criteria),
            self._check_tags(solution, criteria),
            self._check_business_domains(solution, criteria),
            self._check_authors(solution, criteria),
            self._check_presence("documentation", solution.documentation_url, criteria.has_documentation),
            self._check_presence("demo", solution.demo_url, criteria.has_demo),
            self._check_presence("github", solution.github_url, criteria.has_github),
        ]
        return [r for r in reasons if r is not None]

    def _check_member(
        self,
        field: str,
        value: Any,
        allowed: list[Any],
    ) -> Optional[ExclusionReasonDetail]:
        if not allowed or value in allowed:
            return None
        label = value.value
        return ExclusionReasonDetail(
            reason_type=f"{field}_mismatch",
            description=f"{field.replace('_', ' ').capitalize()} '{label}' is not one of: {_joined(allowed)}",
            blocking_value=label,
            required_value=_joined(allowed),
        )

    def _check_pricing(
        self,
        solution: BaseSolution,
        criteria: FilterCriteria,
    ) -> Optional[ExclusionReasonDetail]:
        if not criteria.price_tiers or solution.pricing in criteria.price_tiers:
            return None
        label = solution.pricing.value if solution.pricing else "unspecified"
        return ExclusionReasonDetail(
            reason_type="pricing_mismatch",
            description=f"Pricing '{label}' is not one of: {_joined(criteria.price_tiers)}",
            blocking_value=label,
            required_value=_joined(criteria.price_tiers),
        )

    def _check_automation_range(
        self,
        solution: BaseSolution,
        criteria: FilterCriteria,
    ) -> Optional[ExclusionReasonDetail]:
        potential = solution.automation_potential
        low = criteria.min_automation_potential
        high = criteria.max_automation_potential
        if low is not None and potential < low:
            return ExclusionReasonDetail(
                reason_type="automation_potential_too_low",
                description=f"Automation potential {potential}% is below {low}%",
                blocking_value=str(potential),
                required_value=f">= {low}",
            )
        if high is not None and potential > high:
            return ExclusionReasonDetail(
                reason_type="automation_potential_too_high",
                description=f"Automation potential {potential}% is above {high}%",
                blocking_value=str(potential),
                required_value=f"<= {high}",
            )
        return None

    def _check_rating(
        self,
        solution: BaseSolution,
        criteria: FilterCriteria,
    ) -> Optional[ExclusionReasonDetail]:
        rating = solution.metrics.user_rating
        if criteria.min_rating is None or rating >= criteria.min_rating:
            return None
        return ExclusionReasonDetail(
            reason_type="rating_too_low",
            description=f"User rating {rating:g} is below {criteria.min_rating:g}",
            blocking_value=f"{rating:g}",
            required_value=f">= {criteria.min_rating:g}",
        )

    def _check_setup_minutes(
        self,
        solution: BaseSolution,
        criteria: FilterCriteria,
    ) -> Optional[ExclusionReasonDetail]:
        minutes = SETUP_TIME_MINUTES[solution.setup_time]
        if criteria.max_setup_minutes is None or minutes <= criteria.max_setup_minutes:
            return None
        return ExclusionReasonDetail(
            reason_type="setup_too_long",
            description=(
                f"{solution.setup_time.value} setup (~{minutes} minutes) exceeds "
                f"{criteria.max_setup_minutes} minutes"
            ),
            blocking_value=str(minutes),
            required_value=f"<= {criteria.max_setup_minutes}",
        )

    def _check_tags(
        self,
        solution: BaseSolution,
        criteria: FilterCriteria,
    ) -> Optional[ExclusionReasonDetail]:
        if not criteria.tags:
            return None
        tags = {t.lower() for t in solution.tags}
        if any(t.lower() in tags for t in criteria.tags):
            return None
        return ExclusionReasonDetail(
            reason_type="tags_mismatch",
            description=f"None of the tags match: {', '.join(criteria.tags)}",
            blocking_value=", ".join(solution.tags) or None,
            required_value=", ".join(criteria.tags),
        )

    def _check_business_domains(
        self,
        solution: BaseSolution,
        criteria: FilterCriteria,
    ) -> Optional[ExclusionReasonDetail]:
        if not criteria.business_domains:
            return None
        if any(business_domain_alignment(solution, d) == 100 for d in criteria.business_domains):
            return None
        return ExclusionReasonDetail(
            reason_type="business_domain_mismatch",
            description=(
                f"Category '{solution.category.value}' does not serve: "
                f"{', '.join(criteria.business_domains)}"
            ),
            blocking_value=solution.category.value,
            required_value=", ".join(criteria.business_domains),
        )

    def _check_authors(
        self,
        solution: BaseSolution,
        criteria: FilterCriteria,
    ) -> Optional[ExclusionReasonDetail]:
        if not criteria.authors:
            return None
        if solution.author.lower() in {a.lower() for a in criteria.authors}:
            return None
        return ExclusionReasonDetail(
            reason_type="author_mismatch",
            description=f"Author '{solution.author or 'unknown'}' is not one of: {', '.join(criteria.authors)}",
            blocking_value=solution.author or None,
            required_value=", ".join(criteria.authors),
        )

    def _check_presence(
        self,
        what: str,
        value: Optional[str],
        required: Optional[bool],
    ) -> Optional[ExclusionReasonDetail]:
        if required is None or bool(value) == required:
            return None
        state = "has no" if required else "has"
        return ExclusionReasonDetail(
            reason_type=f"{what}_presence",
            description=f"Solution {state} {what} link",
            blocking_value=value,
            required_value="present" if required else "absent",
        )

    def search(self, solutions: Iterable[BaseSolution], query: str) -> list[BaseSolution]:
        """Solutions containing every whitespace-separated query term."""
        terms = [t.lower() for t in query.split()]
        if not terms:
            return list(solutions)

        results = []
        for solution in solutions:
            haystack = " ".join([
                solution.name,
                solution.description,
                solution.category.value,
                *solution.subcategories,
                *solution.tags,
                solution.author,
            ]).lower()
            if all(term in haystack for term in terms):
                results.append(solution)
        return results

    def facets(self, solutions: Iterable[BaseSolution]) -> dict[str, dict[str, int]]:
        """Value counts per facet, most common first."""
        counters: dict[str, Counter] = {
            "category": Counter(),
            "difficulty": Counter(),
            "setup_time": Counter(),
            "deployment": Counter(),
            "priority": Counter(),
            "tag": Counter(),
            "pricing": Counter(),
        }
        for solution in solutions:
            counters["category"][solution.category.value] += 1
            counters["difficulty"][solution.difficulty.value] += 1
            counters["setup_time"][solution.setup_time.value] += 1
            counters["deployment"][solution.deployment.value] += 1
            counters["priority"][solution.implementation_priority.value] += 1
            for tag in solution.tags:
                counters["tag"][tag] += 1
            if solution.pricing is not None:
                counters["pricing"][solution.pricing.value] += 1

        return {name: dict(counter.most_common()) for name, counter in counters.items()}
