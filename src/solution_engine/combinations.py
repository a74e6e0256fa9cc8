"""Combination engine.

Proposes bundles of solutions from subtask matches: a standalone pick and
a multi-solution bundle for each high-priority subtask, plus cross-domain
bundles for business domains spanning several subtasks.
"""

import logging
import re
from typing import Optional

from .config import CombinationConfig
from .schema import (
    BaseSolution,
    CombinationRecommendation,
    CostBenefitAnalysis,
    Priority,
    SolutionCategory,
    SolutionCombination,
    SubtaskMatch,
)
from .tables import (
    PRICING_MONTHLY_COST,
    SETUP_SPEED_ORDER,
    SETUP_TIME_MINUTES,
    round_half_up,
)

logger = logging.getLogger(__name__)


def domain_slug(domain: str) -> str:
    """Lowercase a business domain and join its words with hyphens."""
    return re.sub(r"[^a-z0-9]+", "-", domain.lower()).strip("-")


def format_setup_time(total_minutes: int) -> str:
    if total_minutes <= 60:
        return f"{total_minutes} minutes"
    if total_minutes <= 480:
        return f"{round_half_up(total_minutes / 60)} hours"
    return f"{round_half_up(total_minutes / 480)} days"


def format_monthly_cost(total: int) -> str:
    if total == 0:
        return "Free"
    if total <= 200:
        return f"${total}/month"
    if total <= 1000:
        return f"${round_half_up(total / 100) * 100}/month"
    return f"${round_half_up(total / 1000)}k/month"


class CombinationEngine:
    """Builds and ranks solution combinations.

    Every combination lists each solution at most once and carries a
    dependency entry for every member.
    """

    def __init__(self, config: Optional[CombinationConfig] = None):
        self.config = config or CombinationConfig()

    def generate(self, subtask_matches: list[SubtaskMatch]) -> list[CombinationRecommendation]:
        """Generate combination recommendations.

        Args:
            subtask_matches: Output of the matcher, in subtask order.

        Returns:
            Recommendations sorted by priority then match score, both descending.
        """
        recommendations: list[CombinationRecommendation] = []

        for match in subtask_matches:
            if match.implementation_priority != Priority.HIGH or not match.matched_solutions:
                continue
            recommendations.extend(self._combinations_for_match(match))

        recommendations.extend(self._cross_domain_combinations(subtask_matches))

        recommendations.sort(key=lambda r: (-r.priority.rank, -r.match_score))
        logger.debug("Generated %s combinations", len(recommendations))
        return recommendations

    def _combinations_for_match(self, match: SubtaskMatch) -> list[CombinationRecommendation]:
        solutions = _dedupe([r.solution for r in match.matched_solutions])
        top = solutions[0]

        single_id = f"single-{match.subtask_id}-{top.id}"
        multi_id = f"multi-{match.subtask_id}"
        has_multi = len(solutions) >= 2

        single = SolutionCombination(
            id=single_id,
            name=f"{top.name} - Standalone",
            description=f"Single solution implementation for {match.subtask_name}",
            solutions=[top],
            category=top.category,
            business_domain=match.business_domain,
            total_automation_potential=top.automation_potential,
            combined_roi=top.estimated_roi.label or "N/A",
            implementation_order=[top.id],
            dependencies=self._dependencies([top]),
            estimated_total_setup_time=self._setup_time([top]),
            total_estimated_cost=self._total_cost([top]),
            prerequisites=self._prerequisites([top]),
            use_case=f"Automate {match.subtask_name} using {top.name}",
            benefits=[f"Automate {match.automation_potential}% of {match.subtask_name}"],
            challenges=["Single point of failure", "Limited scope"],
            risk_mitigation=["Implement monitoring", "Plan fallback processes"],
            success_metrics=["Automation rate", "Error reduction", "Time savings"],
            alternative_combinations=[multi_id] if has_multi else [],
        )
        results = [self._recommend(
            single,
            match_score=match.total_match_score,
            reasoning=[
                f"High match score ({match.total_match_score}%) for {match.subtask_name}"
            ],
            priority=match.implementation_priority,
            expected_outcome=f"Automate {match.automation_potential}% of {match.subtask_name}",
            resources=["Solution specialist", "Business analyst"],
        )]

        if has_multi:
            members = solutions[:self.config.max_multi_solutions]
            potential = min(
                self.config.multi_score_cap,
                _mean([s.automation_potential for s in members]) + self.config.multi_score_bonus,
            )
            multi = SolutionCombination(
                id=multi_id,
                name=f"{match.subtask_name} - Multi-Solution",
                description=(
                    f"Comprehensive automation using multiple solutions for {match.subtask_name}"
                ),
                solutions=members,
                category=top.category,
                business_domain=match.business_domain,
                total_automation_potential=potential,
                combined_roi=self._combined_roi(members),
                implementation_order=self._implementation_order(members),
                dependencies=self._dependencies(members),
                estimated_total_setup_time=self._setup_time(members),
                total_estimated_cost=self._total_cost(members),
                prerequisites=self._prerequisites(members),
                use_case=f"Comprehensive automation of {match.subtask_name}",
                benefits=[
                    f"Higher automation potential ({potential:g}%)",
                    "Redundancy and fault tolerance",
                    "Comprehensive coverage of edge cases",
                ],
                challenges=[
                    "Increased complexity",
                    "Higher implementation cost",
                    "More integration points",
                ],
                risk_mitigation=[
                    "Phased implementation",
                    "Thorough testing at each phase",
                    "Clear rollback plans",
                ],
                success_metrics=[
                    "Overall automation rate",
                    "Process efficiency improvement",
                    "Error reduction",
                    "User satisfaction",
                ],
                alternative_combinations=[single_id],
            )
            results.append(self._recommend(
                multi,
                match_score=min(
                    self.config.multi_score_cap,
                    match.total_match_score + self.config.multi_score_bonus,
                ),
                reasoning=[
                    f"Combination approach for {match.subtask_name}",
                    "Multiple solutions provide redundancy and coverage",
                    "Sequential implementation reduces risk",
                ],
                priority=match.implementation_priority,
                expected_outcome=f"Comprehensive automation of {match.subtask_name}",
                resources=["Solution architect", "Business analyst", "Integration specialist"],
            ))

        return results

    def _cross_domain_combinations(
        self,
        subtask_matches: list[SubtaskMatch],
    ) -> list[CombinationRecommendation]:
        groups: dict[str, list[SubtaskMatch]] = {}
        for match in subtask_matches:
            slug = domain_slug(match.business_domain)
            if slug:
                groups.setdefault(slug, []).append(match)

        results = []
        for slug, matches in groups.items():
            domain = matches[0].business_domain.strip()
            if len(matches) < 2:
                continue
            pool = _dedupe([
                r.solution for m in matches for r in m.matched_solutions
            ])[:self.config.max_cross_domain_solutions]
            if not pool:
                logger.debug("No solutions to combine for domain %s", domain)
                continue

            potential = min(
                self.config.cross_domain_potential_cap,
                _mean([s.automation_potential for s in pool])
                + self.config.cross_domain_potential_bonus,
            )
            combination = SolutionCombination(
                id=f"cross-domain-{slug}",
                name=f"{domain} - Cross-Domain Automation",
                description=f"Integrated automation across multiple {domain} processes",
                solutions=pool,
                category=SolutionCategory.GENERAL_BUSINESS,
                business_domain=domain,
                total_automation_potential=potential,
                combined_roi=self._combined_roi(pool),
                implementation_order=self._implementation_order(pool),
                dependencies=self._dependencies(pool),
                estimated_total_setup_time=self._setup_time(pool),
                total_estimated_cost=self._total_cost(pool),
                prerequisites=self._prerequisites(pool),
                use_case=f"End-to-end automation across {domain} processes",
                benefits=[
                    "Eliminates process handoffs",
                    "Improves data consistency",
                    "Reduces manual intervention",
                    "Better process visibility",
                ],
                challenges=[
                    "Complex integration requirements",
                    "Cross-functional coordination needed",
                    "Higher initial investment",
                ],
                risk_mitigation=[
                    "Start with core processes",
                    "Involve all stakeholders early",
                    "Implement monitoring and alerts",
                ],
                success_metrics=[
                    "End-to-end process time",
                    "Handoff reduction",
                    "Data accuracy improvement",
                    "Overall efficiency gain",
                ],
            )
            results.append(self._recommend(
                combination,
                match_score=self.config.cross_domain_score,
                reasoning=[
                    f"Cross-domain automation for {domain}",
                    "Integrated workflow across multiple business processes",
                    "Eliminates handoffs and improves efficiency",
                ],
                priority=Priority.HIGH,
                expected_outcome=f"Seamless automation across {domain} processes",
                resources=["Solution architect", "Business analyst", "Process specialist"],
            ))

        return results

    def _recommend(
        self,
        combination: SolutionCombination,
        match_score: float,
        reasoning: list[str],
        priority: Priority,
        expected_outcome: str,
        resources: list[str],
    ) -> CombinationRecommendation:
        return CombinationRecommendation(
            combination=combination,
            match_score=match_score,
            reasoning=reasoning,
            priority=priority,
            expected_outcome=expected_outcome,
            implementation_timeline=combination.estimated_total_setup_time,
            resource_requirements=resources,
            cost_benefit_analysis=CostBenefitAnalysis(
                total_cost=combination.total_estimated_cost,
                expected_savings=self.config.expected_savings,
                payback_period=self.config.payback_period,
                roi=combination.combined_roi,
            ),
        )

    def _combined_roi(self, solutions: list[BaseSolution]) -> str:
        average = _mean([s.estimated_roi.midpoint for s in solutions])
        return f"{round_half_up(average * self.config.roi_multiplier)}%"

    def _implementation_order(self, solutions: list[BaseSolution]) -> list[str]:
        ordered = sorted(solutions, key=lambda s: (
            -s.implementation_priority.rank,
            SETUP_SPEED_ORDER[s.setup_time],
        ))
        return [s.id for s in ordered]

    def _dependencies(self, solutions: list[BaseSolution]) -> dict[str, list[str]]:
        # No inter-solution dependency data exists in the catalog yet
        return {s.id: [] for s in solutions}

    def _setup_time(self, solutions: list[BaseSolution]) -> str:
        return format_setup_time(sum(SETUP_TIME_MINUTES[s.setup_time] for s in solutions))

    def _total_cost(self, solutions: list[BaseSolution]) -> str:
        total = sum(
            PRICING_MONTHLY_COST[s.pricing] for s in solutions if s.pricing is not None
        )
        return format_monthly_cost(total)

    def _prerequisites(self, solutions: list[BaseSolution]) -> list[str]:
        items: list[str] = []
        for solution in solutions:
            for requirement in solution.requirements:
                for item in requirement.items:
                    if item not in items:
                        items.append(item)
        return items


def _dedupe(solutions: list[BaseSolution]) -> list[BaseSolution]:
    seen: set[str] = set()
    unique = []
    for solution in solutions:
        if solution.id not in seen:
            seen.add(solution.id)
            unique.append(solution)
    return unique


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0
