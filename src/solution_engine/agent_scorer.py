"""Agent scorer.

Tiers agent-type solutions (Generalist / Specialist / Experimental) from
capability and domain coverage plus model and provider quality, and
explains the result.
"""

import logging
from typing import Iterable, Optional

from .breakdown import overlaps, query_tokens
from .config import AgentScoringConfig
from .schema import (
    AgentScore,
    AgentScoreBreakdown,
    AgentSolution,
    AgentTier,
    ScoringContext,
)
from .tables import (
    AGENT_DISCLAIMER,
    CORE_CAPABILITIES,
    EXPERIMENTAL_DISCLAIMER_SUFFIX,
    HIGH_QUALITY_MODELS,
    MAJOR_VENDOR_MARKERS,
    MID_QUALITY_MODELS,
    MODEL_SCORE_HIGH,
    MODEL_SCORE_MID,
    MODEL_SCORE_MISSING,
    MODEL_SCORE_OTHER,
    NEUTRAL_SCORE,
    OTHER_DOMAIN,
    PROVIDER_SCORE_MISSING,
    PROVIDER_SCORE_OTHER,
    PROVIDER_SCORE_RELIABLE,
    PROVIDER_SCORE_VENDOR,
    RARE_CAPABILITIES,
    RELATED_DOMAINS,
    RELIABLE_PROVIDERS,
    SPECIALIST_DISCLAIMER_SUFFIX,
    SPECIALIZATION_SCORE_NONE,
    SPECIALIZATION_SCORE_OTHER,
    SPECIALIZATION_SCORE_PAIR,
    SPECIALIZATION_SCORE_RARE,
    SPECIALIZED_CAPABILITY_PAIRS,
    clamp,
    round_half_up,
)

logger = logging.getLogger(__name__)


class AgentScorer:
    """Scores and tiers AI agents.

    The tier is a pure function of the boosted overall score. Coverage
    ratios use the context's own lists as denominators, so an agent with
    a superset of another's capabilities never scores lower.
    """

    def __init__(self, config: Optional[AgentScoringConfig] = None):
        self.config = config or AgentScoringConfig()
        self.config.weights.validate_weights()

    def score(
        self,
        agent: AgentSolution,
        context: Optional[ScoringContext] = None,
    ) -> AgentScore:
        """Score and tier a single agent."""
        context = context or ScoringContext()

        capability = self._score_capabilities(agent, context)
        domain = self._score_domains(agent, context)
        breakdown = AgentScoreBreakdown(
            capability_coverage=capability,
            domain_alignment=domain,
            capability_depth=self._score_capability_depth(agent),
            domain_breadth=self._score_domain_breadth(agent),
            data_quality=self._score_data_quality(agent),
            model_quality=self._score_model_quality(agent),
            provider_reliability=self._score_provider_reliability(agent),
            capability_specialization=self._score_specialization(agent),
        )

        weights = self.config.weights
        base = (
            capability * weights.capability
            + domain * weights.domain
            + breakdown.capability_depth * weights.capability_depth
            + breakdown.domain_breadth * weights.domain_breadth
            + breakdown.data_quality * weights.data_quality
            + breakdown.model_quality * weights.model_quality
            + breakdown.provider_reliability * weights.provider_reliability
        )
        overall = self._apply_boosts(agent, round_half_up(base), breakdown)
        tier = self.determine_tier(overall)

        return AgentScore(
            agent_id=agent.id,
            tier=tier,
            capability_score=capability,
            domain_score=domain,
            overall_score=overall,
            breakdown=breakdown,
            reasoning=self._generate_reasoning(agent, capability, domain, overall, tier),
            confidence=self._calculate_confidence(agent, breakdown),
            disclaimer=self._generate_disclaimer(tier),
        )

    def score_all(
        self,
        agents: Iterable[AgentSolution],
        context: Optional[ScoringContext] = None,
    ) -> list[AgentScore]:
        """Score agents, best first, ties broken by agent id."""
        scores = [self.score(a, context) for a in agents]
        scores.sort(key=lambda s: (-s.overall_score, s.agent_id))
        logger.debug("Scored %s agents", len(scores))
        return scores

    def determine_tier(self, score: int) -> AgentTier:
        thresholds = self.config.tier_thresholds
        if score >= thresholds.generalist:
            return AgentTier.GENERALIST
        if score >= thresholds.specialist:
            return AgentTier.SPECIALIST
        return AgentTier.EXPERIMENTAL

    # -------------------------------------------------------------------------
    # Context-dependent axes
    # -------------------------------------------------------------------------

    def _score_capabilities(self, agent: AgentSolution, context: ScoringContext) -> float:
        required = [c.lower() for c in context.required_capabilities if c]
        tokens = query_tokens(context.user_query)
        if not required and not context.user_query:
            return NEUTRAL_SCORE

        capabilities = agent.capabilities
        score = 0.0

        if required:
            covered = [r for r in required if any(overlaps(r, c) for c in capabilities)]
            score += len(covered) / len(required) * 60

        if tokens:
            matched = [t for t in tokens if any(overlaps(t, c) for c in capabilities)]
            score += len(matched) / len(tokens) * 40

        return min(score, 100)

    def _score_domains(self, agent: AgentSolution, context: ScoringContext) -> float:
        preferred = [d.lower() for d in context.preferred_domains if d]
        if not context.business_domain and not preferred:
            return NEUTRAL_SCORE

        domains = agent.domains or [OTHER_DOMAIN]
        score = 0.0

        if context.business_domain:
            wanted = context.business_domain.strip().lower()
            if any(overlaps(wanted, d) for d in domains):
                score += 50
            else:
                related = RELATED_DOMAINS.get(wanted, [])
                if any(overlaps(r, d) for r in related for d in domains):
                    score += 30

        if preferred:
            matched = [p for p in preferred if any(overlaps(p, d) for d in domains)]
            score += len(matched) / len(preferred) * 50

        return min(score, 100)

    # -------------------------------------------------------------------------
    # Intrinsic axes
    # -------------------------------------------------------------------------

    def _core_capabilities(self, agent: AgentSolution) -> list[str]:
        return [c for c in agent.capabilities if c in CORE_CAPABILITIES]

    def _score_capability_depth(self, agent: AgentSolution) -> float:
        capabilities = agent.capabilities
        if not capabilities:
            return 20

        score = 40
        if len(capabilities) >= 6:
            score += 30
        elif len(capabilities) >= 4:
            score += 20
        elif len(capabilities) >= 2:
            score += 10

        core = len(self._core_capabilities(agent))
        if core >= 4:
            score += 20
        elif core >= 2:
            score += 15
        elif core >= 1:
            score += 10

        if len(capabilities) <= 3:
            score -= 10

        return min(score, 100)

    def _score_domain_breadth(self, agent: AgentSolution) -> float:
        domains = agent.domains
        score = 30
        if len(domains) >= 3:
            score += 40
        elif len(domains) >= 2:
            score += 25
        elif len(domains) >= 1:
            score += 15

        if len(domains) == 1 and domains[0] == OTHER_DOMAIN:
            score -= 15
        if len([d for d in domains if d != OTHER_DOMAIN]) >= 2:
            score += 15

        return min(score, 100)

    def _score_data_quality(self, agent: AgentSolution) -> float:
        """Average completeness factor, scaled so 20 points per factor is 100."""
        factors: list[int] = []

        if len(agent.name) > 10:
            factors.append(20)
        if len(agent.description) > 20:
            factors.append(20)
        if agent.capabilities:
            factors.append(20)
        if agent.domains:
            factors.append(15)
        if agent.model:
            factors.append(10)
        if agent.provider:
            factors.append(10)
        if agent.documentation_url and agent.documentation_url != "#":
            factors.append(10)

        if not factors:
            return 50
        return round_half_up(sum(factors) / len(factors) * 5)

    def _score_model_quality(self, agent: AgentSolution) -> float:
        if not agent.model:
            return MODEL_SCORE_MISSING
        model = agent.model.lower()
        if any(hq in model for hq in HIGH_QUALITY_MODELS):
            return MODEL_SCORE_HIGH
        if any(mid in model for mid in MID_QUALITY_MODELS):
            return MODEL_SCORE_MID
        return MODEL_SCORE_OTHER

    def _score_provider_reliability(self, agent: AgentSolution) -> float:
        if not agent.provider:
            return PROVIDER_SCORE_MISSING
        provider = agent.provider.lower()
        if provider in RELIABLE_PROVIDERS:
            return PROVIDER_SCORE_RELIABLE
        if any(vendor in provider for vendor in MAJOR_VENDOR_MARKERS):
            return PROVIDER_SCORE_VENDOR
        return PROVIDER_SCORE_OTHER

    def _score_specialization(self, agent: AgentSolution) -> float:
        capabilities = agent.capabilities
        if not capabilities:
            return SPECIALIZATION_SCORE_NONE
        for pair in SPECIALIZED_CAPABILITY_PAIRS:
            if all(cap in capabilities for cap in pair):
                return SPECIALIZATION_SCORE_PAIR
        if any(cap in capabilities for cap in RARE_CAPABILITIES):
            return SPECIALIZATION_SCORE_RARE
        return SPECIALIZATION_SCORE_OTHER

    def _has_high_quality_model(self, agent: AgentSolution) -> bool:
        return bool(agent.model) and agent.model.lower() in HIGH_QUALITY_MODELS

    def _has_reliable_provider(self, agent: AgentSolution) -> bool:
        return bool(agent.provider) and agent.provider.lower() in RELIABLE_PROVIDERS

    def _apply_boosts(
        self,
        agent: AgentSolution,
        base: int,
        breakdown: AgentScoreBreakdown,
    ) -> int:
        boosts = self.config.boost_factors
        multiplier = 1.0

        if len(self._core_capabilities(agent)) >= 2:
            multiplier *= boosts.core_capabilities
        if len(agent.domains) >= 2:
            multiplier *= boosts.multi_domain
        if self._has_high_quality_model(agent):
            multiplier *= boosts.high_quality_model
        if self._has_reliable_provider(agent):
            multiplier *= boosts.reliable_provider
        if breakdown.data_quality >= 80:
            multiplier *= boosts.data_quality

        return min(round_half_up(base * multiplier), 100)

    # -------------------------------------------------------------------------
    # Explanation
    # -------------------------------------------------------------------------

    def _generate_reasoning(
        self,
        agent: AgentSolution,
        capability: float,
        domain: float,
        overall: int,
        tier: AgentTier,
    ) -> list[str]:
        reasoning: list[str] = []

        if tier == AgentTier.GENERALIST:
            reasoning.append(
                f"Generalist agent ({overall}/100) - broad capabilities across multiple domains"
            )
        elif tier == AgentTier.SPECIALIST:
            reasoning.append(
                f"Specialist agent ({overall}/100) - focused capabilities in specific domains"
            )
        else:
            reasoning.append(
                f"Experimental agent ({overall}/100) - emerging capabilities with potential"
            )

        if capability >= 80:
            reasoning.append(f"Excellent capability match: {', '.join(agent.capabilities[:3])}")
        elif capability >= 60:
            reasoning.append(f"Good capability coverage: {', '.join(agent.capabilities[:2])}")

        if domain >= 80:
            reasoning.append(f"Strong domain alignment: {', '.join(agent.domains[:2])}")
        elif domain >= 60:
            first = agent.domains[0] if agent.domains else OTHER_DOMAIN
            reasoning.append(f"Good domain coverage: {first}")

        if self._has_high_quality_model(agent):
            reasoning.append(f"High-quality model: {agent.model}")
        if self._has_reliable_provider(agent):
            reasoning.append(f"Reliable provider: {agent.provider}")

        core = self._core_capabilities(agent)
        if len(core) >= 2:
            reasoning.append(f"Core capabilities present: {', '.join(core)}")

        return reasoning

    def _calculate_confidence(self, agent: AgentSolution, breakdown: AgentScoreBreakdown) -> int:
        confidence = 50

        if agent.name and agent.description:
            confidence += 20
        if agent.capabilities:
            confidence += 15
        if agent.domains:
            confidence += 10
        if agent.model:
            confidence += 10
        if agent.provider:
            confidence += 5

        if breakdown.data_quality >= 80:
            confidence += 10
        if breakdown.model_quality >= 80:
            confidence += 10
        if breakdown.provider_reliability >= 80:
            confidence += 5

        return int(clamp(confidence))

    def _generate_disclaimer(self, tier: AgentTier) -> str:
        if tier == AgentTier.EXPERIMENTAL:
            return AGENT_DISCLAIMER + EXPERIMENTAL_DISCLAIMER_SUFFIX
        if tier == AgentTier.SPECIALIST:
            return AGENT_DISCLAIMER + SPECIALIST_DISCLAIMER_SUFFIX
        return AGENT_DISCLAIMER
