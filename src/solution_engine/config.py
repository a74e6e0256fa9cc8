"""Centralized configuration management for the solution engine."""

import math
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


WEIGHT_SUM_TOLERANCE = 1e-6


class ConfigurationError(ValueError):
    """Raised when configuration is invalid (bad weights, unknown keys)."""


class _FrozenConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class _WeightGroup(_FrozenConfig):
    """A set of weights that must be finite, non-negative and sum to 1.0."""

    def validate_weights(self) -> None:
        """Reject non-finite or negative weights, or a total that is not 1.0.

        Raises:
            ConfigurationError: If the weights are invalid.
        """
        weights = self.model_dump()
        non_finite = [name for name, value in weights.items() if not math.isfinite(value)]
        if non_finite:
            raise ConfigurationError(
                f"{type(self).__name__}: weights must be finite numbers: {', '.join(non_finite)}"
            )
        negative = [name for name, value in weights.items() if value < 0]
        if negative:
            raise ConfigurationError(
                f"{type(self).__name__}: negative weights not allowed: {', '.join(negative)}"
            )
        total = sum(weights.values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ConfigurationError(
                f"{type(self).__name__}: weights must sum to 1.0 (got {total:.6f})"
            )


# =============================================================================
# Solution scoring
# =============================================================================


class ScoringWeightsConfig(_WeightGroup):
    """Weights for the four solution score axes."""
    relevance: float = Field(0.35, description="Weight for context relevance")
    quality: float = Field(0.25, description="Weight for ratings, reviews and status")
    business_value: float = Field(0.25, description="Weight for automation, ROI and priority")
    implementation: float = Field(0.15, description="Weight for ease of setup and adoption")


class BoostFactorsConfig(_FrozenConfig):
    """Multiplicative boosts applied after weighting.

    Boosts compound: a solution meeting several conditions gets the
    product of their factors, capped at 100.
    """
    high_roi: float = Field(1.2, description="Applied when business value >= 80")
    quick_setup: float = Field(1.15, description="Applied when implementation >= 80")
    high_priority: float = Field(1.1, description="Applied when business value >= 75")
    proven_track_record: float = Field(1.25, description="Applied when quality >= 85")


class ScoreThresholdsConfig(_FrozenConfig):
    """Score cut-offs."""
    minimum_score: int = Field(30, description="Scores below this are dropped when ranking")
    high_score: int = Field(70, description="Score considered high")
    excellent_score: int = Field(85, description="Score considered excellent")


class SolutionScoringConfig(_FrozenConfig):
    """Complete configuration for the SolutionScorer."""
    weights: ScoringWeightsConfig = Field(default_factory=ScoringWeightsConfig)
    boost_factors: BoostFactorsConfig = Field(default_factory=BoostFactorsConfig)
    thresholds: ScoreThresholdsConfig = Field(default_factory=ScoreThresholdsConfig)


# =============================================================================
# Agent scoring
# =============================================================================


class AgentWeightsConfig(_WeightGroup):
    """Weights for the agent score axes."""
    capability: float = Field(0.25, description="Coverage of requested capabilities")
    domain: float = Field(0.20, description="Alignment with requested domains")
    capability_depth: float = Field(0.15, description="Number and kind of capabilities")
    domain_breadth: float = Field(0.10, description="Number of domains served")
    data_quality: float = Field(0.15, description="Completeness of the agent record")
    model_quality: float = Field(0.10, description="Tier of the underlying model")
    provider_reliability: float = Field(0.05, description="Reliability of the API provider")


class AgentBoostFactorsConfig(_FrozenConfig):
    """Multiplicative boosts for agent scores."""
    core_capabilities: float = Field(1.2, description="Applied with >= 2 core capabilities")
    multi_domain: float = Field(1.15, description="Applied with >= 2 domains")
    high_quality_model: float = Field(1.1, description="Applied for a top-tier model")
    reliable_provider: float = Field(1.1, description="Applied for a reliable provider")
    data_quality: float = Field(1.05, description="Applied when data quality >= 80")


class TierThresholdsConfig(_FrozenConfig):
    """Boosted-score cut-offs for agent tiers."""
    generalist: int = Field(85, description="Minimum score for Generalist")
    specialist: int = Field(70, description="Minimum score for Specialist")


class AgentScoringConfig(_FrozenConfig):
    """Complete configuration for the AgentScorer."""
    weights: AgentWeightsConfig = Field(default_factory=AgentWeightsConfig)
    boost_factors: AgentBoostFactorsConfig = Field(default_factory=AgentBoostFactorsConfig)
    tier_thresholds: TierThresholdsConfig = Field(default_factory=TierThresholdsConfig)


# =============================================================================
# Matching and combinations
# =============================================================================


class MatchingWeightsConfig(_WeightGroup):
    """Weights for the eight subtask/solution match criteria."""
    automation_potential: float = Field(0.23, description="Closeness of automation potential")
    category_relevance: float = Field(0.18, description="Subtask category vs solution category")
    difficulty_match: float = Field(0.14, description="Difficulty fit for the automation target")
    setup_time: float = Field(0.09, description="Faster setup scores higher")
    user_rating: float = Field(0.14, description="Catalog user rating")
    implementation_priority: float = Field(0.09, description="Solution implementation priority")
    tags_relevance: float = Field(0.04, description="Subtask keywords vs solution tags")
    business_domain: float = Field(0.09, description="Subtask domain vs solution category")


class MatchingConfig(_FrozenConfig):
    """Configuration for subtask matching."""
    weights: MatchingWeightsConfig = Field(default_factory=MatchingWeightsConfig)
    minimum_match_score: int = Field(
        30,
        description="Candidates scoring at or below this are dropped"
    )
    max_alternatives: int = Field(3, ge=0, description="Alternatives listed per recommendation")
    high_priority_score: float = Field(80, description="Total match score for High priority")
    high_priority_potential: int = Field(70, description="Automation potential for High priority")
    medium_priority_score: float = Field(60, description="Total match score for Medium priority")
    medium_priority_potential: int = Field(50, description="Automation potential for Medium priority")
    high_roi_threshold: int = Field(300, description="ROI percent counted as high in summaries")


class CombinationConfig(_FrozenConfig):
    """Configuration for solution combinations."""
    max_multi_solutions: int = Field(3, ge=2, description="Solutions in a multi-solution combination")
    max_cross_domain_solutions: int = Field(5, ge=2, description="Solutions in a cross-domain combination")
    multi_score_bonus: float = Field(10, description="Match score bonus for multi-solution combinations")
    multi_score_cap: float = Field(95, description="Cap for multi-solution match score and potential")
    cross_domain_score: float = Field(85, description="Match score of cross-domain combinations")
    cross_domain_potential_bonus: float = Field(15, description="Potential bonus for cross-domain")
    cross_domain_potential_cap: float = Field(90, description="Potential cap for cross-domain")
    roi_multiplier: float = Field(1.2, description="Synergy multiplier applied to combined ROI")
    expected_savings: str = Field("$5,000-15,000/month", description="Illustrative savings figure")
    payback_period: str = Field("3-6 months", description="Illustrative payback period")


class EngineConfig(_FrozenConfig):
    """Complete configuration for the solution engine."""
    solution_scoring: SolutionScoringConfig = Field(default_factory=SolutionScoringConfig)
    agent_scoring: AgentScoringConfig = Field(default_factory=AgentScoringConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    combinations: CombinationConfig = Field(default_factory=CombinationConfig)

    def validate_weights(self) -> None:
        """Validate every weight group."""
        self.solution_scoring.weights.validate_weights()
        self.agent_scoring.weights.validate_weights()
        self.matching.weights.validate_weights()


# Global config instance
_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """Get the current configuration.

    Returns the global config, initializing with defaults if not yet loaded.
    """
    global _config
    if _config is None:
        _config = EngineConfig()
    return _config


def load_config(path: Path) -> EngineConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        The loaded EngineConfig.

    Raises:
        ConfigurationError: If the file content is invalid.
    """
    global _config

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"{path}: top level must be a mapping")

    try:
        config = EngineConfig.model_validate(data or {})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

    config.validate_weights()
    _config = config
    return _config


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _config
    _config = EngineConfig()


def find_config_file() -> Optional[Path]:
    """Find an engine configuration file.

    Looks in (order of priority):
    1. SOLUTION_ENGINE_CONFIG environment variable
    2. ./engine-config.yaml
    3. ./engine-config.yml
    4. ~/.config/solution-engine/config.yaml
    """
    env_path = os.environ.get("SOLUTION_ENGINE_CONFIG")
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path

    for name in ["engine-config.yaml", "engine-config.yml"]:
        path = Path(name)
        if path.exists():
            return path

    user_config = Path.home() / ".config" / "solution-engine" / "config.yaml"
    if user_config.exists():
        return user_config

    return None


def save_default_config(path: Path) -> None:
    """Save the default configuration to a YAML file.

    Args:
        path: Path where to save the configuration.
    """
    data = EngineConfig().model_dump()

    yaml_content = """# Solution Engine Configuration
# =============================
#
# This file configures solution and agent scoring weights, boost factors,
# matching thresholds and combination settings. Every weight group must
# sum to 1.0.
#
# Copy this file to one of these locations:
#   - ./engine-config.yaml (current directory)
#   - ~/.config/solution-engine/config.yaml (user config)
#
# Or set the SOLUTION_ENGINE_CONFIG environment variable.

"""
    yaml_content += yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(yaml_content)
