"""Pydantic models for the Solution Matching Engine.

Input schemas for catalog solutions, subtasks and scoring context, and
output schemas for scores, matches, combinations and roadmaps.

Catalog JSON comes from the upstream catalog collaborator in camelCase;
every model accepts both camelCase aliases and snake_case field names.
All models are frozen: results are computed fresh on every call and are
never mutated in place.
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel


class EngineModel(BaseModel):
    """Base model: frozen, camelCase aliases, snake_case accepted."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class _LenientEnum(str, Enum):
    """String enum that accepts case/whitespace variations of its values."""

    @classmethod
    def _missing_(cls, value: object):
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value.lower() == normalized:
                    return member
        return None


# =============================================================================
# Catalog Enums
# =============================================================================


class SolutionType(_LenientEnum):
    """Kind of automation solution."""
    WORKFLOW = "workflow"
    AGENT = "agent"


class SolutionCategory(_LenientEnum):
    """Business domain category of a solution."""
    HR_RECRUITMENT = "HR & Recruitment"
    FINANCE_ACCOUNTING = "Finance & Accounting"
    MARKETING_SALES = "Marketing & Sales"
    CUSTOMER_SUPPORT = "Customer Support"
    DATA_ANALYSIS = "Data Analysis"
    CONTENT_CREATION = "Content Creation"
    PROJECT_MANAGEMENT = "Project Management"
    DEVELOPMENT_DEVOPS = "Development & DevOps"
    RESEARCH_ANALYSIS = "Research & Analysis"
    COMMUNICATION = "Communication"
    GENERAL_BUSINESS = "General Business"


class Difficulty(_LenientEnum):
    """Skill level needed to adopt a solution."""
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class SetupTime(_LenientEnum):
    """Setup time bucket."""
    QUICK = "Quick"
    MEDIUM = "Medium"
    LONG = "Long"


class Deployment(_LenientEnum):
    """Deployment mode."""
    LOCAL = "Local"
    CLOUD = "Cloud"
    HYBRID = "Hybrid"


class SolutionStatus(_LenientEnum):
    """Lifecycle status of a catalog entry."""
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    DEPRECATED = "Deprecated"
    BETA = "Beta"


class Priority(_LenientEnum):
    """Implementation priority."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        """Sort rank, higher is more urgent."""
        return {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}[self]


class PricingTier(_LenientEnum):
    """Pricing tier of a solution."""
    FREE = "Free"
    FREEMIUM = "Freemium"
    PAID = "Paid"
    ENTERPRISE = "Enterprise"


class AgentTier(_LenientEnum):
    """Agent classification by breadth of capability/domain coverage."""
    GENERALIST = "Generalist"
    SPECIALIST = "Specialist"
    EXPERIMENTAL = "Experimental"

    @property
    def rank(self) -> int:
        """Experimental < Specialist < Generalist."""
        return {
            AgentTier.EXPERIMENTAL: 1,
            AgentTier.SPECIALIST: 2,
            AgentTier.GENERALIST: 3,
        }[self]


class RequirementImportance(_LenientEnum):
    """How strongly a requirement applies."""
    REQUIRED = "Required"
    RECOMMENDED = "Recommended"
    OPTIONAL = "Optional"


class IntegrationType(_LenientEnum):
    """Integration mechanism."""
    API = "API"
    WEBHOOK = "Webhook"
    DATABASE = "Database"
    FILE = "File"
    CUSTOM = "Custom"


class EffortLevel(_LenientEnum):
    """Generic low/medium/high level."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class WorkflowComplexity(_LenientEnum):
    """Structural complexity of a workflow template."""
    SIMPLE = "Simple"
    MODERATE = "Moderate"
    COMPLEX = "Complex"


# =============================================================================
# Structured Ranges
# =============================================================================


_NUMBER = r"(\d+(?:\.\d+)?)"
_UNIT = r"\s*(%|[A-Za-z]+)?"
_RANGE_RE = re.compile(_NUMBER + r"\s*(?:-|–|to)\s*" + _NUMBER + _UNIT)
_OPEN_RE = re.compile(_NUMBER + r"\s*\+" + _UNIT)
_SINGLE_RE = re.compile(_NUMBER + _UNIT)


class ValueRange(EngineModel):
    """A numeric range parsed once from free text such as "200-400%".

    ``high`` is None for open-ended ranges ("8+ weeks"). Text that does
    not parse keeps ``parsed=False`` and a zero range; it never raises.
    """
    low: float = 0.0
    high: Optional[float] = 0.0
    unit: str = ""
    text: str = ""
    parsed: bool = False

    @classmethod
    def parse(cls, text: Optional[str]) -> "ValueRange":
        """Parse a range string, falling back to an unparsed zero range."""
        if not text:
            return cls(text=text or "")
        raw = str(text).strip()

        match = _RANGE_RE.search(raw)
        if match:
            return cls(
                low=float(match.group(1)),
                high=float(match.group(2)),
                unit=_normalize_unit(match.group(3)),
                text=raw,
                parsed=True,
            )

        match = _OPEN_RE.search(raw)
        if match:
            return cls(
                low=float(match.group(1)),
                high=None,
                unit=_normalize_unit(match.group(2)),
                text=raw,
                parsed=True,
            )

        match = _SINGLE_RE.fullmatch(raw)
        if match:
            value = float(match.group(1))
            return cls(
                low=value,
                high=value,
                unit=_normalize_unit(match.group(2)),
                text=raw,
                parsed=True,
            )

        return cls(text=raw)

    @property
    def midpoint(self) -> float:
        """Midpoint of the range; the lower bound when open-ended."""
        if not self.parsed:
            return 0.0
        if self.high is None:
            return self.low
        return (self.low + self.high) / 2

    @property
    def is_open_ended(self) -> bool:
        return self.parsed and self.high is None

    @property
    def label(self) -> str:
        return self.text


def _normalize_unit(unit: Optional[str]) -> str:
    if not unit:
        return ""
    unit = unit.lower()
    if unit in ("week", "wk", "wks"):
        return "weeks"
    return unit


def _coerce_range(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return ValueRange.parse(value)
    return value


# =============================================================================
# Solution Catalog Models
# =============================================================================


class Requirement(EngineModel):
    """A prerequisite for adopting a solution."""
    category: str
    items: list[str] = Field(default_factory=list)
    importance: RequirementImportance = RequirementImportance.REQUIRED
    alternatives: list[str] = Field(default_factory=list)
    estimated_cost: Optional[str] = None


class UseCase(EngineModel):
    """A documented scenario a solution covers."""
    scenario: str
    description: str = ""
    automation_potential: int = Field(0, ge=0, le=100)
    implementation_effort: EffortLevel = EffortLevel.MEDIUM
    expected_outcome: str = ""
    prerequisites: list[str] = Field(default_factory=list)
    estimated_time_savings: str = ""
    business_impact: EffortLevel = EffortLevel.MEDIUM


class Integration(EngineModel):
    """A platform a solution integrates with."""
    platform: str
    type: IntegrationType = IntegrationType.API
    description: str = ""
    setup_complexity: EffortLevel = EffortLevel.MEDIUM
    documentation_url: Optional[str] = None
    api_key_required: bool = False
    rate_limits: Optional[str] = None


class Metrics(EngineModel):
    """Usage and quality metrics for a solution."""
    usage_count: int = Field(0, ge=0)
    success_rate: float = Field(0.0, ge=0, le=100)
    average_execution_time: float = Field(0.0, ge=0)
    error_rate: float = Field(0.0, ge=0, le=100)
    user_rating: float = Field(0.0, ge=0, le=5)
    review_count: int = Field(0, ge=0)
    performance_score: float = Field(0.0, ge=0, le=100)


class BaseSolution(EngineModel):
    """Fields shared by workflow and agent solutions."""
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    category: SolutionCategory
    subcategories: list[str] = Field(default_factory=list)
    difficulty: Difficulty
    setup_time: SetupTime
    deployment: Deployment = Deployment.CLOUD
    status: SolutionStatus = SolutionStatus.ACTIVE
    tags: list[str] = Field(default_factory=list)
    automation_potential: int = Field(..., ge=0, le=100)
    estimated_roi: ValueRange = Field(
        default_factory=ValueRange,
        validation_alias=AliasChoices("estimatedROI", "estimatedRoi", "estimated_roi"),
        serialization_alias="estimatedROI",
    )
    time_to_value: ValueRange = Field(default_factory=ValueRange)
    implementation_priority: Priority
    version: str = ""
    author: str = ""
    documentation_url: Optional[str] = None
    demo_url: Optional[str] = None
    github_url: Optional[str] = None
    pricing: Optional[PricingTier] = None
    requirements: list[Requirement] = Field(default_factory=list)
    use_cases: list[UseCase] = Field(default_factory=list)
    integrations: list[Integration] = Field(default_factory=list)
    metrics: Metrics = Field(default_factory=Metrics)

    @field_validator("estimated_roi", "time_to_value", mode="before")
    @classmethod
    def _parse_ranges(cls, value: Any) -> Any:
        return _coerce_range(value)


class WorkflowMetadata(EngineModel):
    """Workflow-template specific metadata."""
    node_count: int = Field(0, ge=0)
    trigger_type: str = ""
    complexity: WorkflowComplexity = WorkflowComplexity.MODERATE
    dependencies: list[str] = Field(default_factory=list)
    estimated_execution_time: str = ""


class AgentMetadata(EngineModel):
    """AI-agent specific metadata."""
    model: Optional[str] = None
    provider: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("apiProvider", "provider"),
        serialization_alias="apiProvider",
    )
    capabilities: list[str] = Field(default_factory=list)
    domains: list[str] = Field(default_factory=list)
    rate_limits: Optional[str] = None
    response_time: Optional[str] = None
    accuracy: Optional[float] = Field(None, ge=0, le=100)


class WorkflowSolution(BaseSolution):
    """An importable workflow template."""
    type: Literal[SolutionType.WORKFLOW] = SolutionType.WORKFLOW
    workflow_metadata: WorkflowMetadata = Field(default_factory=WorkflowMetadata)


class AgentSolution(BaseSolution):
    """An AI agent."""
    type: Literal[SolutionType.AGENT] = SolutionType.AGENT
    agent_metadata: AgentMetadata = Field(default_factory=AgentMetadata)

    @property
    def capabilities(self) -> list[str]:
        return self.agent_metadata.capabilities

    @property
    def domains(self) -> list[str]:
        return self.agent_metadata.domains

    @property
    def model(self) -> Optional[str]:
        return self.agent_metadata.model

    @property
    def provider(self) -> Optional[str]:
        return self.agent_metadata.provider


Solution = Annotated[
    Union[WorkflowSolution, AgentSolution],
    Field(discriminator="type"),
]

SolutionAdapter: TypeAdapter[Solution] = TypeAdapter(Solution)


# =============================================================================
# Matching Inputs
# =============================================================================


class Subtask(EngineModel):
    """A discrete unit of business work to be matched against solutions."""
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    business_domain: str = ""
    automation_potential: int = Field(0, ge=0, le=100)
    keywords: list[str] = Field(default_factory=list)
    category: str = ""

    @field_validator("business_domain", "category", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("keywords", mode="before")
    @classmethod
    def _normalize_keywords(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple, set)):
            return value
        seen: list[str] = []
        for keyword in value:
            token = str(keyword).strip().lower()
            if token and token not in seen:
                seen.append(token)
        return seen


class ScoringContext(EngineModel):
    """Optional hints supplied by the caller.

    Any hint left as None (or an empty list/string) scores its axis at
    the neutral default rather than penalizing the candidate.
    """
    business_domain: Optional[str] = None
    automation_potential: Optional[int] = Field(None, ge=0, le=100)
    difficulty: Optional[Difficulty] = None
    setup_time: Optional[SetupTime] = None
    priority: Optional[Priority] = None
    required_capabilities: list[str] = Field(default_factory=list)
    preferred_domains: list[str] = Field(default_factory=list)
    user_query: Optional[str] = None

    @field_validator("business_domain", "user_query", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("required_capabilities", "preferred_domains", mode="before")
    @classmethod
    def _drop_blank_entries(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple)):
            return value
        return [
            item.strip() if isinstance(item, str) else item
            for item in value
            if not (isinstance(item, str) and not item.strip())
        ]

    @property
    def has_relevance_hints(self) -> bool:
        return any(
            hint is not None and hint != ""
            for hint in (
                self.business_domain,
                self.automation_potential,
                self.difficulty,
                self.setup_time,
                self.priority,
            )
        )

    @classmethod
    def for_subtask(cls, subtask: Subtask) -> "ScoringContext":
        """Derive a context from a subtask's domain, target and keywords."""
        query_parts = [subtask.name, *subtask.keywords]
        return cls(
            business_domain=subtask.business_domain or None,
            automation_potential=subtask.automation_potential,
            user_query=" ".join(query_parts),
        )


# Agent scoring reads user_query, business_domain, required_capabilities
# and preferred_domains from the same context model.
AgentScoringContext = ScoringContext


# =============================================================================
# Scoring Outputs
# =============================================================================


class ScoreBreakdown(EngineModel):
    """Twelve named sub-scores, each 0-100."""
    automation_potential: float = 0
    category_match: float = 0
    difficulty_alignment: float = 0
    setup_time_efficiency: float = 0
    user_satisfaction: float = 0
    implementation_priority: float = 0
    tags_relevance: float = 0
    business_domain_alignment: float = 0
    performance_metrics: float = 0
    cost_effectiveness: float = 0
    time_to_value: float = 0
    scalability: float = 0


class SolutionScore(EngineModel):
    """Multi-axis score for one solution."""
    solution_id: str
    overall_score: int = Field(..., ge=0, le=100)
    relevance_score: int = Field(..., ge=0, le=100)
    quality_score: int = Field(..., ge=0, le=100)
    business_value_score: int = Field(..., ge=0, le=100)
    implementation_score: int = Field(..., ge=0, le=100)
    breakdown: ScoreBreakdown
    ranking: int = 0
    confidence: int = Field(..., ge=0, le=100)


class AgentScoreBreakdown(EngineModel):
    """Agent-specific sub-scores, each 0-100."""
    capability_coverage: float = 0
    domain_alignment: float = 0
    capability_depth: float = 0
    domain_breadth: float = 0
    data_quality: float = 0
    model_quality: float = 0
    provider_reliability: float = 0
    capability_specialization: float = 0


class AgentScore(EngineModel):
    """Tiered score for an agent solution."""
    agent_id: str
    tier: AgentTier
    capability_score: float = Field(..., ge=0, le=100)
    domain_score: float = Field(..., ge=0, le=100)
    overall_score: int = Field(..., ge=0, le=100)
    breakdown: AgentScoreBreakdown
    reasoning: list[str] = Field(default_factory=list)
    confidence: int = Field(..., ge=0, le=100)
    disclaimer: str


# =============================================================================
# Matching Outputs
# =============================================================================


class SolutionRecommendation(EngineModel):
    """A solution recommended for a subtask."""
    solution: Solution
    match_score: int = Field(..., ge=0, le=100)
    reasoning: list[str] = Field(default_factory=list)
    alternatives: list[Solution] = Field(default_factory=list)
    implementation_steps: list[str] = Field(default_factory=list)
    estimated_cost: str = ""
    expected_roi: str = ""
    solution_score: Optional[SolutionScore] = None
    agent_score: Optional[AgentScore] = None


class SubtaskMatch(EngineModel):
    """Ranked recommendations and aggregates for one subtask."""
    subtask_id: str
    subtask_name: str
    business_domain: str
    automation_potential: int
    matched_solutions: list[SolutionRecommendation] = Field(default_factory=list)
    total_match_score: float = 0.0
    implementation_priority: Priority = Priority.LOW
    estimated_roi: Optional[int] = None
    estimated_roi_label: str = "N/A"
    time_to_value: str = "N/A"


class ImplementationPhase(EngineModel):
    """One sequential delivery phase of the roadmap."""
    phase: int
    name: str
    description: str
    duration: str
    solutions: list[str] = Field(default_factory=list)
    deliverables: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    estimated_cost: str
    team_members: list[str] = Field(default_factory=list)


class ImplementationRoadmap(EngineModel):
    """Phased implementation plan with roll-ups."""
    phases: list[ImplementationPhase] = Field(default_factory=list)
    total_estimated_time: str = ""
    total_estimated_cost: str = ""
    expected_roi: str = ""
    critical_path: list[str] = Field(default_factory=list)
    dependencies: dict[str, list[str]] = Field(default_factory=dict)


class MatchingResult(EngineModel):
    """Complete output from the matcher."""
    subtask_matches: list[SubtaskMatch] = Field(default_factory=list)
    total_solutions: int = 0
    matched_solutions: int = 0
    average_match_score: float = 0.0
    recommendations: list[str] = Field(default_factory=list)
    implementation_roadmap: ImplementationRoadmap = Field(default_factory=ImplementationRoadmap)


# =============================================================================
# Combination Outputs
# =============================================================================


class SolutionCombination(EngineModel):
    """A bundle of solutions proposed together."""
    id: str
    name: str
    description: str = ""
    solutions: list[Solution] = Field(default_factory=list)
    category: SolutionCategory
    business_domain: str
    total_automation_potential: float = Field(..., ge=0, le=100)
    combined_roi: str
    implementation_order: list[str] = Field(default_factory=list)
    dependencies: dict[str, list[str]] = Field(default_factory=dict)
    estimated_total_setup_time: str
    total_estimated_cost: str
    prerequisites: list[str] = Field(default_factory=list)
    use_case: str = ""
    benefits: list[str] = Field(default_factory=list)
    challenges: list[str] = Field(default_factory=list)
    risk_mitigation: list[str] = Field(default_factory=list)
    success_metrics: list[str] = Field(default_factory=list)
    alternative_combinations: list[str] = Field(default_factory=list)

    @property
    def solution_ids(self) -> list[str]:
        return [s.id for s in self.solutions]


class CostBenefitAnalysis(EngineModel):
    """Cost/benefit summary for a combination."""
    total_cost: str
    expected_savings: str
    payback_period: str
    roi: str


class CombinationRecommendation(EngineModel):
    """A combination with its score, priority and rationale."""
    combination: SolutionCombination
    match_score: float = Field(..., ge=0, le=100)
    reasoning: list[str] = Field(default_factory=list)
    priority: Priority
    expected_outcome: str = ""
    implementation_timeline: str = ""
    resource_requirements: list[str] = Field(default_factory=list)
    cost_benefit_analysis: CostBenefitAnalysis


# =============================================================================
# Filtering and Engine Outputs
# =============================================================================


class ExclusionReasonDetail(EngineModel):
    """Why a solution was filtered out."""
    reason_type: str
    description: str
    blocking_value: Optional[str] = None
    required_value: Optional[str] = None


class ExcludedSolution(EngineModel):
    """A solution that was excluded, with every failing rule."""
    solution_id: str
    name: str
    reasons: list[ExclusionReasonDetail]


class EngineResult(EngineModel):
    """Complete output from the engine pipeline."""
    engine_version: str = Field(default="1.0.0")
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    catalog_version: str = ""
    catalog_solution_count: int = 0

    matching: MatchingResult
    combinations: list[CombinationRecommendation] = Field(default_factory=list)
    roadmap: ImplementationRoadmap

    excluded: list[ExcludedSolution] = Field(default_factory=list)
    processing_warnings: list[str] = Field(default_factory=list)
