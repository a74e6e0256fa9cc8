"""Named lookup tables used across the scorers and the matcher.

Every mapping the engine consults lives here so it can be inspected and
tested on its own.
"""

import math

from .schema import (
    Deployment,
    Difficulty,
    PricingTier,
    Priority,
    SetupTime,
    SolutionCategory,
    SolutionStatus,
)


# Score used for any axis whose context hint is absent
NEUTRAL_SCORE = 75


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


# =============================================================================
# Solution attribute scores
# =============================================================================

STATUS_SCORES = {
    SolutionStatus.ACTIVE: 100,
    SolutionStatus.BETA: 70,
    SolutionStatus.INACTIVE: 50,
    SolutionStatus.DEPRECATED: 20,
}
DEFAULT_STATUS_SCORE = 60

SETUP_TIME_SCORES = {
    SetupTime.QUICK: 100,
    SetupTime.MEDIUM: 70,
    SetupTime.LONG: 40,
}
DEFAULT_SETUP_TIME_SCORE = 50

DIFFICULTY_SCORES = {
    Difficulty.BEGINNER: 100,
    Difficulty.INTERMEDIATE: 80,
    Difficulty.ADVANCED: 60,
}
DEFAULT_DIFFICULTY_SCORE = 70

DEPLOYMENT_SCORES = {
    Deployment.CLOUD: 100,
    Deployment.HYBRID: 80,
    Deployment.LOCAL: 60,
}
DEFAULT_DEPLOYMENT_SCORE = 70

SCALABILITY_SCORES = {
    Deployment.CLOUD: 90,
    Deployment.HYBRID: 75,
    Deployment.LOCAL: 60,
}
DEFAULT_SCALABILITY_SCORE = 70

PRIORITY_SCORES = {
    Priority.HIGH: 100,
    Priority.MEDIUM: 70,
    Priority.LOW: 40,
}
DEFAULT_PRIORITY_SCORE = 50

PRICING_SCORES = {
    PricingTier.FREE: 100,
    PricingTier.FREEMIUM: 80,
    PricingTier.PAID: 60,
    PricingTier.ENTERPRISE: 40,
}
DEFAULT_PRICING_SCORE = 70

PRICING_COST_TEXT = {
    PricingTier.FREE: "No additional cost",
    PricingTier.FREEMIUM: "$50-200/month",
    PricingTier.PAID: "$200-1000/month",
    PricingTier.ENTERPRISE: "$1000+/month",
}
DEFAULT_COST_TEXT = "Cost varies based on usage"

# Monthly cost per solution used for combination roll-ups
PRICING_MONTHLY_COST = {
    PricingTier.FREE: 0,
    PricingTier.FREEMIUM: 100,
    PricingTier.PAID: 500,
    PricingTier.ENTERPRISE: 2000,
}

SETUP_TIME_MINUTES = {
    SetupTime.QUICK: 30,
    SetupTime.MEDIUM: 120,
    SetupTime.LONG: 480,
}

# Lower is faster
SETUP_SPEED_ORDER = {
    SetupTime.QUICK: 1,
    SetupTime.MEDIUM: 2,
    SetupTime.LONG: 3,
}

# Time-to-value buckets keyed on the parsed (low, high) week range
TIME_TO_VALUE_SCORES = {
    (1.0, 2.0): 100,
    (2.0, 4.0): 80,
    (4.0, 8.0): 60,
}
OPEN_ENDED_TIME_TO_VALUE_SCORE = 40
DEFAULT_TIME_TO_VALUE_SCORE = 70

# A context hint one step below what the solution demands
DIFFICULTY_ONE_STEP_HARDER = {
    (Difficulty.BEGINNER, Difficulty.INTERMEDIATE),
    (Difficulty.INTERMEDIATE, Difficulty.ADVANCED),
}

SETUP_TIME_ONE_STEP_LONGER = {
    (SetupTime.QUICK, SetupTime.MEDIUM),
    (SetupTime.MEDIUM, SetupTime.LONG),
}


# =============================================================================
# Matching tables
# =============================================================================

# Subtask business domain -> catalog categories that serve it
DOMAIN_CATEGORY_MAP: dict[str, list[SolutionCategory]] = {
    "HR": [SolutionCategory.HR_RECRUITMENT],
    "Finance": [SolutionCategory.FINANCE_ACCOUNTING],
    "Marketing": [SolutionCategory.MARKETING_SALES],
    "Sales": [SolutionCategory.MARKETING_SALES],
    "Support": [SolutionCategory.CUSTOMER_SUPPORT],
    "Analytics": [
        SolutionCategory.DATA_ANALYSIS,
        SolutionCategory.RESEARCH_ANALYSIS,
    ],
    "Operations": [
        SolutionCategory.PROJECT_MANAGEMENT,
        SolutionCategory.COMMUNICATION,
        SolutionCategory.GENERAL_BUSINESS,
    ],
    "Development": [SolutionCategory.DEVELOPMENT_DEVOPS],
    "Content": [SolutionCategory.CONTENT_CREATION],
}

IMPLEMENTATION_STEPS = [
    "Review solution requirements and prerequisites",
    "Set up necessary integrations and API keys",
    "Configure solution parameters and settings",
    "Test with sample data or scenarios",
    "Deploy to production environment",
    "Monitor performance and gather feedback",
]
WORKFLOW_IMPORT_STEP = "Import workflow configuration to n8n"
AGENT_CONFIGURE_STEP = "Configure AI agent parameters and training data"
TYPE_STEP_POSITION = 2


# =============================================================================
# Agent tables
# =============================================================================

CORE_CAPABILITIES = ["web_search", "data_analysis", "file_io", "email_send"]

HIGH_QUALITY_MODELS = [
    "gpt-4",
    "gpt-4-turbo",
    "claude-3-opus",
    "claude-3-sonnet",
    "gemini-pro",
]
MID_QUALITY_MODELS = ["gpt-3.5", "claude-3-haiku", "gemini-nano"]

MODEL_SCORE_HIGH = 90
MODEL_SCORE_MID = 70
MODEL_SCORE_OTHER = 60
MODEL_SCORE_MISSING = 50

RELIABLE_PROVIDERS = ["openai", "anthropic", "google", "microsoft"]
MAJOR_VENDOR_MARKERS = ["openai", "anthropic", "google"]

PROVIDER_SCORE_RELIABLE = 90
PROVIDER_SCORE_VENDOR = 80
PROVIDER_SCORE_OTHER = 60
PROVIDER_SCORE_MISSING = 50

SPECIALIZED_CAPABILITY_PAIRS = [
    ("web_search", "data_analysis"),
    ("file_io", "data_processing"),
    ("email_send", "notification_sending"),
    ("code_generation", "testing"),
    ("workflow_automation", "task_scheduling"),
]
RARE_CAPABILITIES = [
    "security_analysis",
    "blockchain_interaction",
    "iot_management",
    "voice_processing",
]

SPECIALIZATION_SCORE_PAIR = 90
SPECIALIZATION_SCORE_RARE = 80
SPECIALIZATION_SCORE_OTHER = 60
SPECIALIZATION_SCORE_NONE = 30

# Business domain keyword -> agent domains considered related
RELATED_DOMAINS: dict[str, list[str]] = {
    "marketing": ["Marketing & Advertising", "Sales & CRM"],
    "sales": ["Sales & CRM", "Marketing & Advertising"],
    "hr": ["Human Resources & Recruiting", "Customer Support & Service"],
    "finance": ["Finance & Accounting"],
    "development": ["IT & Software Development", "DevOps & Cloud"],
    "analytics": ["Research & Data Science", "Data Analysis"],
    "support": ["Customer Support & Service", "Human Resources & Recruiting"],
    "operations": ["Logistics & Supply Chain", "Manufacturing & Engineering"],
}

OTHER_DOMAIN = "Other"

AGENT_DISCLAIMER = "Adaptive – outcomes may vary"
EXPERIMENTAL_DISCLAIMER_SUFFIX = " • Experimental capabilities"
SPECIALIST_DISCLAIMER_SUFFIX = " • Specialized use cases"


# =============================================================================
# Roadmap bands
# =============================================================================

ROADMAP_PHASES = [
    {
        "phase": 1,
        "priority": Priority.HIGH,
        "name": "Quick Wins & High ROI",
        "description": "Implement high-priority solutions with quick setup times",
        "duration": "2-4 weeks",
        "deliverables": ["Working automations", "Initial ROI measurement", "User training"],
        "dependencies": [],
        "estimated_cost": "$500-2000",
        "team_members": ["Automation Specialist", "Business Analyst"],
    },
    {
        "phase": 2,
        "priority": Priority.MEDIUM,
        "name": "Medium Priority Solutions",
        "description": "Implement medium-priority solutions with moderate complexity",
        "duration": "4-8 weeks",
        "deliverables": ["Enhanced automations", "Process documentation", "Performance metrics"],
        "dependencies": ["Phase 1 completion"],
        "estimated_cost": "$2000-5000",
        "team_members": ["Automation Specialist", "Business Analyst", "IT Support"],
    },
    {
        "phase": 3,
        "priority": Priority.LOW,
        "name": "Advanced Solutions & Optimization",
        "description": "Implement complex solutions and optimize existing automations",
        "duration": "6-12 weeks",
        "deliverables": ["Advanced automations", "Optimization reports", "ROI analysis"],
        "dependencies": ["Phase 2 completion"],
        "estimated_cost": "$3000-8000",
        "team_members": [
            "Automation Specialist",
            "Business Analyst",
            "IT Support",
            "Data Analyst",
        ],
    },
]

ROADMAP_TOTAL_TIME = "12-24 weeks"
ROADMAP_TOTAL_COST = "$5500-15000"
ROADMAP_EXPECTED_ROI = "200-400%"
ROADMAP_PHASE_DEPENDENCIES = {
    "Phase 2": ["Phase 1"],
    "Phase 3": ["Phase 2"],
}
