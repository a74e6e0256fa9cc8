"""Shared fixtures for the solution engine tests."""

import json

import pytest

from solution_engine.config import reset_config
from solution_engine.schema import AgentSolution, Subtask, WorkflowSolution


def workflow_entry(solution_id: str = "wf-1", **overrides) -> dict:
    """Build a minimal valid camelCase workflow dict."""
    base = {
        "id": solution_id,
        "type": "workflow",
        "name": f"Workflow {solution_id}",
        "description": "Automates a routine business process",
        "category": "General Business",
        "difficulty": "Intermediate",
        "setupTime": "Medium",
        "deployment": "Cloud",
        "status": "Active",
        "tags": [],
        "automationPotential": 60,
        "estimatedROI": "100-200%",
        "timeToValue": "2-4 weeks",
        "implementationPriority": "Medium",
    }
    base.update(overrides)
    return base


def agent_entry(solution_id: str = "agent-1", **overrides) -> dict:
    """Build a minimal valid camelCase agent dict."""
    metadata = overrides.pop("agentMetadata", {})
    base = workflow_entry(solution_id, type="agent", name=f"Agent {solution_id}")
    base["agentMetadata"] = metadata
    base.update(overrides)
    return base


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts from the default global configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def make_workflow():
    def _make(solution_id: str = "wf-1", **overrides) -> WorkflowSolution:
        return WorkflowSolution.model_validate(workflow_entry(solution_id, **overrides))
    return _make


@pytest.fixture
def make_agent():
    def _make(solution_id: str = "agent-1", **overrides) -> AgentSolution:
        return AgentSolution.model_validate(agent_entry(solution_id, **overrides))
    return _make


@pytest.fixture
def make_subtask():
    def _make(subtask_id: str = "t1", **overrides) -> Subtask:
        data = {
            "id": subtask_id,
            "name": f"Subtask {subtask_id}",
            "businessDomain": "Finance",
            "automationPotential": 70,
            "keywords": [],
        }
        data.update(overrides)
        return Subtask.model_validate(data)
    return _make


@pytest.fixture
def invoice_catalog() -> list[dict]:
    """A strong finance agent and a weak marketing content writer."""
    return [
        agent_entry(
            "invoice-processor",
            name="Invoice Processor",
            description="Extracts, validates and posts supplier invoices",
            category="Finance & Accounting",
            difficulty="Intermediate",
            setupTime="Quick",
            tags=["invoice", "accounts payable", "ocr"],
            automationPotential=95,
            estimatedROI="300-500%",
            timeToValue="1-2 weeks",
            implementationPriority="High",
            pricing="Freemium",
            metrics={"userRating": 4.7, "reviewCount": 40, "usageCount": 500},
            agentMetadata={
                "model": "gpt-4",
                "apiProvider": "openai",
                "capabilities": ["file_io", "data_analysis", "email_send"],
                "domains": ["Finance & Accounting"],
            },
        ),
        workflow_entry(
            "content-writer",
            name="Content Writer",
            description="Drafts blog posts",
            category="Marketing & Sales",
            difficulty="Beginner",
            setupTime="Long",
            tags=["blog", "seo"],
            automationPotential=20,
            estimatedROI="50-100%",
            timeToValue="8+ weeks",
            implementationPriority="Low",
            pricing="Paid",
            metrics={"userRating": 0.5},
        ),
    ]


@pytest.fixture
def catalog_file(tmp_path, invoice_catalog):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"version": "2024.1", "solutions": invoice_catalog}), encoding="utf-8")
    return path


@pytest.fixture
def subtasks_file(tmp_path):
    path = tmp_path / "subtasks.json"
    path.write_text(json.dumps({"subtasks": [
        {
            "id": "invoices",
            "name": "Invoice processing",
            "businessDomain": "Finance",
            "automationPotential": 90,
            "keywords": ["invoice", "ocr"],
        },
    ]}), encoding="utf-8")
    return path
