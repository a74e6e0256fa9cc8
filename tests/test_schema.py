"""Tests for schema parsing: ranges, lenient enums and catalog aliases."""

import pytest
from pydantic import ValidationError

from solution_engine.schema import (
    AgentSolution,
    Difficulty,
    Priority,
    ScoringContext,
    SetupTime,
    SolutionAdapter,
    SolutionType,
    Subtask,
    ValueRange,
    WorkflowSolution,
)

from conftest import agent_entry, workflow_entry


class TestValueRange:
    """Tests for ValueRange.parse."""

    def test_percent_range(self):
        roi = ValueRange.parse("200-400%")
        assert roi.parsed
        assert roi.low == 200
        assert roi.high == 400
        assert roi.unit == "%"
        assert roi.midpoint == 300

    def test_week_range(self):
        ttv = ValueRange.parse("1-2 weeks")
        assert (ttv.low, ttv.high, ttv.unit) == (1, 2, "weeks")

    def test_open_ended(self):
        ttv = ValueRange.parse("8+ weeks")
        assert ttv.is_open_ended
        assert ttv.high is None
        assert ttv.midpoint == 8

    def test_unit_synonyms_normalized(self):
        assert ValueRange.parse("3 wks").unit == "weeks"

    def test_unparseable_text_never_raises(self):
        roi = ValueRange.parse("significant")
        assert not roi.parsed
        assert roi.midpoint == 0
        assert roi.label == "significant"

    def test_empty(self):
        assert not ValueRange.parse(None).parsed
        assert ValueRange.parse("").label == ""


class TestLenientEnums:
    """Enum values are accepted regardless of case."""

    def test_case_insensitive(self):
        assert Difficulty("beginner") == Difficulty.BEGINNER
        assert SetupTime(" QUICK ") == SetupTime.QUICK

    def test_unknown_value_rejected(self):
        with pytest.raises(ValueError):
            Priority("Urgent")

    def test_priority_rank(self):
        assert Priority.HIGH.rank > Priority.MEDIUM.rank > Priority.LOW.rank


class TestSolutionParsing:
    """Tests for the discriminated solution union."""

    def test_workflow_from_camel_case(self):
        solution = SolutionAdapter.validate_python(workflow_entry("wf-9"))
        assert isinstance(solution, WorkflowSolution)
        assert solution.setup_time == SetupTime.MEDIUM
        assert solution.estimated_roi.midpoint == 150

    def test_agent_metadata(self):
        solution = SolutionAdapter.validate_python(agent_entry(
            "a-1",
            agentMetadata={
                "model": "claude-3-opus",
                "apiProvider": "anthropic",
                "capabilities": ["web_search"],
                "domains": ["Sales & CRM"],
            },
        ))
        assert isinstance(solution, AgentSolution)
        assert solution.type == SolutionType.AGENT
        assert solution.provider == "anthropic"
        assert solution.capabilities == ["web_search"]

    def test_snake_case_accepted(self):
        solution = WorkflowSolution(
            id="wf-snake",
            name="Snake",
            category="Data Analysis",
            difficulty="Advanced",
            setup_time="Long",
            automation_potential=40,
            estimated_roi="50-150%",
            implementation_priority="Low",
        )
        assert solution.estimated_roi.midpoint == 100

    def test_serializes_catalog_keys(self):
        solution = SolutionAdapter.validate_python(agent_entry(
            "a-2", agentMetadata={"apiProvider": "openai"}
        ))
        dumped = solution.model_dump(by_alias=True)
        assert "estimatedROI" in dumped
        assert dumped["agentMetadata"]["apiProvider"] == "openai"

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            SolutionAdapter.validate_python(workflow_entry("x", type="plugin"))

    def test_automation_potential_bounds(self):
        with pytest.raises(ValidationError):
            SolutionAdapter.validate_python(workflow_entry("x", automationPotential=120))

    def test_models_are_frozen(self, make_workflow):
        solution = make_workflow()
        with pytest.raises(ValidationError):
            solution.name = "Changed"


class TestSubtask:
    """Tests for Subtask normalization and context derivation."""

    def test_keywords_lowercased_and_deduplicated(self):
        subtask = Subtask(id="t", name="Task", keywords=["Invoice", "invoice ", "OCR", ""])
        assert subtask.keywords == ["invoice", "ocr"]

    def test_context_from_subtask(self, make_subtask):
        subtask = make_subtask(name="Invoice processing", keywords=["ocr"])
        context = ScoringContext.for_subtask(subtask)
        assert context.business_domain == "Finance"
        assert context.automation_potential == 70
        assert context.user_query == "Invoice processing ocr"

    def test_empty_context_has_no_relevance_hints(self):
        assert not ScoringContext().has_relevance_hints
        assert ScoringContext(difficulty="Beginner").has_relevance_hints

    def test_blank_context_hints_dropped(self):
        context = ScoringContext(business_domain="  ", user_query="\t", preferred_domains=["", " Finance "])
        assert context.business_domain is None
        assert context.user_query is None
        assert context.preferred_domains == ["Finance"]
        assert not context.has_relevance_hints

    def test_blank_subtask_domain_gives_no_hint(self, make_subtask):
        subtask = make_subtask(businessDomain="   ")
        assert subtask.business_domain == ""
        assert ScoringContext.for_subtask(subtask).business_domain is None
