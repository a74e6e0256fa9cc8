"""Tests for catalog and subtask loading."""

import json

import pytest

from solution_engine.catalog import (
    CatalogLoadError,
    load_catalog,
    load_subtasks,
    parse_solutions,
    validate_catalog,
    validate_subtasks,
)

from conftest import workflow_entry


def _write(tmp_path, data, name="catalog.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadCatalog:
    """Catalog file loading."""

    def test_object_form(self, catalog_file):
        catalog = load_catalog(catalog_file)
        assert catalog.version == "2024.1"
        assert catalog.total_solutions == 2
        assert catalog.get("invoice-processor").name == "Invoice Processor"
        assert catalog.get("missing") is None
        assert catalog.warnings == []

    def test_list_form(self, tmp_path):
        catalog = load_catalog(_write(tmp_path, [workflow_entry("wf-1")]))
        assert catalog.version == ""
        assert catalog.total_solutions == 1

    def test_malformed_entries_skipped(self, tmp_path):
        entries = [
            workflow_entry("wf-1"),
            workflow_entry("wf-bad", difficulty="Impossible"),
            {"name": "No id"},
        ]
        catalog = load_catalog(_write(tmp_path, entries))
        assert [s.id for s in catalog.solutions] == ["wf-1"]
        assert len(catalog.warnings) == 2
        assert "wf-bad" in catalog.warnings[0]

    def test_duplicate_ids_skipped(self):
        solutions, warnings = parse_solutions([
            workflow_entry("dup", name="First"),
            workflow_entry("dup", name="Second"),
        ])
        assert [s.name for s in solutions] == ["First"]
        assert warnings == ["Skipped duplicate solution id: dup"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogLoadError, match="File not found"):
            load_catalog(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogLoadError, match="Invalid JSON"):
            load_catalog(path)

    def test_wrong_shape(self, tmp_path):
        with pytest.raises(CatalogLoadError, match="'solutions' array"):
            load_catalog(_write(tmp_path, {"items": []}))


class TestLoadSubtasks:
    """Subtask file loading."""

    def test_object_form(self, subtasks_file):
        subtasks, warnings = load_subtasks(subtasks_file)
        assert [s.id for s in subtasks] == ["invoices"]
        assert subtasks[0].keywords == ["invoice", "ocr"]
        assert warnings == []

    def test_malformed_skipped(self, tmp_path):
        path = _write(tmp_path, [{"id": "t1", "name": "Ok"}, {"id": "t2"}], "subtasks.json")
        subtasks, warnings = load_subtasks(path)
        assert [s.id for s in subtasks] == ["t1"]
        assert len(warnings) == 1


class TestValidate:
    """Validation helpers used by the CLI."""

    def test_valid_catalog(self, catalog_file):
        assert validate_catalog(catalog_file) == (True, [])

    def test_empty_catalog_invalid(self, tmp_path):
        is_valid, issues = validate_catalog(_write(tmp_path, []))
        assert not is_valid
        assert issues == ["Catalog contains no valid solutions"]

    def test_unreadable_catalog(self, tmp_path):
        is_valid, issues = validate_catalog(tmp_path / "missing.json")
        assert not is_valid
        assert "File not found" in issues[0]

    def test_duplicate_subtask_ids(self, tmp_path):
        path = _write(tmp_path, [{"id": "t1", "name": "A"}, {"id": "t1", "name": "B"}], "subtasks.json")
        is_valid, issues = validate_subtasks(path)
        assert not is_valid
        assert issues == ["Duplicate subtask ids: t1"]
