"""Catalog and subtask file loading.

Solutions arrive as camelCase JSON from the upstream catalog builder,
either as a bare list or as ``{"version": ..., "solutions": [...]}``.
Malformed entries are logged and skipped so one bad record never sinks a
whole catalog.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Union

from pydantic import Field, ValidationError

from .schema import EngineModel, Solution, SolutionAdapter, Subtask

logger = logging.getLogger(__name__)


class CatalogLoadError(Exception):
    """Raised when a catalog or subtask file cannot be loaded."""


class SolutionCatalog(EngineModel):
    """A loaded solution catalog plus anything skipped while loading it."""
    version: str = ""
    source: str = ""
    solutions: list[Solution] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def total_solutions(self) -> int:
        return len(self.solutions)

    def get(self, solution_id: str):
        return next((s for s in self.solutions if s.id == solution_id), None)


def _describe_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", "")


def _entry_label(index: int, entry: Any) -> str:
    if isinstance(entry, dict) and entry.get("id"):
        return f"entry {index} ({entry['id']})"
    return f"entry {index}"


def parse_solutions(entries: Iterable[Any]) -> tuple[list[Solution], list[str]]:
    """Validate raw solution dicts, skipping malformed and duplicate entries.

    Args:
        entries: Raw solution objects (dicts or already-built models).

    Returns:
        Tuple of (solutions, warnings)
    """
    solutions: list[Solution] = []
    warnings: list[str] = []
    seen: set[str] = set()

    for index, entry in enumerate(entries):
        try:
            solution = SolutionAdapter.validate_python(entry)
        except ValidationError as e:
            message = f"Skipped malformed solution {_entry_label(index, entry)}: {_describe_error(e)}"
            logger.warning("%s", message)
            warnings.append(message)
            continue

        if solution.id in seen:
            message = f"Skipped duplicate solution id: {solution.id}"
            logger.warning("%s", message)
            warnings.append(message)
            continue

        seen.add(solution.id)
        solutions.append(solution)

    return solutions, warnings


def parse_subtasks(entries: Iterable[Any]) -> tuple[list[Subtask], list[str]]:
    """Validate raw subtask dicts, skipping malformed entries."""
    subtasks: list[Subtask] = []
    warnings: list[str] = []

    for index, entry in enumerate(entries):
        try:
            subtasks.append(Subtask.model_validate(entry))
        except ValidationError as e:
            message = f"Skipped malformed subtask {_entry_label(index, entry)}: {_describe_error(e)}"
            logger.warning("%s", message)
            warnings.append(message)

    return subtasks, warnings


def _read_json(path: Union[str, Path]) -> Any:
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise CatalogLoadError(f"File not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogLoadError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise CatalogLoadError(f"Cannot read {path}: {e}") from e


def _extract_list(data: Any, key: str, path: Union[str, Path]) -> list:
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    raise CatalogLoadError(
        f"{path}: expected a JSON array or an object with a '{key}' array"
    )


def load_catalog(path: Union[str, Path]) -> SolutionCatalog:
    """Load a solution catalog from a JSON file.

    Raises:
        CatalogLoadError: If the file is unreadable or has the wrong shape.
    """
    data = _read_json(path)
    entries = _extract_list(data, "solutions", path)
    solutions, warnings = parse_solutions(entries)

    version = ""
    if isinstance(data, dict):
        version = str(data.get("version", ""))

    logger.info(
        "Loaded %s solutions from %s (%s skipped)",
        len(solutions), path, len(entries) - len(solutions),
    )
    return SolutionCatalog(
        version=version,
        source=str(path),
        solutions=solutions,
        warnings=warnings,
    )


def load_subtasks(path: Union[str, Path]) -> tuple[list[Subtask], list[str]]:
    """Load subtasks from a JSON file.

    Raises:
        CatalogLoadError: If the file is unreadable or has the wrong shape.
    """
    data = _read_json(path)
    entries = _extract_list(data, "subtasks", path)
    subtasks, warnings = parse_subtasks(entries)
    logger.info("Loaded %s subtasks from %s", len(subtasks), path)
    return subtasks, warnings


def validate_catalog(path: Union[str, Path]) -> tuple[bool, list[str]]:
    """Check a catalog file without installing it.

    Returns:
        Tuple of (is_valid, issues)
    """
    try:
        catalog = load_catalog(path)
    except CatalogLoadError as e:
        return False, [str(e)]

    issues = list(catalog.warnings)
    if not catalog.solutions:
        issues.append("Catalog contains no valid solutions")
    return not issues, issues


def validate_subtasks(path: Union[str, Path]) -> tuple[bool, list[str]]:
    """Check a subtask file.

    Returns:
        Tuple of (is_valid, issues)
    """
    try:
        subtasks, warnings = load_subtasks(path)
    except CatalogLoadError as e:
        return False, [str(e)]

    issues = list(warnings)
    if not subtasks:
        issues.append("No valid subtasks found")
    ids = [s.id for s in subtasks]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        issues.append(f"Duplicate subtask ids: {', '.join(duplicates)}")
    return not issues, issues
