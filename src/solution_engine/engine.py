"""Solution engine - runs the full matching pipeline.

Pipeline:
1. Load the catalog (malformed entries skipped with warnings)
2. Optionally filter the catalog against eligibility criteria
3. Match subtasks to eligible solutions
4. Generate combinations for high-priority and cross-domain work
5. Build the phased implementation roadmap
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from .catalog import (
    SolutionCatalog,
    load_catalog,
    load_subtasks,
    parse_solutions,
    parse_subtasks,
)
from .combinations import CombinationEngine
from .config import EngineConfig, get_config
from .filters import CatalogFilter, FilterCriteria
from .matcher import SolutionMatcher
from .schema import EngineResult, Subtask

logger = logging.getLogger(__name__)

ENGINE_VERSION = "1.0.0"


class SolutionEngine:
    """Facade over catalog loading, matching, combinations and roadmap.

    Configuration defaults to the global config (see config.py); weight
    groups are validated on construction.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or get_config()
        self.matcher = SolutionMatcher(self.config)
        self.combinations = CombinationEngine(self.config.combinations)
        self.catalog_filter = CatalogFilter()
        self.catalog: Optional[SolutionCatalog] = None

    def load_catalog(self, path: Union[str, Path]) -> SolutionCatalog:
        """Load and install a catalog from a JSON file."""
        self.catalog = load_catalog(path)
        return self.catalog

    def use_solutions(self, entries: Iterable[Any], version: str = "") -> SolutionCatalog:
        """Install a catalog from in-memory solution dicts or models."""
        solutions, warnings = parse_solutions(entries)
        self.catalog = SolutionCatalog(version=version, solutions=solutions, warnings=warnings)
        return self.catalog

    def run(
        self,
        subtasks: Iterable[Union[Subtask, dict]],
        criteria: Optional[FilterCriteria] = None,
    ) -> EngineResult:
        """Match subtasks against the installed catalog.

        Args:
            subtasks: Subtask models or raw dicts (malformed dicts are skipped).
            criteria: Optional eligibility criteria applied before matching.

        Returns:
            EngineResult with matching, combinations, roadmap and exclusions.

        Raises:
            RuntimeError: If no catalog has been loaded.
        """
        if self.catalog is None:
            raise RuntimeError("No catalog loaded. Call load_catalog() first.")

        warnings = list(self.catalog.warnings)
        parsed, subtask_warnings = parse_subtasks(subtasks)
        warnings.extend(subtask_warnings)

        solutions = list(self.catalog.solutions)
        excluded = []
        if criteria is not None:
            solutions, excluded = self.catalog_filter.filter(solutions, criteria)
            logger.info(
                "%s solutions eligible, %s excluded by filter criteria",
                len(solutions), len(excluded),
            )

        matching = self.matcher.match(parsed, solutions)
        combinations = self.combinations.generate(matching.subtask_matches)

        return EngineResult(
            engine_version=ENGINE_VERSION,
            generated_at=datetime.now(timezone.utc),
            catalog_version=self.catalog.version,
            catalog_solution_count=self.catalog.total_solutions,
            matching=matching,
            combinations=combinations,
            roadmap=matching.implementation_roadmap,
            excluded=excluded,
            processing_warnings=warnings,
        )

    def run_file(
        self,
        subtasks_path: Union[str, Path],
        criteria: Optional[FilterCriteria] = None,
    ) -> EngineResult:
        """Load subtasks from a JSON file and run the pipeline."""
        subtasks, warnings = load_subtasks(subtasks_path)
        result = self.run(subtasks, criteria)
        if not warnings:
            return result
        return result.model_copy(update={
            "processing_warnings": result.processing_warnings + warnings,
        })
