"""Roadmap builder.

Buckets subtask matches into three sequential phases by their derived
implementation priority. Phase duration and cost figures are fixed
illustrative bands, not aggregates of the member solutions.
"""

from .schema import ImplementationPhase, ImplementationRoadmap, SubtaskMatch
from .tables import (
    ROADMAP_EXPECTED_ROI,
    ROADMAP_PHASE_DEPENDENCIES,
    ROADMAP_PHASES,
    ROADMAP_TOTAL_COST,
    ROADMAP_TOTAL_TIME,
)


class RoadmapBuilder:
    """Builds a three-phase implementation roadmap."""

    def build(self, subtask_matches: list[SubtaskMatch]) -> ImplementationRoadmap:
        phases = []
        for band in ROADMAP_PHASES:
            members = [
                m.subtask_name for m in subtask_matches
                if m.implementation_priority == band["priority"]
            ]
            phases.append(ImplementationPhase(
                phase=band["phase"],
                name=band["name"],
                description=band["description"],
                duration=band["duration"],
                solutions=members,
                deliverables=list(band["deliverables"]),
                dependencies=list(band["dependencies"]),
                estimated_cost=band["estimated_cost"],
                team_members=list(band["team_members"]),
            ))

        return ImplementationRoadmap(
            phases=phases,
            total_estimated_time=ROADMAP_TOTAL_TIME,
            total_estimated_cost=ROADMAP_TOTAL_COST,
            expected_roi=ROADMAP_EXPECTED_ROI,
            critical_path=[f"Phase {p.phase}: {p.name}" for p in phases],
            dependencies={k: list(v) for k, v in ROADMAP_PHASE_DEPENDENCIES.items()},
        )
