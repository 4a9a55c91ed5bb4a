"""Output-structure path planner.

Usage::

    from entity_codegen.structure import plan_output_paths

    plan = plan_output_paths("opportunity", "entity-first")
    plan.paths  # {ArtifactKind.TYPES: 'generated/opportunity/types.ts', ...}
"""

from .planner import (
    CONCERN_DIRS,
    CONCERN_KINDS,
    ArtifactKind,
    GenerationFlags,
    OutputStructureMode,
    PathPlan,
    plan_output_paths,
)

__all__ = [
    "ArtifactKind",
    "CONCERN_DIRS",
    "CONCERN_KINDS",
    "GenerationFlags",
    "OutputStructureMode",
    "PathPlan",
    "plan_output_paths",
]
