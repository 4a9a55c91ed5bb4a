"""Output-structure path planning.

Decides which frontend artifacts exist for one entity and where each one is
written, for the three mutually exclusive layouts:

``entity-first``
    ``generated/opportunity/types.ts``, ``.../collection.ts``, ... plus a
    barrel ``generated/opportunity/index.ts``.
``concern-first``
    ``generated/types/opportunity.ts``, ``generated/collections/opportunity.ts``, ...
``monolithic``
    a single ``generated/opportunity.ts`` holding every enabled concern.

The layout decides *where* an artifact goes.  The generation flags decide
*whether* it is produced.  Each path is computed from its own kind alone, so
switching one artifact off never moves another.  Planning is pure; callers
resolve the relative paths against their own root.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class OutputStructureMode(str, Enum):
    """Layout of generated frontend files."""
    ENTITY_FIRST = "entity-first"
    CONCERN_FIRST = "concern-first"
    MONOLITHIC = "monolithic"


class ArtifactKind(str, Enum):
    """Logical category of a generated frontend file."""
    TYPES = "types"
    COLLECTION = "collection"
    HOOKS = "hooks"
    MUTATIONS = "mutations"
    FIELDS = "fields"
    INDEX = "index"
    COMBINED = "combined"


#: Per-entity concerns, in the order they are emitted.
CONCERN_KINDS: tuple[ArtifactKind, ...] = (
    ArtifactKind.TYPES,
    ArtifactKind.COLLECTION,
    ArtifactKind.HOOKS,
    ArtifactKind.MUTATIONS,
    ArtifactKind.FIELDS,
)

#: Directory name of each concern in concern-first mode.
CONCERN_DIRS: dict[ArtifactKind, str] = {
    ArtifactKind.TYPES: "types",
    ArtifactKind.COLLECTION: "collections",
    ArtifactKind.HOOKS: "hooks",
    ArtifactKind.MUTATIONS: "mutations",
    ArtifactKind.FIELDS: "fields",
}


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class GenerationFlags(BaseModel):
    """Independent on/off gates for each artifact kind.

    Types are always generated; every other concern can be switched off.
    """

    model_config = ConfigDict(frozen=True)

    collections: bool = True
    hooks: bool = True
    mutations: bool = True
    field_metadata: bool = True
    barrel: bool = True

    def enabled(self, kind: ArtifactKind) -> bool:
        """Return whether *kind* is produced at all, regardless of layout."""
        if kind == ArtifactKind.TYPES:
            return True
        if kind == ArtifactKind.COLLECTION:
            return self.collections
        if kind == ArtifactKind.HOOKS:
            return self.hooks
        if kind == ArtifactKind.MUTATIONS:
            return self.mutations
        if kind == ArtifactKind.FIELDS:
            return self.field_metadata
        if kind == ArtifactKind.INDEX:
            return self.barrel
        return any(self.enabled(k) for k in CONCERN_KINDS)

    def enabled_concerns(self) -> list[ArtifactKind]:
        return [k for k in CONCERN_KINDS if self.enabled(k)]


class PathPlan(BaseModel):
    """Planned output paths for one entity in one layout."""

    model_config = ConfigDict(frozen=True)

    entity: str
    mode: OutputStructureMode
    paths: dict[ArtifactKind, str] = Field(default_factory=dict)
    barrel_exports: tuple[ArtifactKind, ...] = Field(
        default=(), description="Kinds re-exported by the entity-first index.ts"
    )
    combined_concerns: tuple[ArtifactKind, ...] = Field(
        default=(), description="Concerns folded into the monolithic file"
    )

    def get(self, kind: ArtifactKind) -> str | None:
        return self.paths.get(kind)

    def kinds(self) -> list[ArtifactKind]:
        return list(self.paths)

    def __contains__(self, kind: object) -> bool:
        return kind in self.paths

    def resolve(self, root: str | Path) -> dict[ArtifactKind, Path]:
        """Join every planned path onto *root*."""
        base = Path(root)
        return {kind: base / rel for kind, rel in self.paths.items()}


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


def _join(*parts: str) -> str:
    return "/".join(p.strip("/") for p in parts if p and p.strip("/"))


def entity_first_path(entity: str, kind: ArtifactKind, base_dir: str = "generated") -> str:
    return _join(base_dir, entity, f"{kind.value}.ts")


def concern_first_path(entity: str, kind: ArtifactKind, base_dir: str = "generated") -> str:
    return _join(base_dir, CONCERN_DIRS[kind], f"{entity}.ts")


def monolithic_path(entity: str, base_dir: str = "generated") -> str:
    return _join(base_dir, f"{entity}.ts")


def plan_output_paths(
    entity_name: str,
    mode: OutputStructureMode | str,
    flags: GenerationFlags | None = None,
    base_dir: str = "generated",
) -> PathPlan:
    """Compute the output file plan for one entity.

    Args:
        entity_name: Entity name as written in its definition (snake_case).
        mode: Output layout.
        flags: Per-artifact generation gates.  Everything is on by default.
        base_dir: Relative directory all paths are placed under.

    Returns:
        A :class:`PathPlan` whose ``paths`` only contains produced artifacts.
    """
    mode = OutputStructureMode(mode)
    flags = flags or GenerationFlags()
    concerns = flags.enabled_concerns()
    paths: dict[ArtifactKind, str] = {}

    if mode == OutputStructureMode.MONOLITHIC:
        if flags.enabled(ArtifactKind.COMBINED):
            paths[ArtifactKind.COMBINED] = monolithic_path(entity_name, base_dir)
        return PathPlan(
            entity=entity_name,
            mode=mode,
            paths=paths,
            combined_concerns=tuple(concerns),
        )

    if mode == OutputStructureMode.CONCERN_FIRST:
        for kind in concerns:
            paths[kind] = concern_first_path(entity_name, kind, base_dir)
        return PathPlan(entity=entity_name, mode=mode, paths=paths)

    for kind in concerns:
        paths[kind] = entity_first_path(entity_name, kind, base_dir)
    barrel_exports: tuple[ArtifactKind, ...] = ()
    if flags.barrel:
        paths[ArtifactKind.INDEX] = entity_first_path(entity_name, ArtifactKind.INDEX, base_dir)
        barrel_exports = tuple(concerns)
    return PathPlan(entity=entity_name, mode=mode, paths=paths, barrel_exports=barrel_exports)
