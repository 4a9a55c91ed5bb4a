"""entity-codegen configuration.

Typed, process-wide generation settings loaded from an optional
``codegen.config.yaml`` in the project root.  All settings are Pydantic v2
models, so a missing section simply takes its defaults.

A broken config file never aborts generation.  Parse and schema failures are
reported as warnings and the defaults are used instead.  The returned
:class:`ConfigLoadResult` records *why* the defaults were used.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.markup import escape

from .structure.planner import GenerationFlags, OutputStructureMode
from .utils import print_warning

CONFIG_FILENAME = "codegen.config.yaml"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class BehaviorStrategy(str, Enum):
    """How behavior logic is emitted into generated repositories."""
    BASE_CLASS = "base_class"
    INLINE = "inline"


class ConfigSource(str, Enum):
    """Where the effective configuration came from."""
    FILE = "file"
    DEFAULT_MISSING = "default_missing"
    DEFAULT_UNPARSEABLE = "default_unparseable"
    DEFAULT_INVALID = "default_invalid"


# ---------------------------------------------------------------------------
# Config sections
# ---------------------------------------------------------------------------

class BehaviorsConfig(BaseModel):
    """Settings for behavior code generation."""

    strategy: BehaviorStrategy = Field(default=BehaviorStrategy.BASE_CLASS)


class GenerateConfig(BaseModel):
    """Which frontend artifacts to generate and how to lay them out."""

    model_config = ConfigDict(populate_by_name=True)

    structure: OutputStructureMode = Field(
        default=OutputStructureMode.MONOLITHIC,
        description="Output layout: entity-first, concern-first or monolithic",
    )
    collections: bool = Field(default=True)
    hooks: bool = Field(default=True)
    mutations: bool = Field(default=True)
    field_metadata: bool = Field(default=True, alias="fieldMetadata")
    barrel: bool = Field(default=True, description="Emit an index.ts barrel in entity-first mode")

    def flags(self) -> GenerationFlags:
        """Return the per-artifact generation gates for the path planner."""
        return GenerationFlags(
            collections=self.collections,
            hooks=self.hooks,
            mutations=self.mutations,
            field_metadata=self.field_metadata,
            barrel=self.barrel,
        )


class PathsConfig(BaseModel):
    """Base paths relative to the project root."""

    backend_src: str = Field(default="app/backend/src")
    frontend_src: str = Field(default="app/frontend/src")
    packages: str = Field(default="packages")
    generated_dir: str = Field(default="generated", description="Relative to frontend_src")

    @property
    def generated_root(self) -> str:
        """Directory the path planner's relative paths live under."""
        return f"{self.frontend_src}/{self.generated_dir}"

    def output_roots(self) -> list[str]:
        """Every generator output root, as captured by the regression harness."""
        backend = self.backend_src
        frontend = self.frontend_src
        return [
            f"{backend}/domain",
            f"{backend}/application",
            f"{backend}/infrastructure/persistence/drizzle",
            f"{backend}/infrastructure/persistence/repositories",
            f"{backend}/modules",
            f"{backend}/presentation/rest",
            f"{backend}/constants/tokens.ts",
            f"{backend}/app.module.ts",
            f"{frontend}/lib/collections",
            f"{frontend}/lib/store",
            self.generated_root,
            f"{self.packages}/db/src/entities",
        ]


class HarnessSettings(BaseModel):
    """Regression-harness locations and commands, relative to the project root."""

    fixtures_dir: str = Field(default="codegen/test/fixtures")
    baseline_dir: str = Field(default="codegen/test/baseline")
    gen_dir: str = Field(default="codegen/test/gen")
    generate_command: str = Field(
        default='bunx hygen entity new --yaml "{fixture}"',
        description="Shell command run once per fixture; {fixture} is the fixture path",
    )
    format_command: Optional[str] = Field(default="bun run lint")
    fixture_pattern: str = Field(default="*.yaml")
    env: dict[str, str] = Field(
        default_factory=dict,
        description="Extra environment for the generate and format commands, e.g. HYGEN_TMPLS",
    )
    output_paths: Optional[list[str]] = Field(
        default=None, description="Override the output roots derived from paths"
    )


class CodegenConfig(BaseModel):
    """Global code generation configuration.

    Created once per generation invocation and passed through to the entity
    context builder and the regression harness.
    """

    behaviors: BehaviorsConfig = Field(default_factory=BehaviorsConfig)
    generate: GenerateConfig = Field(default_factory=GenerateConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    harness: HarnessSettings = Field(default_factory=HarnessSettings)


class ConfigLoadResult(BaseModel):
    """The effective configuration plus where it came from."""

    config: CodegenConfig
    source: ConfigSource
    path: Path
    problems: list[str] = Field(default_factory=list)

    @property
    def used_defaults(self) -> bool:
        return self.source != ConfigSource.FILE


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _read_file(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def load_codegen_config(
    working_dir: str | Path,
    read_text: Callable[[Path], str] | None = None,
) -> ConfigLoadResult:
    """Load ``codegen.config.yaml`` from *working_dir*.

    Args:
        working_dir: Project root to look in.
        read_text: File reader, mainly for tests.  It must raise
            ``FileNotFoundError`` when the file does not exist.

    Returns:
        A :class:`ConfigLoadResult`.  The file is re-read on every call.
    """
    reader = read_text or _read_file
    config_path = Path(working_dir) / CONFIG_FILENAME

    try:
        content = reader(config_path)
    except FileNotFoundError:
        return ConfigLoadResult(
            config=CodegenConfig(), source=ConfigSource.DEFAULT_MISSING, path=config_path
        )
    except OSError as exc:
        return _fallback(config_path, ConfigSource.DEFAULT_UNPARSEABLE, [str(exc)])

    try:
        parsed: Any = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        return _fallback(config_path, ConfigSource.DEFAULT_UNPARSEABLE, [str(exc)])

    if parsed is None:
        parsed = {}

    try:
        config = CodegenConfig.model_validate(parsed)
    except ValidationError as exc:
        problems = [
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        ]
        return _fallback(config_path, ConfigSource.DEFAULT_INVALID, problems)

    return ConfigLoadResult(config=config, source=ConfigSource.FILE, path=config_path)


def _fallback(path: Path, source: ConfigSource, problems: list[str]) -> ConfigLoadResult:
    """Warn about an unusable config file and return the defaults."""
    if source == ConfigSource.DEFAULT_INVALID:
        print_warning(f"Warning: Invalid {path.name}, using defaults. Errors:")
    else:
        print_warning(f"Warning: Failed to parse {path.name}, using defaults.")
    for problem in problems:
        print_warning(f"  - {escape(problem)}")
    return ConfigLoadResult(
        config=CodegenConfig(), source=source, path=path, problems=problems
    )


# ---------------------------------------------------------------------------
# Strategy resolution
# ---------------------------------------------------------------------------


def resolve_behavior_strategy(
    entity_override: Optional[str] = None,
    global_config: Optional[CodegenConfig] = None,
) -> BehaviorStrategy:
    """Return the behavior strategy for an entity.

    A per-entity override wins only when it is itself a valid strategy name;
    anything else falls back to the global config, then to ``base_class``.
    """
    if entity_override and entity_override in {s.value for s in BehaviorStrategy}:
        return BehaviorStrategy(entity_override)

    if global_config is not None:
        return global_config.behaviors.strategy
    return BehaviorStrategy.BASE_CLASS
