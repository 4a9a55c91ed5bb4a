"""Per-entity template context.

Ties the behavior engine, the global config and the path planner together for
one entity definition::

    entity YAML -> EntityDefinition -> validate behaviors (abort on error)
                -> resolve behaviors + strategy -> plan output paths
                -> EntityContext.as_template_context() -> template renderer

The template renderer itself is an external collaborator; this module only
decides *what* it gets.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .behaviors import (
    BehaviorRegistry,
    NormalizedBehaviorConfig,
    ResolvedBehaviors,
    ensure_valid_behaviors,
    resolve_behaviors,
)
from .config import BehaviorStrategy, CodegenConfig, resolve_behavior_strategy
from .structure import PathPlan, plan_output_paths
from .utils import pluralize, to_camel_case, to_pascal_case


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class EntityDefinitionError(Exception):
    """Raised when an entity definition file cannot be read or is invalid."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{self.path}: {message}")


# ---------------------------------------------------------------------------
# Entity definition
# ---------------------------------------------------------------------------


class EntityConfig(BaseModel):
    """The ``entity:`` block of a definition file."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(
        ..., pattern=r"^[a-z][a-z0-9_]*$", description="Entity name in snake_case, e.g. 'deal_state'"
    )
    plural: str = Field(default="", description="Plural name; derived from name when omitted")
    table: Optional[str] = Field(default=None)
    behavior_strategy: Optional[str] = Field(
        default=None, description="Per-entity override of behaviors.strategy"
    )

    @model_validator(mode="after")
    def _default_plural(self) -> "EntityConfig":
        if not self.plural:
            self.plural = pluralize(self.name)
        return self


class EntityDefinition(BaseModel):
    """The parts of an entity YAML definition the generator decides on.

    Keys this model does not know about (fields, relationships, ...) are
    ignored here and left to the template renderer.
    """

    model_config = ConfigDict(extra="ignore")

    entity: EntityConfig
    behaviors: list[Union[str, NormalizedBehaviorConfig]] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.entity.name

    @property
    def plural(self) -> str:
        return self.entity.plural

    @property
    def behavior_strategy(self) -> Optional[str]:
        return self.entity.behavior_strategy


def load_entity_definition(path: str | Path) -> EntityDefinition:
    """Read and validate an entity definition YAML file.

    Raises:
        EntityDefinitionError: If the file is unreadable, not YAML, or does
            not match the schema.
    """
    file_path = Path(path)
    try:
        raw = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise EntityDefinitionError(file_path, str(exc)) from exc

    if not isinstance(raw, dict):
        raise EntityDefinitionError(file_path, "expected a mapping at the top level")
    if raw.get("behaviors") is None:
        raw["behaviors"] = []

    try:
        return EntityDefinition.model_validate(raw)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise EntityDefinitionError(file_path, problems) from exc


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class EntityContext(BaseModel):
    """Everything the template renderer needs for one entity."""

    name: str
    plural: str
    class_name: str
    class_name_plural: str
    camel_name: str
    collection_var_name: str
    behavior_strategy: BehaviorStrategy
    behaviors: ResolvedBehaviors
    plan: PathPlan
    frontend_root: str

    def output_paths(self) -> dict[str, str]:
        """Planned artifacts keyed by kind name, relative to the project root."""
        return {
            kind.value: f"{self.frontend_root}/{rel}" if self.frontend_root else rel
            for kind, rel in self.plan.paths.items()
        }

    def as_template_context(self) -> dict[str, Any]:
        """Flatten into the plain dict handed to the template renderer."""
        behaviors = self.behaviors
        return {
            "name": self.name,
            "plural": self.plural,
            "class_name": self.class_name,
            "class_name_plural": self.class_name_plural,
            "camel_name": self.camel_name,
            "collection_var_name": self.collection_var_name,
            "behavior_strategy": self.behavior_strategy.value,
            "behaviors": behaviors.model_dump(mode="json"),
            "behavior_fields": [f.model_dump(mode="json") for f in behaviors.fields],
            "drizzle_imports": list(behaviors.drizzle_imports),
            "has_behaviors": behaviors.has_behaviors,
            "has_timestamps": behaviors.has_timestamps,
            "has_soft_delete": behaviors.has_soft_delete,
            "has_user_tracking": behaviors.has_user_tracking,
            "has_temporal_validity": behaviors.has_temporal_validity,
            "repository_behavior_config": behaviors.repository_config.as_template_dict(),
            "structure": self.plan.mode.value,
            "output_paths": self.output_paths(),
            "barrel_exports": [k.value for k in self.plan.barrel_exports],
            "combined_concerns": [k.value for k in self.plan.combined_concerns],
        }


def build_entity_context(
    definition: EntityDefinition,
    config: Optional[CodegenConfig] = None,
    registry: Optional[BehaviorRegistry] = None,
) -> EntityContext:
    """Validate, resolve and plan one entity.

    Raises:
        BehaviorValidationError: If the entity's behavior set is invalid.
            Nothing is resolved or planned in that case.
    """
    config = config or CodegenConfig()
    ensure_valid_behaviors(definition.behaviors, registry, entity=definition.name)

    camel_name = to_camel_case(definition.name)
    plan = plan_output_paths(
        definition.name,
        config.generate.structure,
        config.generate.flags(),
        base_dir=config.paths.generated_dir,
    )
    # Planner paths are relative to frontend_src.
    return EntityContext(
        name=definition.name,
        plural=definition.plural,
        class_name=to_pascal_case(definition.name),
        class_name_plural=to_pascal_case(definition.plural),
        camel_name=camel_name,
        collection_var_name=f"{camel_name}Collection",
        behavior_strategy=resolve_behavior_strategy(definition.behavior_strategy, config),
        behaviors=resolve_behaviors(definition.behaviors, registry),
        plan=plan,
        frontend_root=config.paths.frontend_src,
    )
