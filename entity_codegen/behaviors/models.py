"""Pydantic v2 models for entity behaviors.

A behavior is a named, reusable cross-cutting concern (timestamps, soft
delete, user tracking) that contributes generated fields, storage-layer
imports and repository capabilities to an entity.  Definitions are immutable
records looked up by name; resolution turns an entity's list of behavior
references into a :class:`ResolvedBehaviors` ready for template rendering.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Importance(str, Enum):
    """How prominently a generated field is shown in the UI."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------

class FieldUI(BaseModel):
    """UI hints attached to a generated field."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="Human-readable label, e.g. 'Created At'")
    type: str = Field(..., description="UI widget type, e.g. 'datetime' or 'reference'")
    importance: Importance = Field(default=Importance.TERTIARY)
    group: str = Field(default="metadata", description="Field group in forms and detail views")
    visible: bool = Field(default=False)


class BehaviorField(BaseModel):
    """A single column/property contributed by a behavior."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Storage identifier (snake_case column name)")
    camel_name: str = Field(..., description="In-memory identifier (camelCase property)")
    type: str = Field(..., description="Semantic field type, e.g. 'datetime' or 'uuid'")
    ts_type: str = Field(..., description="Target-language type string")
    drizzle_type: str = Field(..., description="Storage column type")
    drizzle_imports: tuple[str, ...] = Field(default=(), description="Storage-layer imports for this column")
    zod_type: str = Field(..., description="Validation-schema expression")
    nullable: bool = Field(default=False)
    default: Optional[Any] = Field(default=None)
    foreign_key: Optional[str] = Field(default=None, description="Referenced column, e.g. 'users.id'")
    ui: Optional[FieldUI] = Field(default=None)


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

class BehaviorDefinition(BaseModel):
    """Immutable description of what one behavior contributes and needs."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique behavior name, e.g. 'soft_delete'")
    description: str = Field(default="")
    fields: tuple[BehaviorField, ...] = Field(default=())
    drizzle_imports: tuple[str, ...] = Field(default=())
    requires: tuple[str, ...] = Field(default=(), description="Behaviors that must also be enabled")
    conflicts: tuple[str, ...] = Field(default=(), description="Behaviors that must not be enabled")
    methods: tuple[str, ...] = Field(default=(), description="Repository methods this behavior activates")
    config_key: str = Field(..., description="Key in the generated repository behavior config")
    options_model: Optional[type[BaseModel]] = Field(
        default=None, description="Schema for this behavior's options; None keeps them opaque"
    )


# ---------------------------------------------------------------------------
# Configuration references
# ---------------------------------------------------------------------------

OptionsT = TypeVar("OptionsT", bound=BaseModel)


class NormalizedBehaviorConfig(BaseModel):
    """A behavior reference that always carries a name and an options mapping."""

    name: str = Field(default="", description="Behavior name; empty when the reference had none")
    options: dict[str, Any] = Field(default_factory=dict)

    def typed_options(self, model: type[OptionsT]) -> OptionsT:
        """Validate the opaque options mapping against a behavior options model."""
        return model.model_validate(self.options)


#: A behavior reference as written in entity YAML: a bare name or ``{name, options}``.
BehaviorConfig = Union[str, dict[str, Any], NormalizedBehaviorConfig]


class TimestampsOptions(BaseModel):
    """Options accepted by the ``timestamps`` behavior."""

    model_config = ConfigDict(extra="forbid")

    created_column: str = "created_at"
    updated_column: str = "updated_at"


class SoftDeleteOptions(BaseModel):
    """Options accepted by the ``soft_delete`` behavior."""

    model_config = ConfigDict(extra="forbid")

    column: str = "deleted_at"


class UserTrackingOptions(BaseModel):
    """Options accepted by the ``user_tracking`` behavior."""

    model_config = ConfigDict(extra="forbid")

    user_table: str = "users"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class ValidationResult(BaseModel):
    """Outcome of validating one entity's behavior list."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class RepositoryConfig(BaseModel):
    """Capability flags for the generated repository's ``behaviors`` property."""

    timestamps: bool = False
    soft_delete: bool = False
    user_tracking: bool = False
    versionable: bool = False

    def as_template_dict(self) -> dict[str, bool]:
        """Return the flags keyed the way the generated runtime code spells them."""
        return {
            "timestamps": self.timestamps,
            "softDelete": self.soft_delete,
            "userTracking": self.user_tracking,
            "versionable": self.versionable,
        }


class ResolvedBehaviors(BaseModel):
    """Fully computed behavior data for one entity, ready for templates."""

    configs: list[NormalizedBehaviorConfig] = Field(default_factory=list)
    fields: list[BehaviorField] = Field(default_factory=list)
    drizzle_imports: list[str] = Field(default_factory=list)
    methods: list[str] = Field(default_factory=list)
    repository_config: RepositoryConfig = Field(default_factory=RepositoryConfig)
    has_behaviors: bool = False
    has_timestamps: bool = False
    has_soft_delete: bool = False
    has_user_tracking: bool = False
    has_temporal_validity: bool = False

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]
