"""Behavior resolution engine.

Resolves the declarative behaviors on an entity (``timestamps``,
``soft_delete``, ``user_tracking``) into generated fields, storage imports and
repository capability flags.

Usage::

    from entity_codegen.behaviors import resolve_behaviors, validate_behaviors

    result = validate_behaviors(["timestamps", "soft_delete"])
    assert result.valid
    resolved = resolve_behaviors(["timestamps", "soft_delete"])
    print(resolved.field_names)       # ['created_at', 'updated_at', 'deleted_at']
    print(resolved.drizzle_imports)   # ['timestamp']
"""

from .definitions import (
    BUILTIN_BEHAVIORS,
    SOFT_DELETE,
    TEMPORAL_VALIDITY,
    TIMESTAMPS,
    USER_TRACKING,
)
from .models import (
    BehaviorConfig,
    BehaviorDefinition,
    BehaviorField,
    FieldUI,
    Importance,
    NormalizedBehaviorConfig,
    RepositoryConfig,
    ResolvedBehaviors,
    SoftDeleteOptions,
    TimestampsOptions,
    UserTrackingOptions,
    ValidationResult,
)
from .registry import BehaviorRegistry, default_registry
from .resolver import (
    BehaviorValidationError,
    ensure_valid_behaviors,
    normalize_behavior_config,
    normalize_behavior_configs,
    resolve_behavior_fields,
    resolve_behavior_imports,
    resolve_behavior_methods,
    resolve_behaviors,
    validate_behaviors,
)

__all__ = [
    # Registry
    "BehaviorRegistry",
    "default_registry",
    "BUILTIN_BEHAVIORS",
    "TIMESTAMPS",
    "SOFT_DELETE",
    "USER_TRACKING",
    "TEMPORAL_VALIDITY",
    # Models
    "BehaviorConfig",
    "BehaviorDefinition",
    "BehaviorField",
    "FieldUI",
    "Importance",
    "NormalizedBehaviorConfig",
    "RepositoryConfig",
    "ResolvedBehaviors",
    "ValidationResult",
    "TimestampsOptions",
    "SoftDeleteOptions",
    "UserTrackingOptions",
    # Resolution
    "BehaviorValidationError",
    "normalize_behavior_config",
    "normalize_behavior_configs",
    "validate_behaviors",
    "ensure_valid_behaviors",
    "resolve_behavior_fields",
    "resolve_behavior_imports",
    "resolve_behavior_methods",
    "resolve_behaviors",
]
