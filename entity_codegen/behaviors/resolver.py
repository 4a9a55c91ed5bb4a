"""Behavior normalization, validation and resolution.

Turns the behavior list declared on an entity into the concrete fields,
storage imports and repository flags the template renderer consumes:

1. **Normalize** -- bare names and ``{name, options}`` mappings become
   :class:`NormalizedBehaviorConfig`.
2. **Validate** -- unknown names, unmet ``requires``, declared
   ``conflicts`` and options rejected by a behavior's ``options_model`` are
   collected as human-readable errors.  An invalid set must
   never reach resolution; :func:`ensure_valid_behaviors` enforces that.
3. **Resolve** -- fields are merged first-contributor-wins, imports are
   unioned and sorted, capability flags are derived by membership.

Every function here is pure.  Each accepts an optional registry and falls back
to :func:`default_registry`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Optional

from pydantic import BaseModel, ValidationError

from .models import (
    BehaviorConfig,
    BehaviorField,
    NormalizedBehaviorConfig,
    RepositoryConfig,
    ResolvedBehaviors,
    ValidationResult,
)
from .registry import BehaviorRegistry, default_registry

#: Called with ``(dropped_field, owning_behavior, shadowed_behavior)``.
ShadowCallback = Callable[[BehaviorField, str, str], None]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class BehaviorValidationError(Exception):
    """Raised when an entity's behavior set fails validation."""

    def __init__(self, errors: Sequence[str], entity: Optional[str] = None) -> None:
        self.errors = list(errors)
        self.entity = entity
        target = f"entity '{entity}'" if entity else "entity"
        bullet_list = "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(f"Invalid behaviors for {target}:\n{bullet_list}")


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_behavior_config(config: BehaviorConfig) -> NormalizedBehaviorConfig:
    """Normalize a behavior reference to always have a name and options.

    Never raises.  A mapping without a usable name gets an empty name and
    options that are not a mapping are dropped; validation then reports the
    entry as an unknown behavior.
    """
    if isinstance(config, NormalizedBehaviorConfig):
        return NormalizedBehaviorConfig(name=config.name, options=dict(config.options))
    if isinstance(config, Mapping):
        name = config.get("name")
        options = config.get("options")
        return NormalizedBehaviorConfig(
            name="" if name is None else str(name),
            options={str(k): v for k, v in options.items()} if isinstance(options, Mapping) else {},
        )
    return NormalizedBehaviorConfig(name=str(config), options={})


def normalize_behavior_configs(
    configs: Iterable[BehaviorConfig],
) -> list[NormalizedBehaviorConfig]:
    """Normalize a sequence of behavior references, preserving order."""
    return [normalize_behavior_config(c) for c in configs]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_behaviors(
    configs: Iterable[BehaviorConfig],
    registry: Optional[BehaviorRegistry] = None,
) -> ValidationResult:
    """Check a behavior set for unknown names, missing dependencies and conflicts.

    Every entry is visited, so a conflict declared on only one side of a pair
    is still found.  Options are checked only for behaviors that declare an
    ``options_model``.  All violations are reported, not just the first.
    """
    if registry is None:
        registry = default_registry()
    normalized = normalize_behavior_configs(configs)
    enabled = {c.name for c in normalized}
    errors: list[str] = []
    warnings: list[str] = []

    for config in normalized:
        behavior = registry.get(config.name)
        if behavior is None:
            errors.append(f"Unknown behavior: '{config.name}'")
            continue

        for required in behavior.requires:
            if required not in enabled:
                errors.append(
                    f"Behavior '{config.name}' requires '{required}' which is not enabled"
                )

        for conflict in behavior.conflicts:
            if conflict in enabled:
                errors.append(f"Behavior '{config.name}' conflicts with '{conflict}'")

        if behavior.options_model is not None:
            errors.extend(_option_errors(config, behavior.options_model))

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def _option_errors(config: NormalizedBehaviorConfig, model: type[BaseModel]) -> list[str]:
    try:
        config.typed_options(model)
    except ValidationError as exc:
        return [
            f"Behavior '{config.name}' has invalid option "
            f"'{'.'.join(str(part) for part in err['loc'])}': {err['msg']}"
            for err in exc.errors()
        ]
    return []


def ensure_valid_behaviors(
    configs: Iterable[BehaviorConfig],
    registry: Optional[BehaviorRegistry] = None,
    entity: Optional[str] = None,
) -> ValidationResult:
    """Validate and raise :class:`BehaviorValidationError` if anything is wrong."""
    result = validate_behaviors(configs, registry)
    if not result.valid:
        raise BehaviorValidationError(result.errors, entity=entity)
    return result


# ---------------------------------------------------------------------------
# Field & import resolution
# ---------------------------------------------------------------------------


def resolve_behavior_fields(
    configs: Iterable[BehaviorConfig],
    registry: Optional[BehaviorRegistry] = None,
    *,
    on_shadow: Optional[ShadowCallback] = None,
) -> list[BehaviorField]:
    """Collect the fields added by a behavior set.

    When two behaviors add a field with the same name, the one processed
    first wins and the later one is dropped.  Unknown behaviors are skipped.
    """
    if registry is None:
        registry = default_registry()
    fields: list[BehaviorField] = []
    owners: dict[str, str] = {}

    for config in normalize_behavior_configs(configs):
        behavior = registry.get(config.name)
        if behavior is None:
            continue

        for field in behavior.fields:
            if field.name in owners:
                if on_shadow is not None:
                    on_shadow(field, owners[field.name], behavior.name)
                continue
            fields.append(field)
            owners[field.name] = behavior.name

    return fields


def resolve_behavior_imports(
    configs: Iterable[BehaviorConfig],
    registry: Optional[BehaviorRegistry] = None,
) -> list[str]:
    """Return the sorted, de-duplicated storage imports needed by a behavior set."""
    if registry is None:
        registry = default_registry()
    imports: set[str] = set()

    for config in normalize_behavior_configs(configs):
        behavior = registry.get(config.name)
        if behavior is None:
            continue
        imports.update(behavior.drizzle_imports)

    return sorted(imports)


def resolve_behavior_methods(
    configs: Iterable[BehaviorConfig],
    registry: Optional[BehaviorRegistry] = None,
) -> list[str]:
    """Return the repository methods activated by a behavior set, first use first."""
    if registry is None:
        registry = default_registry()
    methods: list[str] = []

    for config in normalize_behavior_configs(configs):
        behavior = registry.get(config.name)
        if behavior is None:
            continue
        for method in behavior.methods:
            if method not in methods:
                methods.append(method)

    return methods


# ---------------------------------------------------------------------------
# Full resolution
# ---------------------------------------------------------------------------


def resolve_behaviors(
    configs: Sequence[BehaviorConfig],
    registry: Optional[BehaviorRegistry] = None,
) -> ResolvedBehaviors:
    """Resolve all behavior data for templates."""
    if registry is None:
        registry = default_registry()
    normalized = normalize_behavior_configs(configs)
    enabled = {c.name for c in normalized}

    has_timestamps = "timestamps" in enabled
    has_soft_delete = "soft_delete" in enabled
    has_user_tracking = "user_tracking" in enabled
    has_temporal_validity = "temporal_validity" in enabled

    return ResolvedBehaviors(
        configs=normalized,
        fields=resolve_behavior_fields(normalized, registry),
        drizzle_imports=resolve_behavior_imports(normalized, registry),
        methods=resolve_behavior_methods(normalized, registry),
        repository_config=RepositoryConfig(
            timestamps=has_timestamps,
            soft_delete=has_soft_delete,
            user_tracking=has_user_tracking,
            # Reserved for a future versioning behavior.
            versionable=False,
        ),
        has_behaviors=len(normalized) > 0,
        has_timestamps=has_timestamps,
        has_soft_delete=has_soft_delete,
        has_user_tracking=has_user_tracking,
        has_temporal_validity=has_temporal_validity,
    )
