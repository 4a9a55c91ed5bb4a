"""entity-codegen -- declarative entity code generation.

Decides *what* gets generated for an entity (behavior fields, imports and
repository flags) and *where* it goes (output-structure path plans), and
guards generator refactors with a byte-exact baseline regression harness.

Quick usage::

    from entity_codegen import build_entity_context, load_codegen_config, load_entity_definition

    config = load_codegen_config(".").config
    entity = load_entity_definition("entities/opportunity.yaml")
    context = build_entity_context(entity, config)
    context.as_template_context()
"""

from entity_codegen.config import CodegenConfig, load_codegen_config, resolve_behavior_strategy
from entity_codegen.context import (
    EntityContext,
    EntityDefinition,
    EntityDefinitionError,
    build_entity_context,
    load_entity_definition,
)

__all__ = [
    "CodegenConfig",
    "load_codegen_config",
    "resolve_behavior_strategy",
    "EntityContext",
    "EntityDefinition",
    "EntityDefinitionError",
    "build_entity_context",
    "load_entity_definition",
]
