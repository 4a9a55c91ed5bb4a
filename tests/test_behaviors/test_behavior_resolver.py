"""Unit tests for behavior normalization, validation and resolution.

Tests cover:
- normalize_behavior_config for strings, mappings and normalized configs
- Normalization idempotence and order preservation
- validate_behaviors: unknown names, requirements, conflicts, completeness
- ensure_valid_behaviors raising BehaviorValidationError
- Field de-duplication (first contributor wins) and the shadow callback
- Import union sorting and de-duplication
- resolve_behaviors flags, repository config and methods
- Typed behavior options
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from entity_codegen.behaviors import (
    BehaviorRegistry,
    BehaviorValidationError,
    NormalizedBehaviorConfig,
    SoftDeleteOptions,
    TimestampsOptions,
    UserTrackingOptions,
    ensure_valid_behaviors,
    normalize_behavior_config,
    normalize_behavior_configs,
    resolve_behavior_fields,
    resolve_behavior_imports,
    resolve_behavior_methods,
    resolve_behaviors,
    validate_behaviors,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


class TestNormalize:
    def test_bare_string(self):
        result = normalize_behavior_config("timestamps")
        assert result == NormalizedBehaviorConfig(name="timestamps", options={})

    def test_mapping_with_options(self):
        result = normalize_behavior_config({"name": "soft_delete", "options": {"column": "removed_at"}})
        assert result.name == "soft_delete"
        assert result.options == {"column": "removed_at"}

    def test_mapping_without_options(self):
        assert normalize_behavior_config({"name": "soft_delete"}).options == {}

    def test_mapping_with_null_options(self):
        assert normalize_behavior_config({"name": "soft_delete", "options": None}).options == {}

    @pytest.mark.parametrize(
        "config",
        [
            "timestamps",
            {"name": "soft_delete"},
            {"name": "soft_delete", "options": {"column": "gone_at"}},
            NormalizedBehaviorConfig(name="user_tracking", options={"user_table": "people"}),
        ],
    )
    def test_idempotent(self, config):
        once = normalize_behavior_config(config)
        assert normalize_behavior_config(once) == once

    def test_normalized_input_is_copied(self):
        source = NormalizedBehaviorConfig(name="x", options={"a": 1})
        copy = normalize_behavior_config(source)
        copy.options["a"] = 2
        assert source.options == {"a": 1}

    def test_normalize_all_preserves_order(self):
        result = normalize_behavior_configs(["user_tracking", {"name": "timestamps"}, "soft_delete"])
        assert [c.name for c in result] == ["user_tracking", "timestamps", "soft_delete"]

    def test_normalize_all_empty(self):
        assert normalize_behavior_configs([]) == []

    def test_mapping_without_name_gets_empty_name(self):
        result = normalize_behavior_config({"options": {"a": 1}})
        assert result == NormalizedBehaviorConfig(name="", options={"a": 1})

    def test_non_mapping_options_dropped(self):
        assert normalize_behavior_config({"name": "soft_delete", "options": ["column"]}).options == {}

    def test_other_shapes_never_raise(self):
        assert normalize_behavior_config(42).name == "42"
        assert normalize_behavior_config(None).name == "None"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidateBehaviors:
    def test_single_builtin_is_valid(self):
        result = validate_behaviors(["user_tracking"])
        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_all_builtins_are_valid(self):
        assert validate_behaviors(["timestamps", "soft_delete", "user_tracking", "temporal_validity"]).valid

    def test_empty_list_is_valid(self):
        assert validate_behaviors([]).valid

    def test_unknown_behavior_reported_once(self):
        result = validate_behaviors(["soft_delete", "nonexistent"])
        assert result.valid is False
        assert result.errors == ["Unknown behavior: 'nonexistent'"]

    def test_every_unknown_reported(self):
        result = validate_behaviors(["nope", "timestamps", "also_nope"])
        assert result.errors == ["Unknown behavior: 'nope'", "Unknown behavior: 'also_nope'"]

    def test_missing_requirement(self, rules_registry):
        result = validate_behaviors(["x"], rules_registry)
        assert result.valid is False
        assert len(result.errors) == 1
        assert "'x'" in result.errors[0]
        assert "'y'" in result.errors[0]
        assert result.errors[0] == "Behavior 'x' requires 'y' which is not enabled"

    def test_requirement_satisfied(self, rules_registry):
        result = validate_behaviors(["x", "y"], rules_registry)
        assert result.valid is True
        assert result.errors == []

    def test_requirement_order_does_not_matter(self, rules_registry):
        assert validate_behaviors(["y", "x"], rules_registry).valid

    def test_conflict_detected(self, rules_registry):
        result = validate_behaviors(["x", "y", "z"], rules_registry)
        assert result.valid is False
        assert any("'x'" in e and "'z'" in e for e in result.errors)

    def test_one_sided_conflict_found_when_undeclared_side_listed_first(self, rules_registry):
        result = validate_behaviors(["z", "y", "x"], rules_registry)
        assert result.errors == ["Behavior 'x' conflicts with 'z'"]

    def test_all_violations_reported(self, rules_registry):
        result = validate_behaviors(["x", "z", "ghost"], rules_registry)
        assert result.errors == [
            "Behavior 'x' requires 'y' which is not enabled",
            "Behavior 'x' conflicts with 'z'",
            "Unknown behavior: 'ghost'",
        ]

    def test_requirements_are_checked_one_hop_only(self, behavior_factory):
        registry = BehaviorRegistry([
            behavior_factory("a", requires=("b",)),
            behavior_factory("b", requires=("c",)),
            behavior_factory("c"),
        ])
        result = validate_behaviors(["a", "b"], registry)
        assert result.errors == ["Behavior 'b' requires 'c' which is not enabled"]

    def test_builtins_unknown_to_substitute_registry(self, rules_registry):
        result = validate_behaviors(["timestamps"], rules_registry)
        assert result.errors == ["Unknown behavior: 'timestamps'"]

    def test_accepts_option_mappings(self):
        result = validate_behaviors([{"name": "soft_delete", "options": {"column": "x"}}])
        assert result.valid

    def test_empty_substitute_registry_knows_nothing(self):
        result = validate_behaviors(["timestamps"], BehaviorRegistry())
        assert result.valid is False
        assert result.errors == ["Unknown behavior: 'timestamps'"]

    def test_nameless_mapping_reported_as_unknown(self):
        result = validate_behaviors([{"options": {"a": 1}}])
        assert result.errors == ["Unknown behavior: ''"]

    def test_option_typo_reported(self):
        result = validate_behaviors([{"name": "soft_delete", "options": {"colum": "gone_at"}}])
        assert result.valid is False
        assert result.errors == [
            "Behavior 'soft_delete' has invalid option 'colum': Extra inputs are not permitted"
        ]

    def test_option_type_error_reported(self):
        result = validate_behaviors([{"name": "user_tracking", "options": {"user_table": 5}}])
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Behavior 'user_tracking' has invalid option 'user_table':")

    def test_opaque_options_not_checked(self, behavior_factory):
        registry = BehaviorRegistry([behavior_factory("sluggable")])
        result = validate_behaviors([{"name": "sluggable", "options": {"source": "title"}}], registry)
        assert result.valid is True

    def test_temporal_validity_options_are_opaque(self):
        assert validate_behaviors([{"name": "temporal_validity", "options": {"anything": 1}}]).valid


class TestEnsureValidBehaviors:
    def test_returns_result_when_valid(self):
        assert ensure_valid_behaviors(["timestamps"]).valid

    def test_raises_with_all_errors(self):
        with pytest.raises(BehaviorValidationError) as exc_info:
            ensure_valid_behaviors(["ghost", "phantom"], entity="deal")
        err = exc_info.value
        assert err.errors == ["Unknown behavior: 'ghost'", "Unknown behavior: 'phantom'"]
        assert err.entity == "deal"
        assert "entity 'deal'" in str(err)
        assert "phantom" in str(err)


# ---------------------------------------------------------------------------
# Field & import resolution
# ---------------------------------------------------------------------------


class TestResolveFields:
    def test_timestamps_then_soft_delete(self):
        fields = resolve_behavior_fields(["timestamps", "soft_delete"])
        assert [f.name for f in fields] == ["created_at", "updated_at", "deleted_at"]

    def test_order_follows_declaration(self):
        fields = resolve_behavior_fields(["soft_delete", "timestamps"])
        assert [f.name for f in fields] == ["deleted_at", "created_at", "updated_at"]

    def test_first_contributor_wins(self, shadow_registry):
        fields = resolve_behavior_fields(["a", "b"], shadow_registry)
        foos = [f for f in fields if f.name == "foo"]
        assert len(foos) == 1
        assert foos[0].drizzle_type == "varchar"
        assert [f.name for f in fields] == ["foo", "a_only", "b_only"]

    def test_reverse_order_flips_winner(self, shadow_registry):
        fields = resolve_behavior_fields(["b", "a"], shadow_registry)
        assert next(f for f in fields if f.name == "foo").drizzle_type == "integer"

    def test_shadow_callback(self, shadow_registry):
        seen = []
        resolve_behavior_fields(
            ["a", "b"],
            shadow_registry,
            on_shadow=lambda field, owner, shadowing: seen.append((field.name, owner, shadowing)),
        )
        assert seen == [("foo", "a", "b")]

    def test_unknown_behaviors_skipped(self):
        fields = resolve_behavior_fields(["ghost", "soft_delete"])
        assert [f.name for f in fields] == ["deleted_at"]

    def test_duplicate_behavior_entry_adds_fields_once(self):
        fields = resolve_behavior_fields(["timestamps", "timestamps"])
        assert [f.name for f in fields] == ["created_at", "updated_at"]


class TestResolveImports:
    def test_shared_import_deduplicated(self):
        assert resolve_behavior_imports(["timestamps", "soft_delete"]) == ["timestamp"]

    def test_sorted_regardless_of_declaration_order(self):
        assert resolve_behavior_imports(["user_tracking", "timestamps"]) == ["timestamp", "uuid"]
        assert resolve_behavior_imports(["timestamps", "user_tracking"]) == ["timestamp", "uuid"]

    def test_union_across_custom_registry(self, shadow_registry):
        assert resolve_behavior_imports(["b", "a"], shadow_registry) == ["integer", "text", "varchar"]

    def test_unknown_and_empty(self):
        assert resolve_behavior_imports([]) == []
        assert resolve_behavior_imports(["ghost"]) == []


class TestResolveMethods:
    def test_union_in_first_use_order(self, shadow_registry):
        assert resolve_behavior_methods(["a", "b"], shadow_registry) == ["shared", "aOnly", "bOnly"]

    def test_builtin_methods(self):
        methods = resolve_behavior_methods(["soft_delete"])
        assert methods == ["softDelete", "restore", "findWithDeleted", "findOnlyDeleted", "baseQuery"]


# ---------------------------------------------------------------------------
# Full resolution
# ---------------------------------------------------------------------------


class TestResolveBehaviors:
    def test_timestamps_and_soft_delete(self):
        resolved = resolve_behaviors(["timestamps", "soft_delete"])
        assert resolved.field_names == ["created_at", "updated_at", "deleted_at"]
        assert resolved.drizzle_imports == ["timestamp"]
        assert resolved.repository_config.as_template_dict() == {
            "timestamps": True,
            "softDelete": True,
            "userTracking": False,
            "versionable": False,
        }
        assert resolved.has_behaviors is True
        assert resolved.has_timestamps is True
        assert resolved.has_soft_delete is True
        assert resolved.has_user_tracking is False

    def test_no_behaviors(self):
        resolved = resolve_behaviors([])
        assert resolved.has_behaviors is False
        assert resolved.fields == []
        assert resolved.drizzle_imports == []
        assert resolved.repository_config.timestamps is False

    def test_versionable_always_false(self):
        resolved = resolve_behaviors(["timestamps", "soft_delete", "user_tracking"])
        assert resolved.repository_config.versionable is False
        assert resolved.repository_config.user_tracking is True

    def test_configs_are_normalized(self):
        resolved = resolve_behaviors(["timestamps", {"name": "soft_delete", "options": {"column": "gone"}}])
        assert resolved.configs == [
            NormalizedBehaviorConfig(name="timestamps"),
            NormalizedBehaviorConfig(name="soft_delete", options={"column": "gone"}),
        ]

    def test_has_behaviors_counts_unknown_entries(self):
        assert resolve_behaviors(["ghost"]).has_behaviors is True

    def test_fresh_result_per_call(self):
        first = resolve_behaviors(["timestamps"])
        second = resolve_behaviors(["timestamps"])
        first.fields.clear()
        assert second.field_names == ["created_at", "updated_at"]

    def test_custom_registry(self, shadow_registry):
        resolved = resolve_behaviors(["a", "b"], shadow_registry)
        assert resolved.field_names == ["foo", "a_only", "b_only"]
        assert resolved.has_timestamps is False

    def test_empty_substitute_registry_resolves_nothing(self):
        registry = BehaviorRegistry()
        resolved = resolve_behaviors(["timestamps"], registry)
        assert resolved.fields == []
        assert resolved.drizzle_imports == []
        assert resolved.methods == []
        assert resolve_behavior_fields(["timestamps"], registry) == []
        assert resolve_behavior_imports(["timestamps"], registry) == []
        assert resolve_behavior_methods(["timestamps"], registry) == []

    def test_temporal_validity(self):
        resolved = resolve_behaviors(["timestamps", "temporal_validity"])
        assert resolved.field_names == ["created_at", "updated_at", "valid_from", "valid_to", "is_active"]
        assert resolved.drizzle_imports == ["boolean", "timestamp"]
        assert resolved.has_temporal_validity is True
        assert resolved.has_soft_delete is False
        assert resolved.repository_config.as_template_dict() == {
            "timestamps": True,
            "softDelete": False,
            "userTracking": False,
            "versionable": False,
        }


# ---------------------------------------------------------------------------
# Typed options
# ---------------------------------------------------------------------------


class TestTypedOptions:
    def test_defaults(self):
        config = normalize_behavior_config("soft_delete")
        assert config.typed_options(SoftDeleteOptions).column == "deleted_at"
        assert normalize_behavior_config("timestamps").typed_options(TimestampsOptions).updated_column == "updated_at"

    def test_custom_values(self):
        config = normalize_behavior_config({"name": "user_tracking", "options": {"user_table": "members"}})
        assert config.typed_options(UserTrackingOptions).user_table == "members"

    def test_unknown_option_rejected(self):
        config = normalize_behavior_config({"name": "soft_delete", "options": {"colum": "typo"}})
        with pytest.raises(ValidationError):
            config.typed_options(SoftDeleteOptions)
