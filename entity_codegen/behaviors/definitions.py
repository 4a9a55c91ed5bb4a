"""Built-in behavior definitions.

Each definition lists the columns it adds, the storage-layer imports those
columns need, and the repository methods it switches on.
"""

from __future__ import annotations

from .models import (
    BehaviorDefinition,
    BehaviorField,
    FieldUI,
    Importance,
    SoftDeleteOptions,
    TimestampsOptions,
    UserTrackingOptions,
)


def _metadata_ui(label: str, ui_type: str) -> FieldUI:
    return FieldUI(
        label=label,
        type=ui_type,
        importance=Importance.TERTIARY,
        group="metadata",
        visible=False,
    )


# ---------------------------------------------------------------------------
# timestamps
# ---------------------------------------------------------------------------

TIMESTAMPS = BehaviorDefinition(
    name="timestamps",
    description="Adds created_at and updated_at timestamp fields",
    fields=(
        BehaviorField(
            name="created_at",
            camel_name="createdAt",
            type="datetime",
            ts_type="Date",
            drizzle_type="timestamp",
            drizzle_imports=("timestamp",),
            zod_type="z.coerce.date()",
            nullable=False,
            default="now()",
            ui=_metadata_ui("Created At", "datetime"),
        ),
        BehaviorField(
            name="updated_at",
            camel_name="updatedAt",
            type="datetime",
            ts_type="Date",
            drizzle_type="timestamp",
            drizzle_imports=("timestamp",),
            zod_type="z.coerce.date()",
            nullable=False,
            default="now()",
            ui=_metadata_ui("Updated At", "datetime"),
        ),
    ),
    drizzle_imports=("timestamp",),
    methods=("applyTimestampsOnCreate", "applyTimestampsOnUpdate"),
    config_key="timestamps",
    options_model=TimestampsOptions,
)


# ---------------------------------------------------------------------------
# soft_delete
# ---------------------------------------------------------------------------

SOFT_DELETE = BehaviorDefinition(
    name="soft_delete",
    description="Adds deleted_at field for soft delete functionality",
    fields=(
        BehaviorField(
            name="deleted_at",
            camel_name="deletedAt",
            type="datetime",
            ts_type="Date | null",
            drizzle_type="timestamp",
            drizzle_imports=("timestamp",),
            zod_type="z.coerce.date().nullable()",
            nullable=True,
            ui=_metadata_ui("Deleted At", "datetime"),
        ),
    ),
    drizzle_imports=("timestamp",),
    # baseQuery is overridden to filter deleted rows.
    methods=("softDelete", "restore", "findWithDeleted", "findOnlyDeleted", "baseQuery"),
    config_key="softDelete",
    options_model=SoftDeleteOptions,
)


# ---------------------------------------------------------------------------
# user_tracking
# ---------------------------------------------------------------------------

USER_TRACKING = BehaviorDefinition(
    name="user_tracking",
    description="Adds created_by and updated_by user reference fields",
    fields=(
        BehaviorField(
            name="created_by",
            camel_name="createdBy",
            type="uuid",
            ts_type="string | null",
            drizzle_type="uuid",
            drizzle_imports=("uuid",),
            zod_type="z.string().uuid().nullable()",
            nullable=True,
            foreign_key="users.id",
            ui=_metadata_ui("Created By", "reference"),
        ),
        BehaviorField(
            name="updated_by",
            camel_name="updatedBy",
            type="uuid",
            ts_type="string | null",
            drizzle_type="uuid",
            drizzle_imports=("uuid",),
            zod_type="z.string().uuid().nullable()",
            nullable=True,
            foreign_key="users.id",
            ui=_metadata_ui("Updated By", "reference"),
        ),
    ),
    drizzle_imports=("uuid",),
    methods=("applyUserTrackingOnCreate", "applyUserTrackingOnUpdate"),
    config_key="userTracking",
    options_model=UserTrackingOptions,
)


# ---------------------------------------------------------------------------
# temporal_validity
# ---------------------------------------------------------------------------

TEMPORAL_VALIDITY = BehaviorDefinition(
    name="temporal_validity",
    description="Adds valid_from, valid_to and is_active fields for time-bounded records",
    fields=(
        BehaviorField(
            name="valid_from",
            camel_name="validFrom",
            type="datetime",
            ts_type="Date | null",
            drizzle_type="timestamp",
            drizzle_imports=("timestamp",),
            zod_type="z.coerce.date().nullable()",
            nullable=True,
            ui=_metadata_ui("Valid From", "datetime"),
        ),
        BehaviorField(
            name="valid_to",
            camel_name="validTo",
            type="datetime",
            ts_type="Date | null",
            drizzle_type="timestamp",
            drizzle_imports=("timestamp",),
            zod_type="z.coerce.date().nullable()",
            nullable=True,
            ui=_metadata_ui("Valid To", "datetime"),
        ),
        BehaviorField(
            name="is_active",
            camel_name="isActive",
            type="boolean",
            ts_type="boolean",
            drizzle_type="boolean",
            drizzle_imports=("boolean",),
            zod_type="z.boolean()",
            nullable=False,
            default=True,
            ui=_metadata_ui("Is Active", "boolean"),
        ),
    ),
    drizzle_imports=("timestamp", "boolean"),
    # baseQuery is overridden to hide records outside their validity window.
    methods=("deactivate", "baseQuery"),
    config_key="temporalValidity",
)


BUILTIN_BEHAVIORS: tuple[BehaviorDefinition, ...] = (
    TIMESTAMPS,
    SOFT_DELETE,
    USER_TRACKING,
    TEMPORAL_VALIDITY,
)
