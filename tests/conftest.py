"""Shared pytest fixtures for the entity-codegen test suite.

Provides reusable fixtures for:
- Substitute behavior registries (dependency and conflict scenarios)
- Temporary project directories with a codegen.config.yaml
- Sample entity definition files
- A self-contained harness project with a tiny Python "generator"
"""

from __future__ import annotations

import shlex
import sys
import textwrap
from pathlib import Path

import pytest
import yaml

from entity_codegen.behaviors import (
    BehaviorDefinition,
    BehaviorField,
    BehaviorRegistry,
    SOFT_DELETE,
    TEMPORAL_VALIDITY,
    TIMESTAMPS,
    USER_TRACKING,
)


# ---------------------------------------------------------------------------
# Behavior registries
# ---------------------------------------------------------------------------

def make_field(name: str, drizzle_type: str = "text", imports: tuple[str, ...] = ("text",)) -> BehaviorField:
    """Build a minimal behavior field for test registries."""
    camel = name.split("_")[0] + "".join(p.capitalize() for p in name.split("_")[1:])
    return BehaviorField(
        name=name,
        camel_name=camel,
        type="string",
        ts_type="string",
        drizzle_type=drizzle_type,
        drizzle_imports=imports,
        zod_type="z.string()",
    )


def make_behavior(
    name: str,
    *,
    fields: tuple[BehaviorField, ...] = (),
    imports: tuple[str, ...] = (),
    requires: tuple[str, ...] = (),
    conflicts: tuple[str, ...] = (),
    methods: tuple[str, ...] = (),
) -> BehaviorDefinition:
    """Build a behavior definition for test registries."""
    return BehaviorDefinition(
        name=name,
        description=f"Test behavior {name}",
        fields=fields,
        drizzle_imports=imports,
        requires=requires,
        conflicts=conflicts,
        methods=methods,
        config_key=name,
    )


@pytest.fixture
def behavior_factory():
    """The :func:`make_behavior` builder, for tests that assemble their own registry."""
    return make_behavior


@pytest.fixture
def field_factory():
    """The :func:`make_field` builder."""
    return make_field


@pytest.fixture
def rules_registry() -> BehaviorRegistry:
    """Registry with a dependency (X requires Y) and a one-sided conflict (X conflicts Z)."""
    return BehaviorRegistry([
        make_behavior("x", requires=("y",), conflicts=("z",), fields=(make_field("x_col"),)),
        make_behavior("y", fields=(make_field("y_col"),)),
        make_behavior("z", fields=(make_field("z_col"),)),
    ])


@pytest.fixture
def shadow_registry() -> BehaviorRegistry:
    """Registry where two behaviors both contribute a field named ``foo``."""
    return BehaviorRegistry([
        make_behavior(
            "a",
            fields=(make_field("foo", "varchar", ("varchar",)), make_field("a_only")),
            imports=("varchar", "text"),
            methods=("shared", "aOnly"),
        ),
        make_behavior(
            "b",
            fields=(make_field("foo", "integer", ("integer",)), make_field("b_only")),
            imports=("integer", "text"),
            methods=("shared", "bOnly"),
        ),
    ])


@pytest.fixture
def builtin_registry() -> BehaviorRegistry:
    """A fresh registry holding the built-in behaviors."""
    return BehaviorRegistry([TIMESTAMPS, SOFT_DELETE, USER_TRACKING, TEMPORAL_VALIDITY])


# ---------------------------------------------------------------------------
# Project directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary project root (auto-cleanup)."""
    project_dir = tmp_path / "project"
    project_dir.mkdir()
    yield project_dir


@pytest.fixture
def write_config(tmp_project_dir: Path):
    """Write a ``codegen.config.yaml`` into the temporary project root."""

    def _write(content: str) -> Path:
        path = tmp_project_dir / "codegen.config.yaml"
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def opportunity_yaml(tmp_path: Path) -> Path:
    """Entity definition for ``opportunity`` with timestamps and soft delete."""
    path = tmp_path / "opportunity.yaml"
    path.write_text(
        textwrap.dedent(
            """\
            entity:
              name: opportunity
              plural: opportunities
              table: opportunities
            behaviors:
              - timestamps
              - name: soft_delete
                options:
                  column: deleted_at
            fields:
              title:
                type: string
            """
        ),
        encoding="utf-8",
    )
    return path


# ---------------------------------------------------------------------------
# Harness project
# ---------------------------------------------------------------------------

_RENDER_SCRIPT = '''\
"""Stand-in generator: writes one TypeScript file per fixture."""
import pathlib
import sys

fixture = pathlib.Path(sys.argv[1])
name = fixture.stem
if name.startswith("broken"):
    sys.stderr.write(f"cannot render {name}\\n")
    sys.exit(3)
out = pathlib.Path("app/frontend/src/generated") / f"{name}.ts"
out.parent.mkdir(parents=True, exist_ok=True)
out.write_text(f"// generated from {fixture.name}\\nexport const {name} = 1;\\n", encoding="utf-8")
log = pathlib.Path("render.log")
with log.open("a", encoding="utf-8") as fh:
    fh.write(name + "\\n")
'''


@pytest.fixture
def harness_project(tmp_project_dir: Path) -> Path:
    """Project root with fixtures, a render script and a matching config.

    The configured generate command runs the render script with the current
    interpreter, so the harness exercises a real subprocess.
    """
    root = tmp_project_dir
    (root / "render.py").write_text(_RENDER_SCRIPT, encoding="utf-8")
    fixtures = root / "codegen" / "test" / "fixtures"
    fixtures.mkdir(parents=True)
    (fixtures / "account.yaml").write_text("entity:\n  name: account\n", encoding="utf-8")
    (fixtures / "opportunity.yaml").write_text("entity:\n  name: opportunity\n", encoding="utf-8")

    python = shlex.quote(sys.executable)
    config = {
        "harness": {
            "generate_command": f'{python} render.py "{{fixture}}"',
            "format_command": None,
            "output_paths": ["app/frontend/src/generated"],
        }
    }
    (root / "codegen.config.yaml").write_text(yaml.safe_dump(config), encoding="utf-8")
    return root
