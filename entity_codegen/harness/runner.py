"""Baseline regression harness.

Proves that a change to the generator leaves its output byte-identical:

1. ``baseline`` -- snapshot the current (known-good) output roots.
2. ``generate`` -- re-run the external generator for every fixture, format
   the result, and snapshot it into a scratch directory.
3. ``compare``  -- diff scratch against baseline, file by file.
4. ``full``     -- ``generate`` then ``compare``.

The harness owns its baseline and scratch directories for the duration of a
run.  Concurrent runs against the same directories are not supported.
"""

from __future__ import annotations

import shutil
import time
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from rich.markup import escape

from ..config import CodegenConfig
from ..utils import (
    console,
    format_duration,
    print_error,
    print_header,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)
from .results import ComparisonReport, FileStatus
from .snapshot import capture_snapshot, compare_snapshots

FIXTURE_PLACEHOLDER = "{fixture}"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class HarnessError(Exception):
    """Raised when the external generator fails for a fixture."""

    def __init__(
        self,
        message: str,
        *,
        fixture: Optional[Path] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        self.fixture = fixture
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class HarnessConfig(BaseModel):
    """Absolute locations and commands for one harness run."""

    root: Path = Field(..., description="Project root; commands run here")
    fixtures_dir: Path
    baseline_dir: Path
    gen_dir: Path
    output_paths: list[str] = Field(default_factory=list, description="Output roots relative to root")
    generate_command: str = Field(..., description="Command template containing {fixture}")
    format_command: Optional[str] = None
    fixture_pattern: str = "*.yaml"
    env: dict[str, str] = Field(default_factory=dict, description="Merged over os.environ for commands")

    @classmethod
    def from_codegen_config(cls, root: str | Path, config: CodegenConfig) -> "HarnessConfig":
        """Build the harness config from the ``harness`` and ``paths`` sections."""
        base = Path(root)
        settings = config.harness
        output_paths = settings.output_paths
        if output_paths is None:
            output_paths = config.paths.output_roots()
        return cls(
            root=base,
            fixtures_dir=base / settings.fixtures_dir,
            baseline_dir=base / settings.baseline_dir,
            gen_dir=base / settings.gen_dir,
            output_paths=list(output_paths),
            generate_command=settings.generate_command,
            format_command=settings.format_command,
            fixture_pattern=settings.fixture_pattern,
            env=dict(settings.env),
        )


# ---------------------------------------------------------------------------
# Harness
# ---------------------------------------------------------------------------


class BaselineHarness:
    """Golden-file regression harness for generator output.

    Parameters
    ----------
    config:
        Locations of the fixtures, the baseline and scratch snapshots, the
        output roots to capture, and the generator/format commands.
    """

    def __init__(self, config: HarnessConfig) -> None:
        self.config = config

    # -- Public API ----------------------------------------------------------

    async def baseline(self) -> list[str]:
        """Capture the current output roots as the new baseline."""
        print_header("Baseline")
        files = self._capture(self.config.baseline_dir)
        print_success(f"Baseline captured: {len(files)} files")
        return files

    async def generate(self) -> list[Path]:
        """Regenerate every fixture and snapshot the result into the scratch dir.

        Raises:
            HarnessError: On the first fixture whose generation fails.  The
                remaining fixtures are not attempted.
        """
        print_header("Generate", color="bright_green")
        gen_dir = self.config.gen_dir
        if gen_dir.exists():
            shutil.rmtree(gen_dir)
        gen_dir.mkdir(parents=True, exist_ok=True)

        fixtures = self.fixtures()
        if not fixtures:
            print_warning(f"No fixtures matching {self.config.fixture_pattern} in {self.config.fixtures_dir}")

        start = time.monotonic()
        for fixture in fixtures:
            await self._generate_fixture(fixture)
        console.print(
            f"Generated {len(fixtures)} fixture(s) in {format_duration(time.monotonic() - start)}"
        )

        await self._format()
        self._capture(gen_dir)
        return fixtures

    async def compare(self) -> ComparisonReport:
        """Diff the scratch snapshot against the baseline and print the result."""
        print_header("Compare", color="bright_magenta")
        report = compare_snapshots(self.config.baseline_dir, self.config.gen_dir)
        self._print_report(report)
        return report

    async def full(self) -> tuple[ComparisonReport, int]:
        """Generate then compare; return the report and a process exit code."""
        await self.generate()
        report = await self.compare()
        return report, report.exit_code

    def fixtures(self) -> list[Path]:
        """Fixture definition files, in the order they are generated."""
        fixtures_dir = self.config.fixtures_dir
        if not fixtures_dir.is_dir():
            return []
        return sorted(
            p for p in fixtures_dir.glob(self.config.fixture_pattern) if p.is_file()
        )

    # -- Internal ------------------------------------------------------------

    def _capture(self, target: Path) -> list[str]:
        console.print(f"Capturing output state to {escape(str(target))}")
        return capture_snapshot(self.config.root, self.config.output_paths, target)

    async def _generate_fixture(self, fixture: Path) -> None:
        command = self.config.generate_command.replace(FIXTURE_PLACEHOLDER, str(fixture))
        console.print(f"  Generating: {escape(fixture.name)}")
        returncode, _stdout, stderr = await run_command(
            command, cwd=self.config.root, env=self.config.env or None
        )
        if returncode != 0:
            print_error(f"  Failed: {fixture.name}")
            raise HarnessError(
                f"Generation failed for fixture {fixture.name} (exit {returncode}): {stderr}",
                fixture=fixture,
                returncode=returncode,
                stderr=stderr,
            )

    async def _format(self) -> None:
        """Run the formatter; a failure only produces a warning."""
        command = self.config.format_command
        if not command:
            return
        console.print("Formatting generated files...")
        returncode, _stdout, stderr = await run_command(
            command, cwd=self.config.root, env=self.config.env or None
        )
        if returncode != 0:
            print_warning(f"  (format completed with warnings, exit {returncode})")
            if stderr:
                console.print(escape(stderr), style="dim")

    def _print_report(self, report: ComparisonReport) -> None:
        for item in report.files:
            line = escape(item.detail_line())
            console.print(line, style="green" if item.passed else "red")

        print_summary_table(
            {
                "Matching": str(report.count(FileStatus.MATCH)),
                "Missing": str(report.count(FileStatus.MISSING)),
                "Extra": str(report.count(FileStatus.EXTRA)),
                "Content differs": str(report.count(FileStatus.CONTENT_DIFFERS)),
            },
            title="Baseline comparison",
        )
        if report.passed:
            print_success("All files match the baseline.")
        else:
            print_error(f"{len(report.failures)} file(s) differ from the baseline.")
