"""Command-line entry point for the baseline regression harness."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Optional, Sequence

from rich.markup import escape

from ..config import load_codegen_config
from ..utils import console, print_error
from .runner import BaselineHarness, HarnessConfig, HarnessError

COMMANDS = ("baseline", "generate", "compare", "full")

USAGE = """\
Codegen regression harness

Usage:
  python -m entity_codegen.harness baseline    Capture baseline output
  python -m entity_codegen.harness generate    Generate fixtures into the scratch dir
  python -m entity_codegen.harness compare     Compare scratch output to the baseline
  python -m entity_codegen.harness full        Generate then compare
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m entity_codegen.harness",
        description="Golden-file regression harness for generated entity code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=USAGE,
    )
    parser.add_argument("command", nargs="?", default=None, help=" | ".join(COMMANDS))
    parser.add_argument(
        "--root",
        default=".",
        help="Project root containing codegen.config.yaml (default: current directory)",
    )
    return parser


async def _run(harness: BaselineHarness, command: str) -> int:
    if command == "baseline":
        await harness.baseline()
        return 0
    if command == "generate":
        await harness.generate()
        return 0
    if command == "compare":
        report = await harness.compare()
        return report.exit_code
    _report, exit_code = await harness.full()
    return exit_code


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one harness command and return the process exit code."""
    args = _build_parser().parse_args(argv)
    if args.command not in COMMANDS:
        console.print(USAGE)
        return 1

    root = Path(args.root).resolve()
    loaded = load_codegen_config(root)
    harness = BaselineHarness(HarnessConfig.from_codegen_config(root, loaded.config))

    try:
        return asyncio.run(_run(harness, args.command))
    except HarnessError as exc:
        print_error(f"Error: {escape(str(exc))}")
        return 1
