"""Directory snapshots of generator output.

A snapshot is a plain directory that mirrors the relative layout of the
configured output roots, with every file copied byte-for-byte.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from pathlib import Path

from .results import ComparisonReport, FileComparison, FileStatus


def capture_snapshot(
    root: str | Path,
    output_paths: Iterable[str],
    target_dir: str | Path,
) -> list[str]:
    """Copy every existing output root under *root* into *target_dir*.

    Any previous content of *target_dir* is removed first.  Output roots may
    be files or directories; roots that do not exist are skipped.

    Returns:
        The sorted relative paths of all files in the new snapshot.
    """
    source_root = Path(root)
    target = Path(target_dir)
    if target.exists():
        shutil.rmtree(target)
    target.mkdir(parents=True, exist_ok=True)

    for rel in output_paths:
        src = source_root / rel
        dest = target / rel
        if src.is_dir():
            shutil.copytree(src, dest, dirs_exist_ok=True)
        elif src.is_file():
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dest)

    return list_snapshot_files(target)


def list_snapshot_files(directory: str | Path) -> list[str]:
    """Return the sorted POSIX paths of every file under *directory*.

    A directory that does not exist yields an empty list.
    """
    base = Path(directory)
    if not base.is_dir():
        return []
    return sorted(
        p.relative_to(base).as_posix() for p in base.rglob("*") if p.is_file()
    )


def compare_snapshots(baseline_dir: str | Path, gen_dir: str | Path) -> ComparisonReport:
    """Diff two snapshots by file set and exact bytes.

    Every missing, extra and differing path is recorded; the comparison never
    stops at the first mismatch.
    """
    baseline_root = Path(baseline_dir)
    gen_root = Path(gen_dir)
    baseline_files = list_snapshot_files(baseline_root)
    gen_files = list_snapshot_files(gen_root)
    baseline_set = set(baseline_files)
    gen_set = set(gen_files)

    results: list[FileComparison] = []

    for rel in baseline_files:
        if rel not in gen_set:
            results.append(FileComparison(path=rel, status=FileStatus.MISSING))

    for rel in gen_files:
        if rel not in baseline_set:
            results.append(FileComparison(path=rel, status=FileStatus.EXTRA))

    for rel in baseline_files:
        if rel not in gen_set:
            continue
        same = (baseline_root / rel).read_bytes() == (gen_root / rel).read_bytes()
        status = FileStatus.MATCH if same else FileStatus.CONTENT_DIFFERS
        results.append(FileComparison(path=rel, status=status))

    return ComparisonReport(files=results)
