"""entity-codegen -- Baseline regression harness.

Captures generator output as a golden snapshot and verifies that later runs
reproduce it byte for byte.

Public API
----------
.. autoclass:: BaselineHarness
.. autoclass:: HarnessConfig
.. autoclass:: ComparisonReport
.. autofunction:: capture_snapshot
.. autofunction:: compare_snapshots
"""

from .results import ComparisonReport, FileComparison, FileStatus
from .runner import BaselineHarness, HarnessConfig, HarnessError
from .snapshot import capture_snapshot, compare_snapshots, list_snapshot_files

__all__ = [
    # Runner
    "BaselineHarness",
    "HarnessConfig",
    "HarnessError",
    # Snapshots
    "capture_snapshot",
    "compare_snapshots",
    "list_snapshot_files",
    # Results
    "ComparisonReport",
    "FileComparison",
    "FileStatus",
]
