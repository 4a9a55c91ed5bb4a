"""Snapshot comparison results.

Pydantic v2 models for the outcome of diffing a freshly generated snapshot
against the committed baseline: one record per compared path, plus the
aggregate report.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, computed_field


class FileStatus(str, Enum):
    """Outcome of comparing one relative path."""
    MATCH = "match"
    MISSING = "missing"
    EXTRA = "extra"
    CONTENT_DIFFERS = "content_differs"


_FAILURE_LABELS: dict[FileStatus, str] = {
    FileStatus.MISSING: "Missing in generated",
    FileStatus.EXTRA: "Extra file in generated",
    FileStatus.CONTENT_DIFFERS: "Content differs",
}


class FileComparison(BaseModel):
    """Comparison outcome for one path relative to the snapshot roots."""

    path: str = Field(..., description="POSIX path relative to the snapshot root")
    status: FileStatus

    @computed_field  # type: ignore[misc]
    @property
    def passed(self) -> bool:
        return self.status == FileStatus.MATCH

    def detail_line(self) -> str:
        """One ``PASS``/``FAIL`` line for the printed report."""
        if self.passed:
            return f"PASS {self.path}"
        return f"FAIL {_FAILURE_LABELS[self.status]}: {self.path}"


class ComparisonReport(BaseModel):
    """All per-file outcomes of one baseline comparison."""

    files: list[FileComparison] = Field(default_factory=list)

    @computed_field  # type: ignore[misc]
    @property
    def passed(self) -> bool:
        """True when no path is missing, extra or different."""
        return all(f.passed for f in self.files)

    @property
    def failures(self) -> list[FileComparison]:
        return [f for f in self.files if not f.passed]

    def count(self, status: FileStatus) -> int:
        return sum(1 for f in self.files if f.status == status)

    def details(self) -> list[str]:
        return [f.detail_line() for f in self.files]

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1
