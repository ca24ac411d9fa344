from __future__ import annotations

from dataclasses import dataclass, field

from .diversity_indices import DiversityIndices

"""Batch run result models for the ``analyze`` command.

One FileStat per input file; AnalysisRunResult aggregates them for the
SUMMARY line and the exit code.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file analysis outcome."""
    file_name: str
    status: str  # success/failed
    rows: int  # rows in the table (0 if unreadable)
    indices: DiversityIndices | None = None
    error: str | None = None  # user-facing failure reason


@dataclass(frozen=True)
class AnalysisRunResult:
    """Aggregated outcome of one CLI run over several files."""
    success_files: int
    failed_files: int
    total_rows: int  # rows of successfully analyzed tables
    file_stats: list[FileStat] = field(default_factory=list)
