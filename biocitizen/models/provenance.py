from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Provenance:
    """Where a set of indices came from: file, chosen columns, rows analyzed."""
    source_name: str
    species_column: str
    abundance_column: str | None  # None = presence-only counting
    row_count: int  # rows in the uploaded table, including skipped ones
