from __future__ import annotations

from dataclasses import dataclass, field

"""Normalizer output models.

SpeciesCountMap keys are trimmed, case-sensitive species labels; values are
strictly positive accumulated abundances. NormalizationReport carries the map
together with the per-row bookkeeping the UI layer shows next to the result.
"""

__all__ = [
    "SpeciesCountMap",
    "NormalizationReport",
]

SpeciesCountMap = dict[str, float]


@dataclass(frozen=True)
class NormalizationReport:
    """Result of one normalization pass over a record sequence."""
    counts: SpeciesCountMap
    rows_seen: int
    skipped_rows: list[int] = field(default_factory=list)  # 1-based, unusable species value
    coerced_rows: list[int] = field(default_factory=list)  # 1-based, malformed abundance counted as 1
    used_abundance: bool = False  # False = presence-only counting

    @property
    def rows_used(self) -> int:
        return self.rows_seen - len(self.skipped_rows)
