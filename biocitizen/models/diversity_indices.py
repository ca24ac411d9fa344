from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""DiversityIndices value object.

Holds full-precision values; rounding only happens at presentation time
(``as_dict`` or the prompt bridge).
"""

__all__ = [
    "DiversityIndices",
]


@dataclass(frozen=True)
class DiversityIndices:
    """Richness, total individuals, Shannon H' and Simpson 1-D for one calculation."""
    richness: int  # S, number of distinct species
    total_individuals: float  # N, sum of abundances
    shannon: float  # H' = -sum(p_i ln p_i)
    simpson_diversity: float  # 1 - D, D = sum(p_i^2)

    @property
    def simpson_concentration(self) -> float:
        """Simpson's D (probability two individuals belong to the same species)."""
        return 1.0 - self.simpson_diversity

    def as_dict(self, decimals: int | None = None) -> dict[str, Any]:
        """Plain dict for display or JSON; ``decimals`` rounds the real-valued fields."""
        def _r(v: float) -> float:
            return round(v, decimals) if decimals is not None else v

        return {
            "richness": self.richness,
            "total_individuals": _r(self.total_individuals),
            "shannon": _r(self.shannon),
            "simpson_diversity": _r(self.simpson_diversity),
        }
