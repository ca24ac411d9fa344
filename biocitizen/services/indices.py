from __future__ import annotations

import math
import numbers
from collections.abc import Mapping

from ..errors import InvariantViolation
from ..models.diversity_indices import DiversityIndices

"""Diversity index calculator.

Computes richness (S), total individuals (N), Shannon's H' and Simpson's
index of diversity (1 - D) from a species -> abundance map. Values are
returned at full double precision.
"""

__all__ = [
    "compute",
    "proportions",
]


def _check_counts(count_map: Mapping[str, float]) -> None:
    if not count_map:
        raise InvariantViolation("count map is empty")
    for species, count in count_map.items():
        if isinstance(count, bool) or not isinstance(count, numbers.Real):
            raise InvariantViolation(f"count for '{species}' is not a number: {count!r}")
        if not math.isfinite(count) or count <= 0:
            raise InvariantViolation(f"count for '{species}' must be finite and > 0: {count!r}")


def proportions(count_map: Mapping[str, float]) -> dict[str, float]:
    """Relative abundance p_i = count_i / N for every species.

    Raises:
        InvariantViolation: empty map or non-positive count
    """
    _check_counts(count_map)
    # Sorted keys fix the summation order so repeated calls are bit-identical
    keys = sorted(count_map)
    total = math.fsum(count_map[k] for k in keys)
    return {k: float(count_map[k]) / total for k in keys}


def compute(count_map: Mapping[str, float]) -> DiversityIndices:
    """Compute the diversity indices for a non-empty count map.

    Raises:
        InvariantViolation: the map is empty or holds a non-positive count.
            The normalizer never produces such a map.
    """
    p = proportions(count_map)
    total = math.fsum(count_map[k] for k in p)

    shannon = 0.0
    concentration = 0.0
    for pi in p.values():
        if pi > 0:
            shannon -= pi * math.log(pi)
        concentration += pi * pi

    return DiversityIndices(
        richness=len(p),
        total_individuals=total,
        shannon=shannon,
        simpson_diversity=1.0 - concentration,
    )
