from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ..errors import ValidationError

"""ColumnSelection model: the user's choice of species / abundance columns."""

__all__ = [
    "ColumnSelection",
]


@dataclass(frozen=True)
class ColumnSelection:
    """Species column (required) plus an optional abundance column.

    An empty abundance column means presence-only counting (one row = one
    individual).
    """
    species_column: str
    abundance_column: str | None = None

    def __post_init__(self) -> None:
        # "" and None mean the same thing for the optional column
        if self.abundance_column is not None and not self.abundance_column.strip():
            object.__setattr__(self, "abundance_column", None)

    def validate(self, columns: Iterable[str]) -> None:
        """Reject a selection that does not match the table's columns.

        Raises:
            ValidationError: species column empty or unknown, or abundance
                column given but unknown
        """
        known = set(columns)
        if not self.species_column or not self.species_column.strip():
            raise ValidationError("missing species column")
        if self.species_column not in known:
            raise ValidationError(f"unknown species column: '{self.species_column}'")
        if self.abundance_column is not None and self.abundance_column not in known:
            raise ValidationError(f"unknown abundance column: '{self.abundance_column}'")
