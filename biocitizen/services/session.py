from __future__ import annotations

import logging

from ..errors import ValidationError
from ..models.column_selection import ColumnSelection
from ..models.diversity_indices import DiversityIndices
from ..models.normalization import NormalizationReport
from ..models.provenance import Provenance
from ..models.table_data import TableData
from .indices import compute
from .normalizer import normalize_report
from .prompt_bridge import ChatHandoff, to_prompt_text

"""Analysis session: the state one user holds between button clicks.

The normalizer, calculator and bridge are pure functions. This class owns the
three pieces of state around them (current table, current column selection,
current indices) and recomputes only when explicitly asked:

- load_table()      -> replaces the table, clears selection and indices
- select_columns()  -> validates and stores the selection, clears indices
- calculate()       -> normalize + compute from scratch
- handoff()         -> prompt text for the chat, requires a calculation
"""

logger = logging.getLogger(__name__)

__all__ = [
    "AnalysisSession",
]


class AnalysisSession:
    """Holds the current table, column selection and indices."""

    def __init__(self, *, strict_abundance: bool = False, decimals: int = 4) -> None:
        self.strict_abundance = strict_abundance
        self.decimals = decimals
        self.table: TableData | None = None
        self.selection: ColumnSelection | None = None
        self.report: NormalizationReport | None = None
        self.indices: DiversityIndices | None = None

    def load_table(self, table: TableData) -> None:
        self.table = table
        self.selection = None
        self._clear_result()
        logger.info(f"loaded {table.source_name}: rows={table.row_count} columns={table.columns}")

    def select_columns(self, species_column: str, abundance_column: str | None = None) -> ColumnSelection:
        """Validate and store a column selection against the loaded table.

        Raises:
            ValidationError: no table loaded, or the columns do not belong to it
        """
        table = self._require_table()
        selection = ColumnSelection(species_column=species_column, abundance_column=abundance_column)
        selection.validate(table.columns)
        self.selection = selection
        self._clear_result()
        return selection

    def calculate(self) -> DiversityIndices:
        """Recompute counts and indices for the current table and selection.

        A failure leaves the table and selection untouched so the user can
        pick different columns and try again.

        Raises:
            ValidationError: nothing loaded/selected, or strict-mode abundance error
            EmptyResultError: no usable species value in the selected column
        """
        table = self._require_table()
        if self.selection is None:
            raise ValidationError("missing species column")
        self._clear_result()

        report = normalize_report(
            table.rows,
            self.selection.species_column,
            self.selection.abundance_column,
            columns=table.columns,
            strict_abundance=self.strict_abundance,
        )
        indices = compute(report.counts)
        self.report = report
        self.indices = indices
        return indices

    def provenance(self) -> Provenance:
        table = self._require_table()
        if self.selection is None:
            raise ValidationError("missing species column")
        return Provenance(
            source_name=table.source_name,
            species_column=self.selection.species_column,
            abundance_column=self.selection.abundance_column,
            row_count=table.row_count,
        )

    def handoff(self) -> ChatHandoff:
        """Build the chat seed for the last successful calculation."""
        if self.indices is None:
            raise ValidationError("calculate the indices before sending them to the analyst")
        text = to_prompt_text(self.indices, self.provenance(), decimals=self.decimals)
        return ChatHandoff(seed_text=text)

    def _require_table(self) -> TableData:
        if self.table is None:
            raise ValidationError("no table loaded")
        return self.table

    def _clear_result(self) -> None:
        self.report = None
        self.indices = None
