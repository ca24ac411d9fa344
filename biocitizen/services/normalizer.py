from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..errors import EmptyResultError, ValidationError
from ..models.normalization import NormalizationReport, SpeciesCountMap
from ..models.table_data import Record
from .numeric import clean_label, is_missing, parse_abundance

"""Table normalizer: raw records -> species abundance counts.

Missing-data policy:
- A row whose species cell is absent, empty or whitespace-only is skipped and
  contributes to neither richness nor total.
- Without a usable abundance column every row counts as one individual.
- A malformed, zero or negative abundance counts as 1 instead of dropping a
  confirmed observation. ``strict_abundance=True`` turns that into an error.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "normalize",
    "normalize_report",
]


def _table_columns(records: Sequence[Record], columns: Iterable[str] | None) -> list[str]:
    if columns is not None:
        return list(columns)
    if not records:
        return []
    return [str(k) for k in records[0].keys()]


def normalize_report(
    records: Sequence[Record],
    species_column: str,
    abundance_column: str | None = None,
    *,
    columns: Iterable[str] | None = None,
    strict_abundance: bool = False,
) -> NormalizationReport:
    """Reduce ``records`` to a species -> abundance map with row bookkeeping.

    Args:
        records: Table rows (column name -> raw value)
        species_column: Column holding species labels (required)
        abundance_column: Optional column holding counts
        columns: Table column names; defaults to the first record's keys
        strict_abundance: Raise instead of counting a malformed abundance as 1

    Returns:
        NormalizationReport whose ``counts`` is never empty

    Raises:
        ValidationError: species column empty or not a table column, or a
            malformed abundance in strict mode
        EmptyResultError: no row had a usable species value
    """
    if not species_column or not species_column.strip():
        raise ValidationError("missing species column")

    table_columns = _table_columns(records, columns)
    if table_columns and species_column not in table_columns:
        raise ValidationError(f"unknown species column: '{species_column}'")

    use_abundance = bool(abundance_column) and abundance_column in table_columns
    if abundance_column and not use_abundance:
        logger.warning(f"abundance column '{abundance_column}' not in table -> presence-only counting")

    counts: SpeciesCountMap = {}
    skipped: list[int] = []
    coerced: list[int] = []

    for row_number, row in enumerate(records, start=1):
        species = clean_label(row.get(species_column))
        if species is None:
            skipped.append(row_number)
            continue

        increment = 1.0
        if use_abundance:
            raw = row.get(abundance_column)  # type: ignore[arg-type]
            parsed = parse_abundance(raw)
            if parsed is None:
                if strict_abundance:
                    raise ValidationError(
                        f"row {row_number}: invalid abundance {raw!r} in column '{abundance_column}'"
                    )
                # missing cells count as 1 too
                if not is_missing(raw):
                    logger.debug(f"row {row_number}: abundance {raw!r} -> 1")
                coerced.append(row_number)
            else:
                increment = parsed

        counts[species] = counts.get(species, 0.0) + increment

    logger.debug(
        f"normalize: rows={len(records)} skipped={len(skipped)} coerced={len(coerced)} species={len(counts)}"
    )

    if not counts:
        raise EmptyResultError()

    return NormalizationReport(
        counts=counts,
        rows_seen=len(records),
        skipped_rows=skipped,
        coerced_rows=coerced,
        used_abundance=use_abundance,
    )


def normalize(
    records: Sequence[Record],
    species_column: str,
    abundance_column: str | None = None,
    *,
    columns: Iterable[str] | None = None,
    strict_abundance: bool = False,
) -> SpeciesCountMap:
    """Same as :func:`normalize_report` but returns only the count map."""
    return normalize_report(
        records,
        species_column,
        abundance_column,
        columns=columns,
        strict_abundance=strict_abundance,
    ).counts
