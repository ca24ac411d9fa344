from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""TableData model: one uploaded observation table.

A table is produced once per upload event (CSV file or AI-extracted JSON) and
is not modified afterwards. Column names come from the first record; later
records may miss fields, which downstream code treats as absent values.
"""

__all__ = [
    "Record",
    "TableData",
]

Record = dict[str, Any]

SOURCE_CSV = "csv"
SOURCE_IMAGE = "image"


@dataclass(frozen=True)
class TableData:
    """Ordered records of one upload plus their column names."""
    source_name: str  # Uploaded file name, shown in prompts and summaries
    columns: list[str]  # Ordered column names (first record's keys)
    rows: list[Record] = field(default_factory=list)
    source_kind: str = SOURCE_CSV  # "csv" or "image"

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @staticmethod
    def from_records(source_name: str, records: list[Record], source_kind: str = SOURCE_CSV) -> TableData:
        """Build a table whose columns are the first record's keys."""
        columns = [str(k) for k in records[0].keys()] if records else []
        return TableData(
            source_name=source_name,
            columns=columns,
            rows=list(records),
            source_kind=source_kind,
        )
