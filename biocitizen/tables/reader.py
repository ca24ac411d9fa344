from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.table_data import SOURCE_CSV, SOURCE_IMAGE, Record, TableData

"""Table sources: CSV files and AI-extracted JSON.

Both sources end up as TableData: ordered records keyed by column name, the
first row (CSV) or first object (JSON) defining the columns. CSV cells are
read as strings; type handling happens later in the normalizer.
"""

__all__ = [
    "TableReadError",
    "read_csv_table",
    "records_from_json",
    "export_table_json",
    "read_table",
]

# ```json ... ``` wrappers the vision model adds despite being told not to
_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


class TableReadError(Exception):
    """Raised when a table source cannot be turned into records."""


def _clean_cell(val: Any, null_sentinels: set[str] | None) -> Any:
    if pd.isna(val):
        return None
    if isinstance(val, str):
        stripped = val.strip()
        if stripped == "":
            return None
        if null_sentinels and stripped.upper() in null_sentinels:
            return None
    return val


def read_csv_table(path: Path, null_sentinels: set[str] | None = None) -> TableData:
    """Read a CSV file whose first row is the header.

    Parameters
    ----------
    path: CSV file path
    null_sentinels: upper-cased strings treated as missing cells (e.g. {"NA", "N/A"})

    Raises
    ------
    TableReadError: file missing, unparseable, or without data rows
    """
    if not path.exists():
        raise TableReadError(f"file not found: {path}")
    try:
        # Keep "NA"/"None" etc. as text: species names are never coerced
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
    except pd.errors.EmptyDataError as e:
        raise TableReadError(f"CSV file is empty: {path.name}") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise TableReadError(f"error parsing CSV {path.name}: {e}") from e

    columns = [str(c).strip() for c in df.columns]
    rows: list[Record] = []
    for raw in df.itertuples(index=False, name=None):
        row = {col: _clean_cell(val, null_sentinels) for col, val in zip(columns, raw, strict=False)}
        # Lines made only of delimiters
        if all(v is None for v in row.values()):
            continue
        rows.append(row)

    if not rows:
        raise TableReadError(f"CSV file is empty or could not be parsed: {path.name}")
    return TableData(source_name=path.name, columns=columns, rows=rows, source_kind=SOURCE_CSV)


def records_from_json(text: str, source_name: str) -> TableData:
    """Parse model output that should be a JSON array of flat objects.

    Markdown code fences are removed before parsing.

    Raises:
        TableReadError: not valid JSON, not a list of objects, or empty
    """
    cleaned = _CODE_FENCE.sub("", text).strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise TableReadError("the AI failed to return valid JSON; the table might be unclear") from e

    if not isinstance(parsed, list) or not parsed:
        raise TableReadError("AI returned empty or invalid data; please ensure the image is clear")
    if not all(isinstance(item, dict) for item in parsed):
        raise TableReadError("AI returned a JSON array that does not hold objects")

    rows: list[Record] = [{str(k): v for k, v in item.items()} for item in parsed]
    return TableData.from_records(source_name, rows, source_kind=SOURCE_IMAGE)


def read_table(path: Path, null_sentinels: set[str] | None = None) -> TableData:
    """Read a saved table: ``.json`` record files (as written by ``extract``)
    or CSV for anything else.

    Raises:
        TableReadError: file missing or unreadable as its format
    """
    if path.suffix.lower() != ".json":
        return read_csv_table(path, null_sentinels=null_sentinels)
    if not path.exists():
        raise TableReadError(f"file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TableReadError(f"error reading {path.name}: {e}") from e
    return records_from_json(text, path.name)


def export_table_json(table: TableData) -> str:
    """Pretty-printed JSON array of the table's records (download artifact)."""
    return json.dumps(table.rows, indent=2, ensure_ascii=False)
