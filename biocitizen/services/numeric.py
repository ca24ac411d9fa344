from __future__ import annotations

import math
import re
from typing import Any

"""Shared parsing and formatting helpers for raw table cells.

Cell values reach the normalizer from two very different sources: pandas
(CSV, all strings) and JSON produced by a vision model (strings, numbers,
booleans, nulls). These helpers give both the same treatment.
"""

__all__ = [
    "is_missing",
    "clean_label",
    "parse_abundance",
    "format_number",
]

# Leading decimal number, as a lenient number parser would read it:
# "12", "-3", "4.5", ".5", "1e3", "12 birds" -> 12
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def is_missing(value: Any) -> bool:
    """True for None, float NaN, and strings that are empty after trimming."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


def clean_label(value: Any) -> str | None:
    """Return the trimmed text form of a species cell, or None if unusable.

    Integral floats are rendered without the trailing ``.0`` so that a JSON
    ``3`` and a CSV ``"3"`` name the same species.
    """
    if is_missing(value):
        return None
    if isinstance(value, float) and value.is_integer():
        text = str(int(value))
    else:
        text = str(value)
    text = text.strip()
    return text or None


def parse_abundance(value: Any) -> float | None:
    """Parse a raw abundance cell into a positive finite number.

    Thousands-separator commas are stripped and the leading decimal number is
    read (``"1,200"`` -> 1200.0, ``"7 adults"`` -> 7.0). Returns None when the
    cell is missing, not numeric, non-finite, or not strictly positive.
    """
    if is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).replace(",", "").strip()
        m = _LEADING_NUMBER.match(text)
        if m is None:
            return None
        try:
            number = float(m.group(0))
        except ValueError:  # pragma: no cover - regex only admits float syntax
            return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def format_number(value: float, decimals: int = 4) -> str:
    """Round to ``decimals`` places; integral results print without decimals.

    Examples:
        >>> format_number(10.0)
        '10'
        >>> format_number(2.333333)
        '2.3333'
    """
    rounded = round(value, decimals)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.{decimals}f}".rstrip("0").rstrip(".")
