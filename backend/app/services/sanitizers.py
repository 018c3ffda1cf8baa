"""
Value sanitizers for raw CSV fields.

Every CSV cell arrives as a string (or ``None`` for short rows). These helpers
turn placeholders into real nulls and coerce numerics/dates without ever
failing a row: malformed values degrade to ``None`` or pass through.
"""
import re
from typing import Any, Optional

NULL_LITERALS = ("NULL", "null")

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def normalize_empty(value: Any) -> Any:
    """Return ``None`` for missing, blank, or literal ``NULL``/``null`` values."""
    if value is None:
        return None
    if isinstance(value, str):
        if value.strip() == "":
            return None
        if value in NULL_LITERALS:
            return None
    return value


def normalize_int(value: Any) -> Optional[int]:
    """Parse the leading integer of a value, ``parseInt``-style.

    ``"007"`` -> 7, ``"12 beds"`` -> 12, ``"3.9"`` -> 3, ``"abc"`` -> None.
    """
    value = normalize_empty(value)
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def normalize_date(value: Any) -> Any:
    """Rewrite ``M/D/YYYY`` as ``YYYY-MM-DD``; anything else passes through.

    Slash-separated dates are assumed to be US month/day/year. No calendar
    validation happens here.
    """
    value = normalize_empty(value)
    if value is None:
        return None
    text = str(value)
    if "/" not in text:
        return value
    parts = text.split("/")
    if len(parts) < 3:
        return value
    month, day, year = parts[0], parts[1], parts[2]
    if not (month and day and year):
        return value
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def normalize_time(value: Any) -> Any:
    """Times are stored as given; only placeholders become ``None``."""
    return normalize_empty(value)
