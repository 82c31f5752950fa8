"""
Purpose: Turn stored offset values into whole days, and days into labels.
What it does:
- offset_from_raw: wraps a raw column value (int, float, str, None) in the
  NumericOffset | TextOffset union at the data store boundary
- parse_offset_days: the text rules for "Same Day", "1 day", "2 days", "5"...
- normalize_offset: parse with a default for missing/unreadable values
- day_label: 0 -> "Same Day", 1 -> "1 day", 2 -> "2 days", N -> "N days"

Rule: pure functions, no I/O.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from .models import NumericOffset, OffsetValue, TextOffset

logger = logging.getLogger(__name__)

_FIRST_INTEGER = re.compile(r"\d+")
_ONE_DAY = re.compile(r"^1(?!\d)|\b1 day")
_TWO_DAYS = re.compile(r"^2(?!\d)|\b2 day")


def offset_from_raw(raw: Any) -> Optional[OffsetValue]:
    """
    Wrap a raw offset column value. Returns None for null/blank values.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        return TextOffset(str(raw))
    if isinstance(raw, int):
        return NumericOffset(raw)
    if isinstance(raw, float):
        if raw != raw:  # NaN, e.g. empty CSV cell
            return None
        return NumericOffset(int(raw))
    text = str(raw).strip()
    if not text:
        return None
    return TextOffset(text)


def parse_offset_days(value: Optional[OffsetValue]) -> Optional[int]:
    """
    Read a whole number of days out of an offset value.

    Text matching is case-insensitive:
      - contains "same", or is exactly "0"       -> 0
      - a leading standalone "1", or "1 day"     -> 1
      - a leading standalone "2", or "2 day(s)"  -> 2
      - otherwise the first embedded integer

    Returns None when nothing usable is found (missing value, negative number,
    text without digits).
    """
    if value is None:
        return None

    if isinstance(value, NumericOffset):
        return value.days if value.days >= 0 else None

    text = value.text.strip().lower()
    if "same" in text or text == "0":
        return 0
    if _ONE_DAY.search(text):
        return 1
    if _TWO_DAYS.search(text):
        return 2

    match = _FIRST_INTEGER.search(text)
    if match:
        return int(match.group())
    return None


def normalize_offset(value: Optional[OffsetValue], default: int = 0) -> int:
    """
    parse_offset_days with a fallback. Unreadable (non-null) values are logged.
    """
    days = parse_offset_days(value)
    if days is None:
        if value is not None:
            logger.warning("Unreadable delivery offset %r, using %d day(s)", value, default)
        return default
    return days


def day_label(offset_days: int) -> str:
    if offset_days == 0:
        return "Same Day"
    if offset_days == 1:
        return "1 day"
    return f"{offset_days} days"
