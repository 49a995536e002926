"""
Duration Parser

Converts a stored processing duration into seconds. The transaction tables
keep `process_time` as text in `HH:MM:SS` or `HH:MM:SS.mmm` form, but some
rows carry a bare number of seconds and some are empty.

Parsing is deliberately lenient:
- Empty or missing values read as 0
- Each colon-separated field is read by its leading numeric prefix, and a
  field that has none reads as 0 (`"1:xx:05"` is 3605)
- Fields are not range checked, so `"1:90:00"` is 9000 seconds
- Negative fields are combined arithmetically
- Infinite or NaN results (`1e400`, a NUMERIC `Infinity`) read as 0

The parser never raises; a value it cannot read is simply 0 seconds.
"""

import math
import re
from datetime import time, timedelta
from decimal import Decimal
from typing import Any, Optional


# Leading integer prefix, e.g. " 12abc" -> 12
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")

# Leading float prefix, e.g. "30.5s" -> 30.5, ".5" -> 0.5, "1e3" -> 1000
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _parse_int_prefix(text: str) -> Optional[int]:
    """Read the leading integer of text, or None when there is none."""
    match = _INT_PREFIX.match(text)
    if not match:
        return None
    return int(match.group(1))


def _parse_float_prefix(text: str) -> Optional[float]:
    """Read the leading decimal number of text, or None when there is none."""
    match = _FLOAT_PREFIX.match(text)
    if not match:
        return None
    return float(match.group(1))


def parse_duration_seconds(raw: Any) -> float:
    """
    Convert a stored duration value into seconds.

    Accepted inputs:
    - None / empty string / 0: returns 0
    - "HH:MM" or "HH:MM:SS[.mmm]" text: hours*3600 + minutes*60 + seconds,
      with hours and minutes read as integers and seconds as a float
    - numeric text without a colon ("45", "12.5"): the number itself
    - int / float / Decimal: the number itself
    - datetime.timedelta (Postgres INTERVAL) or datetime.time (Postgres TIME):
      the equivalent number of seconds

    Args:
        raw: Duration as stored.

    Returns:
        Duration in seconds; 0 when the value cannot be read.

    Examples:
        >>> parse_duration_seconds("01:02:03")
        3723.0
        >>> parse_duration_seconds("45")
        45.0
        >>> parse_duration_seconds("garbage")
        0.0
    """
    if not raw:
        return 0.0

    if isinstance(raw, bool):
        return 0.0

    if isinstance(raw, timedelta):
        return raw.total_seconds()

    if isinstance(raw, time):
        return raw.hour * 3600 + raw.minute * 60 + raw.second + raw.microsecond / 1_000_000

    if isinstance(raw, (int, float, Decimal)):
        try:
            value = float(raw)
        except (ValueError, OverflowError):
            # Decimal("sNaN") or an integer too large for a float
            return 0.0
        return value if math.isfinite(value) else 0.0

    text = str(raw).strip()
    parts = text.split(":")

    if len(parts) >= 2:
        hours = _parse_int_prefix(parts[0]) or 0
        minutes = _parse_int_prefix(parts[1]) or 0
        seconds = (_parse_float_prefix(parts[2]) or 0.0) if len(parts) > 2 else 0.0
        try:
            total = float(hours * 3600 + minutes * 60 + seconds)
        except OverflowError:
            return 0.0
        return total if math.isfinite(total) else 0.0

    value = _parse_float_prefix(text)
    if value is None or not math.isfinite(value):
        return 0.0
    return value
