"""Parse-or-default helpers applied where untyped input enters the system.

Form bodies and database rows arrive loosely typed. Everything that feeds the
ROI engine passes through these helpers first, so the engine itself only ever
sees real numbers.
"""

from __future__ import annotations

import math
from typing import Any, Optional


def _to_number(value: Any) -> Optional[float]:
    """Best-effort numeric conversion. Returns None when the value is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_int_or_default(value: Any, default: int = 0, non_negative: bool = True) -> int:
    """Coerce to int, truncating toward zero; fall back to ``default`` on failure."""
    if isinstance(value, int) and not isinstance(value, bool):
        parsed = value
    else:
        number = _to_number(value)
        if number is None:
            return default
        parsed = int(number)
    if non_negative and parsed < 0:
        return default
    return parsed


def parse_float_or_default(
    value: Any, default: Optional[float] = None, non_negative: bool = True
) -> Optional[float]:
    """Coerce to float; fall back to ``default`` on failure."""
    number = _to_number(value)
    if number is None:
        return default
    if non_negative and number < 0:
        return default
    return number


def positive_or_default(value: Any, default: float) -> float:
    """Return ``value`` as a number when it is a positive number, else ``default``.

    Zero counts as "not set" for the time and rate settings.
    """
    number = _to_number(value)
    if not number or number < 0:
        return default
    return number
