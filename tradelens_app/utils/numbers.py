"""Numeric coercion and rounding helpers for untrusted provider values."""

import math
from typing import Any, Optional


def is_finite_number(value: Any) -> bool:
    """True for real int/float values that are neither NaN nor infinite.

    Booleans are rejected even though they subclass int.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int beyond float range
        return False


def coerce_number(value: Any, default: float = math.nan) -> float:
    """
    Coerce a loosely typed value to float.

    Numeric strings are accepted (surrounding whitespace ignored); ``None``
    yields ``default``. Anything unparseable yields NaN so callers can filter
    with :func:`is_finite_number`.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.nan
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text.replace(",", ""))
        except ValueError:
            return math.nan
    return math.nan


def optional_number(value: Any) -> Optional[float]:
    """Return value as float if it is a finite number, else None."""
    return float(value) if is_finite_number(value) else None


def round_half_away(value: float, digits: int = 0) -> float:
    """Round to ``digits`` decimal places, halves away from zero.

    Scales by 10**digits, rounds to the nearest integer and scales back, so
    results match the usual "multiply, round, divide" arithmetic rather than
    Python's banker's rounding.

    Values too large to scale (and non-finite values) are returned as-is;
    past 2**52 every float is already integral.
    """
    factor = 10 ** digits
    scaled = abs(value) * factor
    if not math.isfinite(scaled):
        return value
    rounded = math.floor(scaled + 0.5)
    return math.copysign(rounded, value) / factor if digits else math.copysign(rounded, value)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))
