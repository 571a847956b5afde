"""Numeric sanitization of support/resistance levels by market precision."""

from typing import Any, Mapping

from ..utils.numbers import is_finite_number, round_half_away
from .models import Market, SupportResistance


def round_by_market(value: float, market: Market) -> float:
    """
    Round a price to the market's display precision.

    JP prices keep 1 decimal place, US and CRYPTO keep 2. Halves round away
    from zero.
    """
    return round_half_away(value, market.precision)


def sanitize_levels(values: Any, market: Market) -> list[float]:
    """
    Clean one sequence of price levels.

    Non-finite and non-numeric entries are dropped, survivors rounded by
    market, deduplicated and sorted ascending.
    """
    if not isinstance(values, (list, tuple)):
        return []
    rounded = {round_by_market(float(v), market) for v in values if is_finite_number(v)}
    return sorted(v for v in rounded if is_finite_number(v))


def sanitize_sr(raw: Any, market: Market) -> SupportResistance:
    """
    Sanitize raw support/resistance arrays.

    Args:
        raw: Mapping with optional ``support`` and ``resistance`` arrays
        market: Market whose precision applies

    Returns:
        SupportResistance with unique, finite, ascending levels
    """
    data = raw if isinstance(raw, Mapping) else {}
    return SupportResistance(
        support=sanitize_levels(data.get("support"), market),
        resistance=sanitize_levels(data.get("resistance"), market),
    )
