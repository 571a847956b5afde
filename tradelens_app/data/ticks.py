"""Tick-size resolution and price snapping."""

import math
from typing import Iterable

from ..utils.numbers import is_finite_number, round_half_away
from .models import Market, OrderbookLevel

# Fixed tick for dollar-quoted markets
CENT_TICK = 0.01

# JP price bands: (exclusive upper bound, tick). Approximates the exchange's
# general tick schedule; thresholds are kept as-is.
JP_TICK_BANDS = (
    (3_000, 1),
    (5_000, 5),
    (30_000, 10),
    (50_000, 50),
    (300_000, 100),
    (500_000, 500),
    (3_000_000, 1_000),
    (5_000_000, 5_000),
)
JP_MAX_TICK = 10_000


def tick_size_for_market(market: Market, price: float) -> float:
    """
    Resolve the price increment valid at ``price`` in ``market``.

    Args:
        market: Market whose tick table applies
        price: Price used to select the JP band

    Returns:
        Positive tick size
    """
    if market in (Market.US, Market.CRYPTO):
        return CENT_TICK

    for upper, tick in JP_TICK_BANDS:
        if price < upper:
            return tick
    return JP_MAX_TICK


def _tick_decimals(tick: float) -> int:
    digits = 0
    while digits < 8 and round(tick * 10 ** digits) != tick * 10 ** digits:
        digits += 1
    return digits


def snap_to_tick(value: float, market: Market) -> float:
    """
    Round ``value`` to the nearest valid tick.

    The band is chosen from the unsnapped value. Float noise from the
    multiplication is trimmed to the tick's decimal places, which keeps the
    operation idempotent. Values whose tick count overflows are already on
    the grid and are returned unchanged.
    """
    tick = tick_size_for_market(market, value)
    steps = value / tick
    if not math.isfinite(steps):
        return value
    snapped = round(round_half_away(steps) * tick, _tick_decimals(tick))
    return snapped if math.isfinite(snapped) else value


def enforce_orderbook_ticks(
    levels: Iterable[OrderbookLevel],
    market: Market
) -> tuple[list[OrderbookLevel], int]:
    """
    Re-snap every order-book price to the tick grid.

    Returns:
        Tuple of (snapped levels, number of levels whose price changed)
    """
    adjusted = 0
    result = []
    for level in levels:
        snapped = snap_to_tick(level.price, market) if is_finite_number(level.price) else level.price
        if snapped != level.price:
            adjusted += 1
            level = OrderbookLevel(price=snapped, bid=level.bid, ask=level.ask)
        result.append(level)
    return result, adjusted
