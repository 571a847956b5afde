"""Order book normalization, spread/imbalance metrics and gap analysis"""

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Union

from ..data.models import Market, OrderbookLevel, OrderbookSnapshot, Pressure, quantity
from ..data.sanitizer import round_by_market
from ..data.ticks import snap_to_tick
from ..utils.numbers import coerce_number, is_finite_number, round_half_away

# Imbalance beyond which one side is said to dominate. Market independent.
PRESSURE_THRESHOLD = 0.1


@dataclass(frozen=True)
class GapAnalysis:
    """Price spacing analysis results"""
    irregular: bool
    gaps: list[float] = field(default_factory=list)  # distinct absolute spacings


def clean_levels(raw_levels: Any, market: Market) -> list[OrderbookLevel]:
    """
    Coerce raw order-book rows and snap their prices to the tick grid.

    Rows without a finite positive price are dropped. Prices are rounded by
    market precision first, then snapped; bid/ask quantities are kept as read.
    """
    if not isinstance(raw_levels, (list, tuple)):
        return []

    cleaned = []
    for entry in raw_levels:
        if not isinstance(entry, Mapping):
            continue
        price = coerce_number(entry.get("price"))
        if not is_finite_number(price) or price <= 0:
            continue
        price = snap_to_tick(round_by_market(price, market), market)
        if not is_finite_number(price):
            continue
        cleaned.append(OrderbookLevel(
            price=price,
            bid=quantity(entry.get("bid")),
            ask=quantity(entry.get("ask")),
        ))
    return cleaned


def calculate_spread(levels: list[OrderbookLevel], market: Market) -> Union[float, None]:
    """
    Best ask minus best bid, clamped at zero.

    Returns:
        Spread, or None when either side has no resting quantity
    """
    bid_prices = [level.price for level in levels if level.bid > 0]
    ask_prices = [level.price for level in levels if level.ask > 0]
    if not bid_prices or not ask_prices:
        return None

    best_bid = max(bid_prices)
    best_ask = min(ask_prices)
    return max(0.0, round_by_market(best_ask - best_bid, market))


def calculate_imbalance(levels: list[OrderbookLevel]) -> float:
    """
    Quantity imbalance in [-1, 1]; positive when bids outweigh asks.

    Returns 0 for an empty book. Quantities are rescaled by the largest one
    when their sums overflow.
    """
    bids = [level.bid for level in levels if level.bid > 0]
    asks = [level.ask for level in levels if level.ask > 0]
    bid_sum, ask_sum = sum(bids), sum(asks)
    if not math.isfinite(bid_sum + ask_sum):
        scale = max(bids + asks)
        bid_sum = sum(q / scale for q in bids)
        ask_sum = sum(q / scale for q in asks)
    total = bid_sum + ask_sum
    if total <= 0:
        return 0.0
    return (bid_sum - ask_sum) / total


def classify_pressure(imbalance: float) -> Pressure:
    """Map imbalance to the dominating side"""
    if imbalance > PRESSURE_THRESHOLD:
        return Pressure.BID
    elif imbalance < -PRESSURE_THRESHOLD:
        return Pressure.ASK
    return Pressure.NEUTRAL


def normalize_orderbook(raw: Any, market: Market) -> OrderbookSnapshot:
    """
    Normalize a raw order book read from a screenshot

    Args:
        raw: Mapping with an optional ``levels`` list of {price, bid?, ask?}
        market: Market whose precision and tick table apply

    Returns:
        OrderbookSnapshot with tick-aligned levels and derived metrics
    """
    raw_levels = raw.get("levels") if isinstance(raw, Mapping) else None
    levels = clean_levels(raw_levels, market)
    imbalance = calculate_imbalance(levels)

    return OrderbookSnapshot(
        levels=levels,
        spread=calculate_spread(levels, market),
        imbalance=imbalance,
        pressure=classify_pressure(imbalance),
    )


def _level_prices(ob: Any) -> Iterable[Any]:
    if isinstance(ob, OrderbookSnapshot):
        return [level.price for level in ob.levels]
    levels = ob.get("levels") if isinstance(ob, Mapping) else ob
    if not isinstance(levels, (list, tuple)):
        return []
    prices = []
    for level in levels:
        if isinstance(level, OrderbookLevel):
            prices.append(level.price)
        elif isinstance(level, Mapping):
            prices.append(coerce_number(level.get("price")))
    return prices


def analyze_orderbook_gaps(ob: Any, market: Market,
                           max_distinct_gaps: int = 2,
                           precision: int = 6) -> GapAnalysis:
    """
    Detect irregular price spacing in an order book

    A cleanly quoted book shows the tick size and perhaps one multiple of it
    where quotes are sparse. More distinct spacings than ``max_distinct_gaps``
    point at display or latency artifacts in the screenshot.

    Args:
        ob: OrderbookSnapshot, list of levels, or mapping with ``levels``
        market: Market of the book
        max_distinct_gaps: Distinct spacings tolerated before flagging
        precision: Decimal places used to round spacings

    Returns:
        GapAnalysis with the flag and the distinct spacings found
    """
    prices = sorted({p for p in _level_prices(ob) if is_finite_number(p)})
    if len(prices) < 3:
        return GapAnalysis(irregular=False, gaps=[])

    gaps = []
    for prev, curr in zip(prices, prices[1:]):
        gap = abs(round_half_away(curr - prev, precision))
        if gap not in gaps:
            gaps.append(gap)

    return GapAnalysis(irregular=len(gaps) > max_distinct_gaps, gaps=gaps)
