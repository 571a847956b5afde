"""
Canonical data models for extracted market data and trading decisions.

These structures are what the normalization pipeline hands back to callers:
every field is present and typed no matter how malformed the provider
payload was. ``to_dict`` produces the JSON shape exchanged with the outer
layers (keys follow the provider contract, e.g. ``uiSource``).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from ..errors import UnknownMarketError
from ..utils.numbers import clamp, coerce_number, is_finite_number, optional_number


class Market(str, Enum):
    """Supported markets; drive rounding precision and tick tables."""
    JP = "JP"
    US = "US"
    CRYPTO = "CRYPTO"

    @property
    def precision(self) -> int:
        """Decimal places prices are rounded to before tick snapping."""
        return 1 if self is Market.JP else 2

    @classmethod
    def parse(cls, value: Any) -> "Market":
        """
        Resolve a market identifier.

        Args:
            value: Market member or case-insensitive market string

        Raises:
            UnknownMarketError: If value does not name a supported market
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise UnknownMarketError(
            f"Unsupported market: {value!r}. Must be one of {[m.value for m in cls]}",
            value=value,
        )


class Decision(str, Enum):
    """Directional call."""
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


class Horizon(str, Enum):
    """Holding horizon of a decision."""
    SCALP = "scalp"
    INTRADAY = "intraday"
    ONE_TO_THREE_DAYS = "1-3d"
    SWING = "swing"


class Pressure(str, Enum):
    """Order-book side dominating resting quantity."""
    BID = "bid"
    ASK = "ask"
    NEUTRAL = "neutral"


UI_SOURCES = ("SBI", "Rakuten", "Matsui", "TradingView", "Unknown")
SCENARIO_KEYS = ("base", "bull", "bear")


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_list(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _enum_or_default(enum_cls, value: Any, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


@dataclass
class SupportResistance:
    """Structural levels, both sequences ascending, unique and finite."""
    support: list[float] = field(default_factory=list)
    resistance: list[float] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"support": list(self.support), "resistance": list(self.resistance)}


@dataclass(frozen=True)
class OrderbookLevel:
    """Single order-book row read off a screenshot."""
    price: float
    bid: float = 0.0
    ask: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"price": self.price, "bid": self.bid, "ask": self.ask}


@dataclass
class OrderbookSnapshot:
    """Order-book rows with derived spread, imbalance and pressure."""
    levels: list[OrderbookLevel] = field(default_factory=list)
    spread: Optional[float] = None
    imbalance: Optional[float] = None
    pressure: Pressure = Pressure.NEUTRAL

    @classmethod
    def from_raw(cls, raw: Any) -> "OrderbookSnapshot":
        """
        Structurally coerce a provider-echoed order book.

        Unlike normalize_orderbook this does not recompute metrics; it keeps
        what the provider reported as long as the values are usable.
        """
        data = _as_mapping(raw)
        levels = []
        for entry in _as_list(data.get("levels")):
            entry = _as_mapping(entry)
            price = coerce_number(entry.get("price"))
            if not is_finite_number(price) or price <= 0:
                continue
            levels.append(OrderbookLevel(
                price=price,
                bid=quantity(entry.get("bid")),
                ask=quantity(entry.get("ask")),
            ))

        spread = optional_number(data.get("spread"))
        imbalance = optional_number(data.get("imbalance"))

        return cls(
            levels=levels,
            spread=max(0.0, spread) if spread is not None else None,
            imbalance=clamp(imbalance, -1.0, 1.0) if imbalance is not None else None,
            pressure=_enum_or_default(Pressure, data.get("pressure"), Pressure.NEUTRAL),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "levels": [level.to_dict() for level in self.levels],
            "spread": self.spread,
            "imbalance": self.imbalance,
            "pressure": self.pressure.value,
        }


def quantity(value: Any) -> float:
    """Coerce a resting quantity; missing, invalid or negative becomes 0."""
    number = coerce_number(value, default=0.0)
    return number if is_finite_number(number) and number > 0 else 0.0


@dataclass
class ExtractedInfo:
    """Instrument metadata read off the screenshot."""
    market: Market
    ticker: Optional[str] = None
    timeframe: Optional[str] = None
    ui_source: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any, market: Market) -> "ExtractedInfo":
        data = _as_mapping(raw)
        try:
            extracted_market = Market.parse(data.get("market", market))
        except UnknownMarketError:
            extracted_market = market
        ui_source = data.get("uiSource")
        return cls(
            market=extracted_market,
            ticker=_optional_str(data.get("ticker")),
            timeframe=_optional_str(data.get("timeframe")),
            ui_source=ui_source if ui_source in UI_SOURCES else None,
        )

    def to_dict(self) -> dict[str, Any]:
        result = {
            "ticker": self.ticker,
            "market": self.market.value,
            "timeframe": self.timeframe,
        }
        if self.ui_source is not None:
            result["uiSource"] = self.ui_source
        return result


@dataclass
class ScenarioPlan:
    """Alternative plan carried through from the provider without validation."""
    conditions: Optional[str] = None
    entry: Optional[float] = None
    sl: Optional[float] = None
    tp: Optional[list[float]] = None
    rationale: Optional[list[str]] = None
    rr: Optional[float] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "ScenarioPlan":
        data = _as_mapping(raw)
        tp = data.get("tp")
        rationale = data.get("rationale")
        return cls(
            conditions=_optional_str(data.get("conditions")),
            entry=optional_number(data.get("entry")),
            sl=optional_number(data.get("sl")),
            tp=[float(v) for v in tp if is_finite_number(v)] if isinstance(tp, (list, tuple)) else None,
            rationale=[str(r) for r in rationale] if isinstance(rationale, (list, tuple)) else None,
            rr=optional_number(data.get("rr")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in (
            ("conditions", self.conditions),
            ("entry", self.entry),
            ("sl", self.sl),
            ("tp", self.tp),
            ("rationale", self.rationale),
            ("rr", self.rr),
        ) if v is not None}


@dataclass
class DecisionLevels:
    """Trade plan price levels."""
    entry: Optional[float] = None
    sl: Optional[float] = None
    tp: list[float] = field(default_factory=list)
    sr: SupportResistance = field(default_factory=SupportResistance)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"sr": self.sr.to_dict()}
        if self.entry is not None:
            result["entry"] = self.entry
        if self.sl is not None:
            result["sl"] = self.sl
        if self.tp:
            result["tp"] = list(self.tp)
        return result


@dataclass
class DecisionPlan:
    """Validated trading decision returned to the caller."""
    extracted: ExtractedInfo
    decision: Decision = Decision.HOLD
    horizon: Horizon = Horizon.INTRADAY
    rationale: list[str] = field(default_factory=list)
    levels: DecisionLevels = field(default_factory=DecisionLevels)
    orderbook: OrderbookSnapshot = field(default_factory=OrderbookSnapshot)
    confidence: float = 0.5
    notes: list[str] = field(default_factory=list)
    scenarios: Optional[dict[str, ScenarioPlan]] = None

    # Which collaborators produced the output (informational)
    provider: Optional[str] = None
    providers: dict[str, str] = field(default_factory=dict)

    def add_notes(self, *notes: str) -> None:
        """Append notes keeping insertion order and dropping exact duplicates."""
        self.notes = list(dict.fromkeys([*self.notes, *notes]))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "decision": self.decision.value,
            "horizon": self.horizon.value,
            "rationale": list(self.rationale),
            "levels": self.levels.to_dict(),
            "orderbook": self.orderbook.to_dict(),
            "extracted": self.extracted.to_dict(),
            "confidence": self.confidence,
            "notes": list(self.notes),
        }
        if self.scenarios is not None:
            result["scenarios"] = {k: v.to_dict() for k, v in self.scenarios.items()}
        if self.provider is not None:
            result["provider"] = self.provider
        if self.providers:
            result["providers"] = dict(self.providers)
        return result
