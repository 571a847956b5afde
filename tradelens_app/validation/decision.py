"""
Decision validation for converting raw provider decisions to canonical plans.

The decision provider returns something shaped like a DecisionPlan with no
guarantee about enums, numeric ranges or array types. This module absorbs
all of that: every field degrades to a safe default instead of raising, and
prices are rounded and snapped to the market's tick grid.
"""

from typing import Any, Mapping, Optional

from ..config.defaults import ValidationParams
from ..data.models import (
    SCENARIO_KEYS,
    Decision,
    DecisionLevels,
    DecisionPlan,
    ExtractedInfo,
    Horizon,
    Market,
    OrderbookSnapshot,
    ScenarioPlan,
)
from ..data.sanitizer import round_by_market, sanitize_sr
from ..data.ticks import snap_to_tick
from ..logging import get_logger, log_correction
from ..utils.numbers import clamp, is_finite_number
from .messages import DEFAULT_LOCALE, message

logger = get_logger(__name__)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item if isinstance(item, str) else str(item) for item in value]


class DecisionValidator:
    """
    Decision validation pipeline.

    Normalizes enumerations, rounds and snaps price levels, clamps confidence
    and bounds text arrays for a raw provider decision.
    """

    def __init__(self, params: Optional[ValidationParams] = None,
                 locale: str = DEFAULT_LOCALE):
        """
        Initialize decision validator.

        Args:
            params: Validation parameters (defaults when omitted)
            locale: Locale used for correction notes
        """
        self.params = params or ValidationParams()
        self.locale = locale
        self.logger = logger

    def validate(self, raw: Any, market: Market) -> DecisionPlan:
        """
        Validate a raw decision payload.

        Args:
            raw: Decoded provider decision (anything; non-mappings yield defaults)
            market: Market whose precision and tick table apply

        Returns:
            Structurally complete DecisionPlan
        """
        data = _as_mapping(raw)

        decision = self._coerce_decision(data.get("decision"))
        horizon = self._coerce_horizon(data.get("horizon"))

        notes = _as_str_list(data.get("notes"))
        levels, snap_notes = self._validate_levels(data.get("levels"), market)
        notes.extend(snap_notes)

        confidence = data.get("confidence")
        if not is_finite_number(confidence):
            confidence = self.params.default_confidence
        confidence = clamp(float(confidence), 0.0, 1.0)

        rationale = _as_str_list(data.get("rationale"))[:self.params.max_rationale]

        plan = DecisionPlan(
            extracted=ExtractedInfo.from_raw(data.get("extracted"), market),
            decision=decision,
            horizon=horizon,
            rationale=rationale,
            levels=levels,
            orderbook=OrderbookSnapshot.from_raw(data.get("orderbook")),
            confidence=confidence,
            scenarios=self._validate_scenarios(data.get("scenarios")),
        )
        plan.add_notes(*notes)
        return plan

    def _coerce_decision(self, value: Any) -> Decision:
        try:
            return Decision(value)
        except ValueError:
            if value is not None:
                self.logger.debug("Invalid decision replaced with hold", decision=value)
            return Decision.HOLD

    def _coerce_horizon(self, value: Any) -> Horizon:
        try:
            return Horizon(value)
        except ValueError:
            if value is not None:
                self.logger.debug("Invalid horizon replaced with intraday", horizon=value)
            return Horizon.INTRADAY

    def _validate_levels(self, raw_levels: Any, market: Market) -> tuple[DecisionLevels, list[str]]:
        """Round then snap entry, stop-loss and take-profits; sanitize S/R."""
        data = _as_mapping(raw_levels)
        notes = []

        entry = self._round_and_snap("levels.entry", data.get("entry"), market)
        if entry is not None and entry[0] != entry[1]:
            notes.append(message("entry_snapped", self.locale))

        sl = self._round_and_snap("levels.sl", data.get("sl"), market)
        if sl is not None and sl[0] != sl[1]:
            notes.append(message("sl_snapped", self.locale))

        raw_tp = data.get("tp")
        tp = []
        if isinstance(raw_tp, (list, tuple)):
            snapped = (snap_to_tick(round_by_market(float(v), market), market)
                       for v in raw_tp if is_finite_number(v))
            tp = [v for v in snapped if is_finite_number(v)]

        levels = DecisionLevels(
            entry=entry[1] if entry is not None else None,
            sl=sl[1] if sl is not None else None,
            tp=tp,
            sr=sanitize_sr(data.get("sr"), market),
        )
        return levels, notes

    def _round_and_snap(self, field: str, value: Any,
                        market: Market) -> Optional[tuple[float, float]]:
        """
        Returns:
            (rounded, snapped) pair, or None when value or its snapped
            price is not a finite number
        """
        if not is_finite_number(value):
            return None
        rounded = round_by_market(float(value), market)
        snapped = snap_to_tick(rounded, market)
        if not is_finite_number(snapped):
            return None
        if snapped != rounded:
            log_correction(self.logger, field, rounded, snapped, market.value)
        return rounded, snapped

    def _validate_scenarios(self, raw: Any) -> Optional[dict[str, ScenarioPlan]]:
        if not isinstance(raw, Mapping):
            return None
        return {key: ScenarioPlan.from_raw(raw[key])
                for key in SCENARIO_KEYS if isinstance(raw.get(key), Mapping)}


def validate_decision(raw: Any, market: Market) -> DecisionPlan:
    """
    Validate a raw provider decision with default parameters.

    Args:
        raw: Decoded provider decision
        market: Market whose precision and tick table apply

    Returns:
        Structurally complete DecisionPlan
    """
    return DecisionValidator().validate(raw, market)
