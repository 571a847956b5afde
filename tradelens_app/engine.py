"""
Main analysis pipeline coordinator.

Sequences the normalization core around the two external providers:
raw extraction is cleaned before it is handed to the decision provider, and
the raw decision is validated, checked, annotated and confidence-blended
before it is returned to the caller. No I/O happens here; the HTTP calls to
the providers belong to the caller.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .config.defaults import DefaultConfig
from .config.loader import ConfigLoader
from .data.models import (
    DecisionLevels,
    DecisionPlan,
    ExtractedInfo,
    Horizon,
    Market,
    OrderbookSnapshot,
    ScenarioPlan,
    SupportResistance,
)
from .data.parsers import parse_provider_payload
from .data.sanitizer import sanitize_sr
from .data.ticks import enforce_orderbook_ticks
from .errors import DataQualityError
from .logging.config import get_pipeline_logger
from .metrics.orderbook import GapAnalysis, analyze_orderbook_gaps, normalize_orderbook
from .metrics.scoring import blend_confidence, consistency_score
from .utils.numbers import is_finite_number
from .validation.consistency import check_plan_consistency
from .validation.decision import DecisionValidator
from .validation.messages import message

logger = get_pipeline_logger(__name__)

# Fallback reasons accepted by stub_response
STUB_DECISION_PARSE = "decision-parse"
STUB_EXTRACTION_PARSE = "extraction-parse"
STUB_EXTRACTION_FAILED = "extraction-failed"

_STUB_NOTES = {
    STUB_DECISION_PARSE: "stub_decision_parse",
    STUB_EXTRACTION_PARSE: "stub_extraction_parse",
    STUB_EXTRACTION_FAILED: "stub_extraction_failed",
}


@dataclass
class EnrichedExtraction:
    """Vision provider output after sanitization, ready for the decision provider."""
    raw: dict[str, Any]
    sr: SupportResistance
    orderbook: OrderbookSnapshot
    tick_adjusted: int = 0
    gaps: GapAnalysis = field(default_factory=lambda: GapAnalysis(irregular=False))

    def to_decision_input(self) -> dict[str, Any]:
        """
        JSON object handed to the decision provider.

        Original fields are kept; S/R and the order book are replaced by their
        cleaned versions and annotated with tick/gap diagnostics.
        """
        levels = dict(self.raw.get("levels")) if isinstance(self.raw.get("levels"), Mapping) else {}
        levels["sr"] = self.sr.to_dict()

        orderbook = self.orderbook.to_dict()
        orderbook["_tickAdjusted"] = self.tick_adjusted
        orderbook["_irregularGaps"] = self.gaps.irregular

        return {**self.raw, "levels": levels, "orderbook": orderbook}


def is_meaningful(obj: Any) -> bool:
    """
    Whether a provider payload carries anything beyond defaults.

    Empty objects, or objects holding only a hold decision, are treated as a
    failed response.
    """
    if not isinstance(obj, Mapping) or not obj:
        return False

    if obj.get("decision") in ("buy", "sell"):
        return True

    levels = obj.get("levels") if isinstance(obj.get("levels"), Mapping) else {}
    if is_finite_number(levels.get("entry")) or is_finite_number(levels.get("sl")):
        return True
    if isinstance(levels.get("tp"), list) and levels["tp"]:
        return True

    if isinstance(obj.get("scenarios"), Mapping) and obj["scenarios"]:
        return True
    if isinstance(obj.get("rationale"), list) and obj["rationale"]:
        return True

    orderbook = obj.get("orderbook") if isinstance(obj.get("orderbook"), Mapping) else {}
    if isinstance(orderbook.get("levels"), list) and orderbook["levels"]:
        return True

    sr = levels.get("sr") if isinstance(levels.get("sr"), Mapping) else {}
    if any(isinstance(sr.get(side), list) and sr[side] for side in ("support", "resistance")):
        return True

    extracted = obj.get("extracted") if isinstance(obj.get("extracted"), Mapping) else {}
    return bool(extracted.get("ticker") or extracted.get("timeframe"))


class AnalysisEngine:
    """
    Coordinator for the screenshot analysis pipeline.

    Manages the normalization flow:
    Extraction → Sanitize/Normalize → (decision provider) → Validate →
    Consistency check → Confidence blend → Caller
    """

    def __init__(self, config_dir: Optional[Union[str, Path]] = None,
                 overrides: Optional[dict[str, Any]] = None) -> None:
        """
        Initialize the analysis engine.

        Args:
            config_dir: Directory holding markets.yaml (repository config/ by default)
            overrides: Explicit configuration overrides applied to every market
        """
        self.logger = logger
        self.config_loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
        self.overrides = overrides or {}
        self._configs: dict[Market, DefaultConfig] = {}

    def config_for(self, market: Union[Market, str]) -> DefaultConfig:
        """Load (once) and return the validated configuration for a market."""
        market = Market.parse(market)
        if market not in self._configs:
            self._configs[market] = self.config_loader.load(market.value, self.overrides)
        return self._configs[market]

    def enrich_extraction(self, raw_extraction: Any,
                          market: Union[Market, str]) -> EnrichedExtraction:
        """
        Clean vision provider output before it reaches the decision provider.

        Args:
            raw_extraction: Decoded extraction payload (mapping or JSON text)
            market: Market of the screenshot

        Returns:
            EnrichedExtraction with sanitized S/R, normalized book and diagnostics

        Raises:
            UnknownMarketError: If market is not supported
            DataQualityError: If the payload cannot be decoded
        """
        market = Market.parse(market)
        config = self.config_for(market)
        data = parse_provider_payload(raw_extraction)

        levels = data.get("levels") if isinstance(data.get("levels"), Mapping) else {}
        sr = sanitize_sr(levels.get("sr"), market)
        orderbook = normalize_orderbook(data.get("orderbook"), market)
        # Screenshot prices that were off the tick grid as read
        _, adjusted = enforce_orderbook_ticks(OrderbookSnapshot.from_raw(data.get("orderbook")).levels, market)
        gaps = analyze_orderbook_gaps(orderbook, market,
                                      max_distinct_gaps=config.gaps.max_distinct_gaps,
                                      precision=config.gaps.precision)

        self.logger.info(
            "Extraction enriched",
            market=market.value,
            support=len(sr.support),
            resistance=len(sr.resistance),
            book_levels=len(orderbook.levels),
            tick_adjusted=adjusted,
            irregular_gaps=gaps.irregular,
        )

        return EnrichedExtraction(
            raw=data,
            sr=sr,
            orderbook=orderbook,
            tick_adjusted=adjusted,
            gaps=gaps,
        )

    def finalize_decision(self, raw_decision: Any, market: Union[Market, str],
                          extraction: Optional[EnrichedExtraction] = None,
                          meta: Optional[Mapping[str, Any]] = None) -> DecisionPlan:
        """
        Turn decision provider output into the plan returned to the caller.

        Unparseable or empty payloads produce the fail-safe stub rather than
        an error.

        Args:
            raw_decision: Decoded decision payload (mapping or JSON text)
            market: Market of the screenshot
            extraction: Enriched extraction the decision was based on, if any
            meta: Caller hints (ticker, timeframe, horizon, image_count) for the stub

        Returns:
            Validated, annotated DecisionPlan

        Raises:
            UnknownMarketError: If market is not supported
        """
        market = Market.parse(market)
        config = self.config_for(market)
        locale = config.notes.locale

        try:
            data = parse_provider_payload(raw_decision)
        except DataQualityError as e:
            self.logger.warning("Decision payload rejected", market=market.value, error=str(e))
            return self.stub_response(STUB_DECISION_PARSE, market, meta)

        if not is_meaningful(data):
            self.logger.warning("Decision payload carried no usable fields", market=market.value)
            return self.stub_response(STUB_DECISION_PARSE, market, meta)

        validator = DecisionValidator(config.validation, locale=locale)
        plan = validator.validate(data, market)
        plan = check_plan_consistency(plan, market, locale=locale)

        if extraction is not None:
            if extraction.tick_adjusted > 0:
                plan.add_notes(message("orderbook_ticks_adjusted", locale, count=extraction.tick_adjusted))
            if extraction.gaps.irregular:
                plan.add_notes(message("orderbook_gaps_irregular", locale))

        scoring = config.scoring
        score = consistency_score(
            plan,
            prior=scoring.prior,
            imbalance_threshold=scoring.imbalance_threshold,
            imbalance_bonus=scoring.imbalance_bonus,
            pressure_bonus=scoring.pressure_bonus,
        )
        blended = blend_confidence(plan.confidence, score,
                                   confidence_weight=scoring.confidence_weight,
                                   score_weight=scoring.score_weight)

        self.logger.info(
            "Decision finalized",
            market=market.value,
            decision=plan.decision.value,
            confidence=plan.confidence,
            consistency_score=score,
            blended_confidence=blended,
            notes=len(plan.notes),
        )
        plan.confidence = blended

        if not plan.scenarios:
            plan.scenarios = {"base": self._base_scenario(plan, locale)}

        return plan

    def _base_scenario(self, plan: DecisionPlan, locale: str) -> ScenarioPlan:
        """Scenario synthesized from the plan itself when the provider gave none."""
        return ScenarioPlan(
            conditions=message("base_scenario_conditions", locale),
            entry=plan.levels.entry,
            sl=plan.levels.sl,
            tp=plan.levels.tp[:2] or None,
            rationale=plan.rationale[:3] or None,
        )

    def stub_response(self, reason: str, market: Union[Market, str],
                      meta: Optional[Mapping[str, Any]] = None) -> DecisionPlan:
        """
        Fail-safe hold plan returned when provider output is unusable.

        Args:
            reason: One of the STUB_* constants
            market: Market of the request
            meta: Caller hints (ticker, timeframe, horizon, image_count)

        Returns:
            Neutral hold plan explaining why it was produced
        """
        market = Market.parse(market)
        config = self.config_for(market)
        locale = config.notes.locale
        meta = meta or {}

        try:
            horizon = Horizon(meta.get("horizon"))
        except ValueError:
            horizon = Horizon.INTRADAY

        plan = DecisionPlan(
            extracted=ExtractedInfo(
                market=market,
                ticker=meta.get("ticker"),
                timeframe=meta.get("timeframe") or config.stub.timeframe,
            ),
            horizon=horizon,
            rationale=[
                message("stub_rationale_fallback", locale),
                message("stub_rationale_images", locale, count=meta.get("image_count", 0)),
                message("stub_rationale_hold", locale),
            ],
            levels=DecisionLevels(),
            orderbook=OrderbookSnapshot(),
            confidence=config.stub.confidence,
            notes=[message("stub_active", locale)],
            provider="none",
            providers={"vision": meta.get("vision_provider", "none"), "decision": "none"},
        )
        note_key = _STUB_NOTES.get(reason)
        if note_key:
            plan.add_notes(message(note_key, locale))

        self.logger.warning("Returning fail-safe stub", market=market.value, reason=reason)
        return plan
