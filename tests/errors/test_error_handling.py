"""
Error handling tests for the normalization pipeline.

Tests cover the error hierarchy, boundary failures and the guarantee that
malformed provider data degrades to defaults instead of raising.
"""

import json
import math
from unittest.mock import Mock

import pytest

from tradelens_app.data import parsers
from tradelens_app.data.models import Decision, Market, Pressure
from tradelens_app.data.sanitizer import sanitize_sr
from tradelens_app.engine import AnalysisEngine
from tradelens_app.errors import (
    ConfigurationError,
    ContractViolationError,
    DataQualityError,
    MalformedDataError,
    MissingDataError,
    UnknownMarketError,
)
from tradelens_app.logging import log_correction
from tradelens_app.metrics.orderbook import analyze_orderbook_gaps, normalize_orderbook
from tradelens_app.validation import check_plan_consistency, validate_decision


class TestErrorClassification:
    """Test error classification system."""

    def test_data_quality_error_hierarchy(self) -> None:
        """Data quality errors are recoverable and carry context."""
        base_error = DataQualityError("base error")
        assert base_error.recoverable is True
        assert base_error.context == {}

        missing_error = MissingDataError("missing payload", data_type="payload")
        assert isinstance(missing_error, DataQualityError)
        assert missing_error.data_type == "payload"

        malformed_error = MalformedDataError("bad json", raw_data="{x", expected_format="json",
                                             context={"provider": "vision"})
        assert isinstance(malformed_error, DataQualityError)
        assert malformed_error.raw_data == "{x"
        assert malformed_error.expected_format == "json"
        assert malformed_error.context == {"provider": "vision"}

    def test_contract_violation_hierarchy(self) -> None:
        """Contract violations are not recoverable."""
        market_error = UnknownMarketError("unsupported", value="EU")
        assert isinstance(market_error, ContractViolationError)
        assert isinstance(market_error, ValueError)
        assert market_error.recoverable is False
        assert market_error.value == "EU"

        config_error = ConfigurationError("invalid", errors=["a"], context={"market": "JP"})
        assert isinstance(config_error, ContractViolationError)
        assert config_error.errors == ["a"]
        assert config_error.context == {"market": "JP"}

    def test_unknown_market_message(self) -> None:
        """Test that unsupported markets are named in the error."""
        with pytest.raises(UnknownMarketError, match="Unsupported market"):
            Market.parse("NASDAQ")


class TestMalformedProviderData:
    """Malformed provider output never raises inside the core."""

    @pytest.mark.parametrize("raw", [
        None,
        "garbage",
        42,
        [],
        {"decision": 5, "levels": "x", "confidence": "high", "rationale": "text", "notes": None},
        {"levels": {"entry": float("inf"), "sl": "abc", "tp": [None, float("nan"), "1"], "sr": []}},
        {"orderbook": {"levels": [None, {"price": -1}], "imbalance": "x", "pressure": 1}},
        {"scenarios": ["base"], "extracted": {"market": "MARS", "uiSource": "Other"}},
    ])
    def test_validator_degrades_to_defaults(self, raw) -> None:
        """Test that junk decisions validate to a complete plan."""
        plan = validate_decision(raw, Market.JP)
        plan = check_plan_consistency(plan, Market.JP)

        assert plan.decision in (Decision.BUY, Decision.SELL, Decision.HOLD)
        assert 0.0 <= plan.confidence <= 1.0
        assert plan.extracted.market is Market.JP
        assert plan.levels.entry is None or math.isfinite(plan.levels.entry)
        assert all(math.isfinite(tp) for tp in plan.levels.tp)

    @pytest.mark.parametrize("raw", [None, "x", [], {"levels": "x"}, {"levels": [1, {"price": None}]}])
    def test_orderbook_degrades_to_empty(self, raw) -> None:
        """Test that junk order books normalize to an empty book."""
        ob = normalize_orderbook(raw, Market.US)

        assert ob.levels == []
        assert ob.spread is None
        assert ob.imbalance == 0.0
        assert ob.pressure is Pressure.NEUTRAL
        assert analyze_orderbook_gaps(ob, Market.US).irregular is False


class TestCorrectionLogging:
    """Test structured correction logging."""

    def test_log_correction_binds_fields(self) -> None:
        """Test that correction fields are bound before logging."""
        logger = Mock()
        bound = logger.bind.return_value

        log_correction(logger, "levels.entry", 1003.4, 1003.0, "JP")

        logger.bind.assert_called_once_with(field="levels.entry", before=1003.4, after=1003.0, market="JP")
        bound.debug.assert_called_once_with("Value corrected")

    def test_log_correction_with_context(self) -> None:
        """Test that extra context is bound when given."""
        logger = Mock()
        bound = logger.bind.return_value

        log_correction(logger, "levels.sl", 996.4, 996.0, "JP", context={"decision": "buy"})

        bound.bind.assert_called_once_with(context={"decision": "buy"})
        bound.bind.return_value.debug.assert_called_once_with("Value corrected")


EXTREME_VALUES = [1e308, -1e308, 10**400]


def extreme_decision(value):
    """Buy decision with value in every numeric slot."""
    return {
        "decision": "buy",
        "levels": {
            "entry": value,
            "sl": value,
            "tp": [value, 110.0],
            "sr": {"support": [value, 90.0], "resistance": [value]},
        },
        "confidence": value,
        "orderbook": {
            "levels": [{"price": value, "bid": value, "ask": value}],
            "spread": value,
            "imbalance": value,
        },
    }


class TestExtremeMagnitudes:
    """Numbers at or beyond float range never raise and never leak inf/NaN."""

    @pytest.mark.parametrize("market", [Market.JP, Market.US])
    @pytest.mark.parametrize("value", EXTREME_VALUES)
    def test_sanitize_sr(self, value, market) -> None:
        """Test S/R sanitization keeps only finite levels."""
        sr = sanitize_sr({"support": [value, 100.0], "resistance": [value]}, market)

        assert 100.0 in sr.support
        assert all(math.isfinite(v) for v in sr.support + sr.resistance)

    @pytest.mark.parametrize("market", [Market.JP, Market.US])
    @pytest.mark.parametrize("value", EXTREME_VALUES)
    def test_normalize_orderbook(self, value, market) -> None:
        """Test order-book prices and quantities at float range limits."""
        ob = normalize_orderbook({"levels": [
            {"price": value, "bid": 5},
            {"price": 100, "bid": value, "ask": value},
            {"price": 101, "ask": 3},
        ]}, market)

        assert all(math.isfinite(level.price) and level.price > 0 for level in ob.levels)
        assert all(math.isfinite(level.bid) and math.isfinite(level.ask) for level in ob.levels)
        assert -1.0 <= ob.imbalance <= 1.0
        assert ob.spread is None or (math.isfinite(ob.spread) and ob.spread >= 0)

    @pytest.mark.parametrize("value", EXTREME_VALUES)
    def test_validate_decision(self, value) -> None:
        """Test the validated plan serializes without non-finite numbers."""
        plan = check_plan_consistency(validate_decision(extreme_decision(value), Market.US), Market.US)

        assert plan.decision is Decision.BUY
        assert 0.0 <= plan.confidence <= 1.0
        assert 110.0 in plan.levels.tp
        json.dumps(plan.to_dict(), allow_nan=False)

    @pytest.mark.parametrize("value", EXTREME_VALUES)
    def test_finalize_decision(self, tmp_path, value) -> None:
        """Test the full finalization path on extreme values."""
        engine = AnalysisEngine(config_dir=tmp_path)

        plan = engine.finalize_decision(extreme_decision(value), "JP")

        assert plan.decision is Decision.BUY
        assert 0.0 <= plan.confidence <= 1.0
        json.dumps(plan.to_dict(), allow_nan=False)

    def test_json_text_decoded_without_orjson(self, tmp_path, monkeypatch) -> None:
        """Test big JSON integers and overflowing exponents from the stdlib decoder."""
        monkeypatch.setattr(parsers, "HAS_ORJSON", False)
        big = 10**400
        text = (
            '{"decision": "sell", "confidence": %d, '
            '"levels": {"entry": 1e308, "sl": %d, "tp": [1e400, 95.5]}, '
            '"orderbook": {"levels": [{"price": 100, "bid": %d}]}}' % (big, big, big)
        )
        engine = AnalysisEngine(config_dir=tmp_path)

        plan = engine.finalize_decision(text, "US")

        assert plan.decision is Decision.SELL
        assert plan.levels.entry == 1e308
        assert plan.levels.sl is None
        assert plan.levels.tp == [95.5]
        assert plan.confidence == pytest.approx(0.5)
        json.dumps(plan.to_dict(), allow_nan=False)
