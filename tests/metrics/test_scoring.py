"""Tests for consistency scoring and confidence blending"""

import pytest

from tradelens_app.data.models import (
    Decision,
    DecisionPlan,
    ExtractedInfo,
    Market,
    OrderbookSnapshot,
    Pressure,
)
from tradelens_app.metrics.scoring import blend_confidence, consistency_score


def make_plan(decision, imbalance=None, pressure=Pressure.NEUTRAL):
    return DecisionPlan(
        extracted=ExtractedInfo(market=Market.US),
        decision=decision,
        orderbook=OrderbookSnapshot(imbalance=imbalance, pressure=pressure),
    )


class TestConsistencyScore:
    """Test order-book agreement scoring"""

    def test_buy_with_bid_support(self) -> None:
        """Test a buy backed by bid imbalance and pressure."""
        assert consistency_score(make_plan(Decision.BUY, 0.3, Pressure.BID)) == pytest.approx(0.85)

    def test_buy_against_ask_pressure(self) -> None:
        """Test a buy against ask-side imbalance."""
        assert consistency_score(make_plan(Decision.BUY, -0.3, Pressure.ASK)) == pytest.approx(0.3)

    def test_buy_mild_imbalance(self) -> None:
        """Test a buy with imbalance but neutral pressure."""
        assert consistency_score(make_plan(Decision.BUY, 0.08)) == pytest.approx(0.7)

    def test_sell_with_ask_support(self) -> None:
        """Test a sell backed by ask imbalance and pressure."""
        assert consistency_score(make_plan(Decision.SELL, -0.3, Pressure.ASK)) == pytest.approx(0.85)

    def test_sell_against_bid_pressure(self) -> None:
        """Test a sell against bid-side imbalance."""
        assert consistency_score(make_plan(Decision.SELL, 0.3, Pressure.BID)) == pytest.approx(0.3)

    def test_imbalance_inside_dead_zone(self) -> None:
        """Test that small imbalances do not move the score."""
        assert consistency_score(make_plan(Decision.BUY, 0.05)) == 0.5
        assert consistency_score(make_plan(Decision.SELL, -0.05)) == 0.5

    def test_missing_imbalance_counts_as_zero(self) -> None:
        """Test that a missing imbalance counts as zero."""
        assert consistency_score(make_plan(Decision.BUY, None)) == 0.5

    @pytest.mark.parametrize("imbalance", [-1.0, -0.3, 0.0, 0.3, 1.0, None])
    @pytest.mark.parametrize("pressure", list(Pressure))
    def test_hold_is_always_neutral(self, imbalance, pressure) -> None:
        """Test that holds score the prior."""
        assert consistency_score(make_plan(Decision.HOLD, imbalance, pressure)) == 0.5

    @pytest.mark.parametrize("decision", list(Decision))
    @pytest.mark.parametrize("imbalance", [-1.0, -0.06, 0.0, 0.06, 1.0])
    @pytest.mark.parametrize("pressure", list(Pressure))
    def test_score_bounds(self, decision, imbalance, pressure) -> None:
        """Test that scores stay within [0, 1]."""
        assert 0.0 <= consistency_score(make_plan(decision, imbalance, pressure)) <= 1.0

    def test_clamped_when_bonuses_overflow(self) -> None:
        """Test clamping when configured bonuses exceed 1."""
        score = consistency_score(make_plan(Decision.BUY, 0.5, Pressure.BID), prior=0.9)

        assert score == 1.0

    @pytest.mark.parametrize("plan", [None, {"decision": "buy"}, object()])
    def test_malformed_plan_is_neutral(self, plan) -> None:
        """Test the neutral fallback for malformed plans."""
        assert consistency_score(plan) == 0.5


class TestBlendConfidence:
    """Test confidence blending"""

    @pytest.mark.parametrize("confidence,score,expected", [
        (0.8, 0.2, 0.56),
        (0.5, 0.5, 0.5),
        (1.0, 1.0, 1.0),
        (0.0, 0.0, 0.0),
        (0.3, 0.85, 0.52),
    ])
    def test_documented_formula(self, confidence, score, expected) -> None:
        """Test the default 0.6/0.4 blend."""
        assert blend_confidence(confidence, score) == pytest.approx(expected)

    def test_missing_confidence_counts_as_half(self) -> None:
        """Test that a missing confidence counts as 0.5."""
        assert blend_confidence(None, 0.5) == pytest.approx(0.5)
        assert blend_confidence(float("nan"), 1.0) == pytest.approx(0.7)

    def test_result_clamped(self) -> None:
        """Test that the blend is clamped to [0, 1]."""
        assert blend_confidence(2.0, 1.0) == 1.0
        assert blend_confidence(-1.0, 0.0) == 0.0

    def test_custom_weights(self) -> None:
        """Test blending with configured weights."""
        assert blend_confidence(1.0, 0.0, confidence_weight=0.5, score_weight=0.5) == pytest.approx(0.5)
