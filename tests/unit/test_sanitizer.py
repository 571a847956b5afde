"""Unit tests for support/resistance sanitization."""

import pytest

from tradelens_app.data.models import Market, SupportResistance
from tradelens_app.data.sanitizer import round_by_market, sanitize_levels, sanitize_sr


class TestRoundByMarket:
    """Test market precision rounding."""

    def test_jp_keeps_one_decimal(self) -> None:
        """Test JP rounding to one decimal."""
        assert round_by_market(1234.56, Market.JP) == 1234.6

    @pytest.mark.parametrize("market", [Market.US, Market.CRYPTO])
    def test_us_and_crypto_keep_two_decimals(self, market) -> None:
        """Test US and CRYPTO rounding to two decimals."""
        assert round_by_market(101.236, market) == 101.24


class TestSanitizeSR:
    """Test suite for sanitize_sr."""

    def test_drops_nan_dedupes_and_sorts(self) -> None:
        """Test NaN removal, deduplication and ordering."""
        sr = sanitize_sr({"support": [100, 99.5, float("nan"), 100],
                          "resistance": [110, 111.2]}, Market.JP)

        assert sr.support == [99.5, 100.0]
        assert sr.resistance == [110.0, 111.2]

    def test_dedupes_after_rounding(self) -> None:
        """Test deduplication after rounding."""
        sr = sanitize_sr({"support": [100.04, 100.01, 99.96]}, Market.JP)

        # All three round to 100.0 at one decimal place
        assert sr.support == [100.0]

    def test_non_numeric_values_dropped(self) -> None:
        """Test that non-numeric values are dropped."""
        sr = sanitize_sr({"support": ["100", None, True, float("inf"), 98.123]}, Market.US)

        assert sr.support == [98.12]

    @pytest.mark.parametrize("raw", [None, 42, "levels", [], {"support": "100"}])
    def test_malformed_input_yields_empty_levels(self, raw) -> None:
        """Test that malformed input yields empty levels."""
        sr = sanitize_sr(raw, Market.CRYPTO)

        assert sr == SupportResistance(support=[], resistance=[])

    def test_missing_side_is_empty(self) -> None:
        """Test that a missing side is empty."""
        sr = sanitize_sr({"resistance": [2.5, 1.25]}, Market.US)

        assert sr.support == []
        assert sr.resistance == [1.25, 2.5]

    def test_sanitize_levels_accepts_tuples(self) -> None:
        """Test that tuples are accepted."""
        assert sanitize_levels((3.0, 1.0, 2.0), Market.US) == [1.0, 2.0, 3.0]

    def test_huge_values_stay_finite(self) -> None:
        """Test that float-range extremes are kept or dropped, never turned into inf."""
        sr = sanitize_sr({"support": [1e308, 100.0, 10**400], "resistance": [float("inf")]}, Market.JP)

        assert sr.support == [100.0, 1e308]
        assert sr.resistance == []

    def test_output_invariants_for_all_markets(self) -> None:
        """Test ordering and uniqueness for every market."""
        raw = {"support": [5, 3, 3, float("nan"), 4.44444, -1], "resistance": [9, 8, 9]}
        for market in Market:
            sr = sanitize_sr(raw, market)
            for side in (sr.support, sr.resistance):
                assert side == sorted(side)
                assert len(side) == len(set(side))
