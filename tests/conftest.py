"""Pytest configuration and shared fixtures."""

import pytest
from typing import Dict, Any


@pytest.fixture
def sample_extraction() -> Dict[str, Any]:
    """Vision provider output for a JP board screenshot."""
    return {
        "extracted": {"ticker": "7203", "market": "JP", "timeframe": "5m", "uiSource": "SBI"},
        "levels": {
            "sr": {
                "support": [1001.0, 998.44, float("nan"), 1001.0],
                "resistance": [1012.0, 1008.06, "n/a"],
            }
        },
        "orderbook": {
            "levels": [
                {"price": 1003.4, "bid": 1200},
                {"price": "1004", "bid": 800},
                {"price": 1005.6, "ask": 300},
                {"price": 1007, "ask": 500},
                {"price": 0, "bid": 100},
                {"price": "abc", "ask": 100},
            ]
        },
    }


@pytest.fixture
def sample_decision() -> Dict[str, Any]:
    """Decision provider output with a few defects to absorb."""
    return {
        "decision": "buy",
        "horizon": "intraday",
        "rationale": ["bids stacked under price", "higher low on 5m"],
        "levels": {
            "entry": 1003.4,
            "sl": 996.0,
            "tp": [1012.0, 1020.2],
            "sr": {"support": [998.0, 1001.0], "resistance": [1008.0, 1012.0]},
        },
        "orderbook": {"spread": 2.0, "imbalance": 0.4, "pressure": "bid", "levels": []},
        "extracted": {"ticker": "7203", "market": "JP", "timeframe": "5m"},
        "confidence": 0.7,
        "notes": [],
    }
