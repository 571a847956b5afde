#!/usr/bin/env python3
"""
Demonstration script for correction logging in the screenshot pipeline.

Runs a sample extraction and a sample provider decision through the engine
with DEBUG logging so every rounding, tick snap and fallback shows up in the
audit trail.
"""

import json

from tradelens_app.config.loader import ConfigLoader
from tradelens_app.logging.config import configure_logging

logging_params = ConfigLoader.create().load("JP").logging
configure_logging(level="DEBUG", format_json=logging_params.format_json, include_timestamp=True)

from tradelens_app.engine import AnalysisEngine, STUB_EXTRACTION_FAILED


SAMPLE_EXTRACTION = {
    "extracted": {"ticker": "7203", "market": "JP", "timeframe": "5m", "uiSource": "Rakuten"},
    "levels": {"sr": {"support": [2998.44, 3001.0, 3001.0], "resistance": [3018.06, "n/a"]}},
    "orderbook": {
        "levels": [
            {"price": 3003.4, "bid": 1200},
            {"price": "3005", "bid": 800},
            {"price": 3010, "ask": 300},
            {"price": 3025, "ask": 500},
        ]
    },
}

SAMPLE_DECISION = {
    "decision": "buy",
    "horizon": "intraday",
    "rationale": ["bids stacked under price", "higher low on 5m"],
    "levels": {"entry": 3007.3, "sl": 3002.2, "tp": [3018.1, 3026]},
    "orderbook": {"imbalance": 0.48, "pressure": "bid"},
    "confidence": 0.72,
}


def demonstrate_enrichment(engine: AnalysisEngine):
    """Show sanitization and tick enforcement of an extraction."""
    print("=" * 70)
    print("EXTRACTION ENRICHMENT")
    print("=" * 70)

    enriched = engine.enrich_extraction(SAMPLE_EXTRACTION, "JP")
    print(json.dumps(enriched.to_decision_input(), indent=2, ensure_ascii=False))
    return enriched


def demonstrate_finalization(engine: AnalysisEngine, enriched):
    """Show validation, consistency notes and confidence blending."""
    print("\n" + "=" * 70)
    print("DECISION FINALIZATION")
    print("=" * 70)

    plan = engine.finalize_decision(SAMPLE_DECISION, "JP", extraction=enriched)
    print(json.dumps(plan.to_dict(), indent=2, ensure_ascii=False))


def demonstrate_fallback(engine: AnalysisEngine):
    """Show the fail-safe stub for an unusable provider response."""
    print("\n" + "=" * 70)
    print("FAIL-SAFE RESPONSES")
    print("=" * 70)

    print("\n1. Decision provider returned prose instead of JSON:")
    plan = engine.finalize_decision("Sorry, I cannot help with that.", "US")
    print(json.dumps(plan.to_dict(), indent=2, ensure_ascii=False))

    print("\n2. Vision provider failed entirely:")
    plan = engine.stub_response(STUB_EXTRACTION_FAILED, "CRYPTO", meta={"image_count": 2})
    print(json.dumps(plan.to_dict(), indent=2, ensure_ascii=False))


def main():
    engine = AnalysisEngine()
    enriched = demonstrate_enrichment(engine)
    demonstrate_finalization(engine, enriched)
    demonstrate_fallback(engine)


if __name__ == "__main__":
    main()
