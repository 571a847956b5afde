"""Order book metrics and decision consistency scoring"""

from .orderbook import GapAnalysis, analyze_orderbook_gaps, normalize_orderbook
from .scoring import blend_confidence, consistency_score

__all__ = [
    "GapAnalysis",
    "analyze_orderbook_gaps",
    "normalize_orderbook",
    "blend_confidence",
    "consistency_score",
]
