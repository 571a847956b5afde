"""
TradeLens App - Screenshot Trading Decision Normalization Engine

Turns market data extracted from trading-platform screenshots by external
vision/LLM providers into normalized, tick-aligned and internally consistent
buy/sell/hold decisions with entry, stop-loss and take-profit levels.
"""

__version__ = "0.1.0"
__author__ = "TradeLens Team"
