"""
Error classification for the TradeLens pipeline.

Malformed provider data never raises inside the normalization core; these
exceptions cover the boundaries around it: payload parsing, caller contract
violations and configuration problems.
"""

from .data_quality import (
    DataQualityError,
    MissingDataError,
    MalformedDataError,
)
from .contract import (
    ContractViolationError,
    UnknownMarketError,
    ConfigurationError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "MissingDataError",
    "MalformedDataError",
    # Contract Violations
    "ContractViolationError",
    "UnknownMarketError",
    "ConfigurationError",
]
