"""
Contract violation errors raised at the pipeline boundary.

Unlike data quality errors these signal a programming mistake by the caller
(an unsupported market, an invalid configuration) and are not recoverable by
degrading to defaults.
"""

from typing import Any, Optional, Dict


class ContractViolationError(Exception):
    """Base class for caller contract violations."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class UnknownMarketError(ContractViolationError, ValueError):
    """Market identifier is not one of the supported markets."""

    def __init__(self, message: str, value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.value = value


class ConfigurationError(ContractViolationError):
    """Merged configuration failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
