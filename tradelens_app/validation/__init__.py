"""
Decision validation module.

Schema coercion of provider decisions, directional plan consistency checks
and the user-visible note catalog.
"""

from .consistency import check_plan_consistency
from .decision import DecisionValidator, validate_decision

__all__ = ["DecisionValidator", "check_plan_consistency", "validate_decision"]
