"""
Plan consistency checks for validated decisions.

Cross-checks entry, stop-loss and take-profit against each other and against
the nearest structural support/resistance. Findings are advisory notes for
the user; numeric fields are never modified.
"""

from typing import Optional

from ..data.models import Decision, DecisionPlan, Market
from ..logging import get_logger
from .messages import DEFAULT_LOCALE, message

logger = get_logger(__name__)


def nearest_support(support: list[float], entry: Optional[float]) -> Optional[float]:
    """Greatest support at or below entry; the highest support when entry is unknown."""
    candidates = [v for v in support if entry is None or v <= entry]
    return candidates[-1] if candidates else None


def nearest_resistance(resistance: list[float], entry: Optional[float]) -> Optional[float]:
    """Smallest resistance at or above entry; the lowest resistance when entry is unknown."""
    for value in resistance:
        if entry is None or value >= entry:
            return value
    return None


def _buy_findings(entry, sl, tps, support, locale) -> list[str]:
    findings = []
    if entry is not None and sl is not None and sl >= entry:
        findings.append(message("buy_sl_not_below_entry", locale))
    if entry is not None and any(tp <= entry for tp in tps):
        findings.append(message("buy_tp_not_above_entry", locale))
    if support is not None and sl is not None and sl > support:
        findings.append(message("buy_sl_above_support", locale))
    return findings


def _sell_findings(entry, sl, tps, resistance, locale) -> list[str]:
    findings = []
    if entry is not None and sl is not None and sl <= entry:
        findings.append(message("sell_sl_not_above_entry", locale))
    if entry is not None and any(tp >= entry for tp in tps):
        findings.append(message("sell_tp_not_below_entry", locale))
    if resistance is not None and sl is not None and sl < resistance:
        findings.append(message("sell_sl_below_resistance", locale))
    return findings


def check_plan_consistency(plan: DecisionPlan, market: Market,
                           locale: str = DEFAULT_LOCALE) -> DecisionPlan:
    """
    Annotate a validated plan with directional sanity warnings.

    Args:
        plan: Plan produced by the decision validator
        market: Market of the plan
        locale: Locale of the notes appended

    Returns:
        The same plan with its notes extended (duplicates removed)
    """
    levels = plan.levels
    entry, sl, tps = levels.entry, levels.sl, levels.tp

    if plan.decision is Decision.BUY:
        findings = _buy_findings(entry, sl, tps, nearest_support(levels.sr.support, entry), locale)
    elif plan.decision is Decision.SELL:
        findings = _sell_findings(entry, sl, tps, nearest_resistance(levels.sr.resistance, entry), locale)
    else:
        findings = []

    if findings:
        logger.debug(
            "Plan consistency findings",
            decision=plan.decision.value,
            market=market.value,
            entry=entry,
            sl=sl,
            findings=len(findings),
        )

    plan.add_notes(*findings)
    return plan
