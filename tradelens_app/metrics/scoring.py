"""Order-book consistency scoring and confidence blending"""

from typing import Any

from ..data.models import Decision, Pressure
from ..logging import get_logger
from ..utils.numbers import clamp, is_finite_number

logger = get_logger(__name__)

NEUTRAL_SCORE = 0.5


def consistency_score(plan: Any,
                      prior: float = NEUTRAL_SCORE,
                      imbalance_threshold: float = 0.05,
                      imbalance_bonus: float = 0.2,
                      pressure_bonus: float = 0.15) -> float:
    """
    Score how well the order book agrees with the decision's direction.

    A buy gains when bids dominate and loses when asks do; a sell mirrors
    that. Holds always score the prior.

    Args:
        plan: Validated DecisionPlan
        prior: Starting score
        imbalance_threshold: |imbalance| needed to count as directional
        imbalance_bonus: Score added (or removed) for (dis)agreeing imbalance
        pressure_bonus: Score added when pressure agrees with the decision

    Returns:
        Score between 0.0 and 1.0
    """
    try:
        orderbook = plan.orderbook
        imbalance = orderbook.imbalance if is_finite_number(orderbook.imbalance) else 0.0
        pressure = Pressure(orderbook.pressure or Pressure.NEUTRAL)
        decision = Decision(plan.decision or Decision.HOLD)
    except (AttributeError, TypeError, ValueError) as e:
        logger.warning("Consistency score fell back to neutral", error=str(e))
        return NEUTRAL_SCORE

    score = prior
    if decision is Decision.BUY:
        if imbalance > imbalance_threshold:
            score += imbalance_bonus
        if pressure is Pressure.BID:
            score += pressure_bonus
        if imbalance < -imbalance_threshold:
            score -= imbalance_bonus
    elif decision is Decision.SELL:
        if imbalance < -imbalance_threshold:
            score += imbalance_bonus
        if pressure is Pressure.ASK:
            score += pressure_bonus
        if imbalance > imbalance_threshold:
            score -= imbalance_bonus
    else:
        score = prior

    return clamp(score, 0.0, 1.0)


def blend_confidence(confidence: Any, score: float,
                     confidence_weight: float = 0.6,
                     score_weight: float = 0.4) -> float:
    """
    Blend model confidence with the consistency score.

    ``confidence * 0.6 + score * 0.4`` by default, clamped to [0, 1]. A
    missing or non-finite confidence counts as 0.5.
    """
    base = confidence if is_finite_number(confidence) else NEUTRAL_SCORE
    return clamp(base * confidence_weight + score * score_weight, 0.0, 1.0)
