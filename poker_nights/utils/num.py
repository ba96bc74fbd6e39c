# poker_nights/utils/num.py
import math


def safe_ratio(numerator: float, denominator: float) -> float | None:
    """numerator / denominator, or None when the denominator is not positive."""
    if denominator <= 0:
        return None
    return numerator / denominator


def rate(count: int, total: int) -> float:
    """count / total, 0.0 at a zero total (win rate, consistency)."""
    return count / total if total > 0 else 0.0


def cents_to_dollars(cents: int) -> float:
    return cents / 100.0


def roi_weighted_score(profit_cents: int, buy_in_cents: int) -> float | None:
    """
    ROI scaled by sqrt(stake in dollars); None when nothing was staked.
    Puts large-stake moderate-ROI and small-stake huge-ROI results on one scale.
    """
    if buy_in_cents <= 0:
        return None
    buy_in_dollars = cents_to_dollars(buy_in_cents)
    roi = cents_to_dollars(profit_cents) / buy_in_dollars
    return roi * math.sqrt(buy_in_dollars)


def half_up(value: float) -> int:
    """Round to the nearest int with .5 going up (round() would go to even)."""
    return math.floor(value + 0.5)
