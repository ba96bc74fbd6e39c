# poker_nights/logic/eligibility.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, TypeVar

from .aggregation import PlayerPeriodStats

T = TypeVar("T", bound=PlayerPeriodStats)


@dataclass(frozen=True)
class EligibilityThresholds:
    min_nights_played: int = 0
    min_total_buy_in_cents: int = 0


def _first_set(*values: int | None) -> int:
    for v in values:
        if v is not None:
            return max(0, int(v))
    return 0


def resolve_thresholds(
    request_min_nights: int | None = None,
    request_min_buy_in: int | None = None,
    group_min_nights: int | None = None,
    group_min_buy_in: int | None = None,
    env_min_nights: int | None = None,
    env_min_buy_in: int | None = None,
) -> EligibilityThresholds:
    """
    Per threshold, the first value set wins: request, then group, then env.
    Nothing set anywhere means no filtering (0).
    """
    return EligibilityThresholds(
        min_nights_played=_first_set(request_min_nights, group_min_nights, env_min_nights),
        min_total_buy_in_cents=_first_set(request_min_buy_in, group_min_buy_in, env_min_buy_in),
    )


def meets_eligibility(stats: PlayerPeriodStats, thresholds: EligibilityThresholds) -> bool:
    return (
        stats.total_games >= thresholds.min_nights_played
        and stats.total_buy_in_cents >= thresholds.min_total_buy_in_cents
    )


def filter_eligible(rows: Iterable[T], thresholds: EligibilityThresholds) -> List[T]:
    """Drop players under either threshold; input order is kept."""
    return [r for r in rows if meets_eligibility(r, thresholds)]
