# poker_nights/logic/night_evaluator.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from ..utils.num import roi_weighted_score, safe_ratio
from .types import LedgerEntry, LedgerNight

# 1st / 2nd / 3rd by profit within a night
PODIUM_POINTS = (3, 2, 1)


@dataclass(frozen=True)
class NightResult:
    player_id: int
    name: str
    buy_in_cents: int
    cash_out_cents: int
    profit_cents: int
    rank: int
    night_score: float
    podium_points: int

    @property
    def is_podium(self) -> bool:
        return self.podium_points > 0

    @property
    def roi(self) -> float | None:
        return safe_ratio(self.profit_cents, self.buy_in_cents)


def profit_cents(entry: LedgerEntry) -> int:
    """cash-out (unresolved = 0) minus buy-in minus adjustment."""
    return (entry.cash_out_cents or 0) - entry.buy_in_cents - entry.adjustment_cents


def night_score(profit: int, buy_in: int) -> float:
    """ROI x sqrt(buy-in dollars); 0 when nothing was staked."""
    score = roi_weighted_score(profit, buy_in)
    return 0.0 if score is None else score


def podium_points_for(rank: int) -> int:
    return PODIUM_POINTS[rank - 1] if 1 <= rank <= len(PODIUM_POINTS) else 0


def evaluate_night(entries: Iterable[LedgerEntry]) -> List[NightResult]:
    """
    Rank one night's participants by profit (desc) and score them.
    Equal profits are ordered by player_id asc so ranks are always 1..k.
    """
    ordered = sorted(entries, key=lambda e: (-profit_cents(e), e.player_id))
    results: List[NightResult] = []
    for rank, e in enumerate(ordered, start=1):
        p = profit_cents(e)
        results.append(
            NightResult(
                player_id=e.player_id,
                name=e.name,
                buy_in_cents=e.buy_in_cents,
                cash_out_cents=e.cash_out_cents or 0,
                profit_cents=p,
                rank=rank,
                night_score=night_score(p, e.buy_in_cents),
                podium_points=podium_points_for(rank),
            )
        )
    return results


def evaluate_nights(nights: Iterable[LedgerNight]) -> Dict[int, List[NightResult]]:
    """{night_id: results}; each night is evaluated independently."""
    return {n.id: evaluate_night(n.entries) for n in nights}
