# poker_nights/logic/aggregation.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

from ..utils.num import rate, roi_weighted_score, safe_ratio
from .night_evaluator import NightResult, evaluate_nights
from .types import LedgerNight, LedgerPlayer


@dataclass
class PlayerPeriodStats:
    """
    Running totals for one player over one scope (all-time, a season, a window).
    Ratios are derived on read so a zero-night player keeps 0/None defaults.
    """

    player_id: int
    name: str
    total_games: int = 0
    total_buy_in_cents: int = 0
    total_cash_out_cents: int = 0
    total_profit_cents: int = 0
    nights_won: int = 0
    podium_points: int = 0
    nights_in_profit: int = 0
    best_night_profit_cents: Optional[int] = None
    worst_night_profit_cents: Optional[int] = None

    def add(self, result: NightResult) -> None:
        self.total_games += 1
        self.total_buy_in_cents += result.buy_in_cents
        self.total_cash_out_cents += result.cash_out_cents
        self.total_profit_cents += result.profit_cents
        if result.rank == 1:
            self.nights_won += 1
        self.podium_points += result.podium_points
        if result.profit_cents > 0:
            self.nights_in_profit += 1
        if self.best_night_profit_cents is None or result.profit_cents > self.best_night_profit_cents:
            self.best_night_profit_cents = result.profit_cents
        if self.worst_night_profit_cents is None or result.profit_cents < self.worst_night_profit_cents:
            self.worst_night_profit_cents = result.profit_cents

    @property
    def roi(self) -> float | None:
        return safe_ratio(self.total_profit_cents, self.total_buy_in_cents)

    @property
    def win_rate(self) -> float:
        return rate(self.nights_won, self.total_games)

    @property
    def consistency(self) -> float:
        return rate(self.nights_in_profit, self.total_games)

    @property
    def season_score(self) -> float | None:
        return roi_weighted_score(self.total_profit_cents, self.total_buy_in_cents)


def profit_order(rows: Iterable[PlayerPeriodStats]) -> List[PlayerPeriodStats]:
    """Leaderboard order: total profit desc, then player_id asc."""
    return sorted(rows, key=lambda s: (-s.total_profit_cents, s.player_id))


def aggregate_by_player(
    roster: Iterable[LedgerPlayer],
    nights: Iterable[LedgerNight],
    evaluations: Mapping[int, List[NightResult]] | None = None,
    include_idle: bool = True,
) -> Dict[int, PlayerPeriodStats]:
    """
    Fold every night's results into per-player totals.

    Only roster players are tracked (results for anyone else are skipped).
    With include_idle, roster players without a night still get a zero row.
    """
    nights = list(nights)
    if evaluations is None:
        evaluations = evaluate_nights(nights)

    stats: Dict[int, PlayerPeriodStats] = {
        p.id: PlayerPeriodStats(player_id=p.id, name=p.name) for p in roster
    }

    for n in nights:
        for result in evaluations.get(n.id, []):
            rec = stats.get(result.player_id)
            if rec is None:
                continue
            rec.add(result)

    if not include_idle:
        stats = {pid: rec for pid, rec in stats.items() if rec.total_games > 0}
    return stats


def aggregate_players(
    roster: Iterable[LedgerPlayer],
    nights: Iterable[LedgerNight],
    evaluations: Mapping[int, List[NightResult]] | None = None,
    include_idle: bool = True,
) -> List[PlayerPeriodStats]:
    """Per-player totals as a leaderboard-ordered list."""
    return profit_order(aggregate_by_player(roster, nights, evaluations, include_idle).values())
