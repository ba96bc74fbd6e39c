# poker_nights/logic/rolling_form.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping

from .aggregation import PlayerPeriodStats
from .night_evaluator import NightResult, evaluate_nights
from .types import LedgerNight, LedgerPlayer


@dataclass(frozen=True)
class RollingFormRow:
    player_id: int
    name: str
    profit_last_n: int
    roi_last_n: float | None
    games_last_n: int
    trend_direction: str  # "up" | "down" | "flat"


def player_nights(player_id: int, nights: Iterable[LedgerNight]) -> List[LedgerNight]:
    """The player's nights, most recent first."""
    played = [n for n in nights if n.entry_for(player_id) is not None]
    played.sort(key=lambda n: (n.scheduled_at, n.id), reverse=True)
    return played


def window_stats(
    player: LedgerPlayer,
    nights: Iterable[LedgerNight],
    n: int,
    offset: int = 0,
    evaluations: Mapping[int, List[NightResult]] | None = None,
) -> PlayerPeriodStats:
    """
    Aggregate the player's `n` most recent nights, skipping the newest `offset`.
    Fewer than n nights of history just yields a shorter window.
    """
    window = player_nights(player.id, nights)[offset : offset + n]
    if evaluations is None:
        evaluations = evaluate_nights(window)

    stats = PlayerPeriodStats(player_id=player.id, name=player.name)
    # oldest first so best/worst tracking matches a full-history fold
    for night in reversed(window):
        for result in evaluations[night.id]:
            if result.player_id == player.id:
                stats.add(result)
    return stats


def trend_direction(current: PlayerPeriodStats, previous: PlayerPeriodStats) -> str:
    now, before = current.roi, previous.roi
    if now is None or before is None:
        return "flat"
    if now > before:
        return "up"
    if now < before:
        return "down"
    return "flat"


def rolling_form(
    roster: Iterable[LedgerPlayer],
    nights: Iterable[LedgerNight],
    n: int,
    evaluations: Mapping[int, List[NightResult]] | None = None,
) -> List[RollingFormRow]:
    """
    Form table over each player's last n nights, trend vs. the n before that.
    Players without a night in range are left out.
    """
    nights = list(nights)
    if evaluations is None:
        evaluations = evaluate_nights(nights)

    rows: List[RollingFormRow] = []
    for player in roster:
        current = window_stats(player, nights, n, 0, evaluations)
        if current.total_games == 0:
            continue
        previous = window_stats(player, nights, n, n, evaluations)
        rows.append(
            RollingFormRow(
                player_id=player.id,
                name=player.name,
                profit_last_n=current.total_profit_cents,
                roi_last_n=current.roi,
                games_last_n=current.total_games,
                trend_direction=trend_direction(current, previous),
            )
        )

    rows.sort(key=lambda r: (-r.profit_last_n, r.player_id))
    return rows
