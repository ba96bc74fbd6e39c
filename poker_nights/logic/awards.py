# poker_nights/logic/awards.py
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

from .aggregation import PlayerPeriodStats
from .seasons import SeasonSummary

# Win-rate leader needs a minimum sample
WIN_RATE_MIN_GAMES = 5

AWARD_KEYS = (
    "best_season",
    "best_player",
    "best_performer",
    "top_winner",
    "most_action",
    "podium_king",
    "nights_won_leader",
    "win_rate_leader",
)


def empty_awards() -> Dict[str, Any]:
    return {k: None for k in AWARD_KEYS}


def _leader(
    players: List[PlayerPeriodStats], metric: Callable[[PlayerPeriodStats], float]
) -> Optional[PlayerPeriodStats]:
    # max() keeps the first of equal values; callers pass players sorted by id
    if not players:
        return None
    return max(players, key=metric)


def _player_award(p: Optional[PlayerPeriodStats], **metrics: Any) -> Optional[Dict[str, Any]]:
    if p is None:
        return None
    return {"player_id": p.player_id, "name": p.name, **metrics}


def _best_season(seasons: List[SeasonSummary]) -> Optional[Dict[str, Any]]:
    played = [s for s in seasons if s.total_games > 0]
    if not played:
        return None
    best = max(played, key=lambda s: s.total_profit_cents)
    return {
        "season_id": best.season_id,
        "season_name": best.name,
        "total_profit_cents": best.total_profit_cents,
    }


def _best_in_any_season(
    seasons: List[SeasonSummary],
    metric: Callable[[PlayerPeriodStats], float | None],
    field: str,
) -> Optional[Dict[str, Any]]:
    """Highest per-season value across all seasons, tagged with the season name."""
    best: Optional[Dict[str, Any]] = None
    for s in seasons:
        for p in sorted(s.players, key=lambda x: x.player_id):
            value = metric(p)
            if p.total_games < 1 or value is None:
                continue
            if best is None or value > best[field]:
                best = {"player_id": p.player_id, "name": p.name, field: value, "season_name": s.name}
    return best


def compute_awards(players: Iterable[PlayerPeriodStats], seasons: Iterable[SeasonSummary]) -> Dict[str, Any]:
    """
    One winner per category by plain maximization.

    Ties go to the lowest player_id (seasons: earliest start, then id).
    Categories with no candidate are None.
    """
    candidates = sorted((p for p in players if p.total_games > 0), key=lambda p: p.player_id)
    season_list = sorted(seasons, key=lambda s: (s.starts_at, s.season_id))

    top = _leader(candidates, lambda p: p.total_profit_cents)
    action = _leader(candidates, lambda p: p.total_buy_in_cents)
    podium = _leader(candidates, lambda p: p.podium_points)
    won = _leader(candidates, lambda p: p.nights_won)
    win_rate = _leader([p for p in candidates if p.total_games >= WIN_RATE_MIN_GAMES], lambda p: p.win_rate)

    return {
        "best_season": _best_season(season_list),
        "best_player": _best_in_any_season(season_list, lambda p: p.roi, "roi"),
        "best_performer": _best_in_any_season(season_list, lambda p: p.season_score, "season_score"),
        "top_winner": _player_award(top, total_profit_cents=top.total_profit_cents if top else None),
        "most_action": _player_award(action, total_buy_in_cents=action.total_buy_in_cents if action else None),
        "podium_king": _player_award(podium, podium_points=podium.podium_points if podium else None),
        "nights_won_leader": _player_award(won, nights_won=won.nights_won if won else None),
        "win_rate_leader": _player_award(
            win_rate,
            win_rate=win_rate.win_rate if win_rate else None,
            games=win_rate.total_games if win_rate else None,
        ),
    }
