# poker_nights/logic/profile.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..schemas import PlayerRow
from ..utils.num import safe_ratio
from .aggregation import PlayerPeriodStats
from .night_evaluator import NightResult, evaluate_nights
from .records import streak_for
from .types import LedgerPlayer, LedgerSnapshot, chronological

RECENT_NIGHTS_LIMIT = 20


def stats_row(stats: PlayerPeriodStats) -> Dict[str, Any]:
    return PlayerRow.model_validate(stats).model_dump()


def player_profile(
    player: LedgerPlayer,
    snapshot: LedgerSnapshot,
    evaluations: Mapping[int, List[NightResult]] | None = None,
    recent_limit: int = RECENT_NIGHTS_LIMIT,
) -> Dict[str, Any]:
    """
    Everything about one player within the snapshot: totals, recent nights,
    per-season splits, best/worst night and streaks.
    A player who never played still gets a profile with empty sections.
    """
    nights = chronological(snapshot.nights)
    if evaluations is None:
        evaluations = evaluate_nights(nights)
    season_names = {s.id: s.name for s in snapshot.seasons}

    overall = PlayerPeriodStats(player_id=player.id, name=player.name)
    per_season: Dict[Optional[int], PlayerPeriodStats] = {}
    history: List[Dict[str, Any]] = []

    for n in nights:
        result = next((r for r in evaluations[n.id] if r.player_id == player.id), None)
        if result is None:
            continue
        overall.add(result)
        per_season.setdefault(n.season_id, PlayerPeriodStats(player_id=player.id, name=player.name)).add(result)
        history.append(
            {
                "game_id": n.id,
                "date": n.scheduled_at,
                "season_id": n.season_id,
                "season_name": season_names.get(n.season_id),
                "pot_cents": n.pot_cents,
                "buy_in_cents": result.buy_in_cents,
                "cash_out_cents": result.cash_out_cents,
                "profit_cents": result.profit_cents,
                "rank": result.rank,
                "night_score": result.night_score,
                "roi": result.roi,
                "table_share": safe_ratio(result.buy_in_cents, n.pot_cents),
            }
        )

    seasons: List[Dict[str, Any]] = []
    for s in sorted(snapshot.seasons, key=lambda s: (s.starts_at, s.id), reverse=True):
        split = per_season.get(s.id)
        if split is None:
            continue
        seasons.append({"season_id": s.id, "season_name": s.name, **stats_row(split)})
    seasons.append({"season_id": None, "season_name": "All time", **stats_row(overall)})

    current_season = None
    if history:
        latest = history[-1]
        split = per_season.get(latest["season_id"])
        if latest["season_id"] is not None and split is not None:
            current_season = {
                "season_id": latest["season_id"],
                "season_name": latest["season_name"],
                "profit_cents": split.total_profit_cents,
                "roi": split.roi,
            }

    # strictly positive / strictly negative; earliest night wins ties
    best = max((h for h in history if h["profit_cents"] > 0), key=lambda h: h["profit_cents"], default=None)
    worst = min((h for h in history if h["profit_cents"] < 0), key=lambda h: h["profit_cents"], default=None)

    streak = streak_for(player.id, player.name, [h["profit_cents"] for h in history])

    return {
        "player": {"player_id": player.id, "name": player.name, "is_guest": player.is_guest},
        "totals": stats_row(overall),
        "recent_nights": list(reversed(history))[:recent_limit],
        "seasons": seasons,
        "current_season": current_season,
        "best_night": best,
        "worst_night": worst,
        "current_streak": streak.current_streak,
        "longest_win_streak": streak.longest_win_streak,
        "longest_losing_streak": streak.longest_losing_streak,
    }
