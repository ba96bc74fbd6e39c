# poker_nights/logic/seasons.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..utils.num import half_up
from .aggregation import PlayerPeriodStats, aggregate_players
from .night_evaluator import NightResult, evaluate_nights, profit_cents
from .types import LedgerNight, LedgerPlayer, LedgerSeason, LedgerSnapshot


@dataclass
class SeasonSummary:
    season_id: int
    name: str
    starts_at: datetime
    ends_at: Optional[datetime]
    total_games: int = 0
    total_buy_in_cents: int = 0
    total_cash_out_cents: int = 0
    total_profit_cents: int = 0
    players: List[PlayerPeriodStats] = field(default_factory=list)
    top_winner: Optional[Dict[str, Any]] = None
    best_roi: Optional[Dict[str, Any]] = None
    best_performer: Optional[Dict[str, Any]] = None

    @property
    def total_pot_cents(self) -> int:
        # pot = every buy-in on the table
        return self.total_buy_in_cents

    @property
    def avg_pot_cents(self) -> int:
        return half_up(self.total_pot_cents / self.total_games) if self.total_games > 0 else 0


# ---------- Season-scoped bests ----------


def _by_id(players: Iterable[PlayerPeriodStats]) -> List[PlayerPeriodStats]:
    return sorted(players, key=lambda p: p.player_id)


def season_top_winner(players: Iterable[PlayerPeriodStats]) -> Optional[Dict[str, Any]]:
    played = [p for p in _by_id(players) if p.total_games > 0]
    if not played:
        return None
    best = max(played, key=lambda p: p.total_profit_cents)
    return {"player_id": best.player_id, "name": best.name, "profit_cents": best.total_profit_cents}


def season_best_roi(players: Iterable[PlayerPeriodStats]) -> Optional[Dict[str, Any]]:
    eligible = [p for p in _by_id(players) if p.total_games >= 1 and p.roi is not None]
    if not eligible:
        return None
    best = max(eligible, key=lambda p: p.roi)
    return {"player_id": best.player_id, "name": best.name, "roi": best.roi}


def season_best_performer(players: Iterable[PlayerPeriodStats]) -> Optional[Dict[str, Any]]:
    eligible = [p for p in _by_id(players) if p.season_score is not None]
    if not eligible:
        return None
    best = max(eligible, key=lambda p: p.season_score)
    return {"player_id": best.player_id, "name": best.name, "season_score": best.season_score}


# ---------- Aggregation ----------


def summarize_season(
    season: LedgerSeason,
    nights: Iterable[LedgerNight],
    roster: Iterable[LedgerPlayer],
    evaluations: Mapping[int, List[NightResult]] | None = None,
) -> SeasonSummary:
    """
    Re-run the player fold on this season's nights only.
    Totals are table-wide (every entry), players are roster players who played.
    """
    season_nights = [n for n in nights if n.season_id == season.id]
    if evaluations is None:
        evaluations = evaluate_nights(season_nights)

    summary = SeasonSummary(
        season_id=season.id,
        name=season.name,
        starts_at=season.starts_at,
        ends_at=season.ends_at,
    )
    for n in season_nights:
        summary.total_games += 1
        for e in n.entries:
            summary.total_buy_in_cents += e.buy_in_cents
            summary.total_cash_out_cents += e.cash_out_cents or 0
            summary.total_profit_cents += profit_cents(e)

    summary.players = aggregate_players(roster, season_nights, evaluations, include_idle=False)
    summary.top_winner = season_top_winner(summary.players)
    summary.best_roi = season_best_roi(summary.players)
    summary.best_performer = season_best_performer(summary.players)
    return summary


def summarize_seasons(
    snapshot: LedgerSnapshot,
    evaluations: Mapping[int, List[NightResult]] | None = None,
) -> List[SeasonSummary]:
    """Every season of the group (even empty ones), newest first."""
    if evaluations is None:
        evaluations = evaluate_nights(snapshot.nights)
    summaries = [
        summarize_season(s, snapshot.nights, snapshot.players, evaluations) for s in snapshot.seasons
    ]
    summaries.sort(key=lambda s: (s.starts_at, s.season_id), reverse=True)
    return summaries


def season_table_row(summary: SeasonSummary) -> Dict[str, Any]:
    top = summary.top_winner
    best = summary.best_roi
    return {
        "season_id": summary.season_id,
        "name": summary.name,
        "starts_at": summary.starts_at,
        "ends_at": summary.ends_at,
        "nights": summary.total_games,
        "total_pot_cents": summary.total_pot_cents,
        "avg_pot_cents": summary.avg_pot_cents,
        "players_participated": len(summary.players),
        "most_profitable_player_name": top["name"] if top else None,
        "most_profitable_player_id": top["player_id"] if top else None,
        "most_profitable_profit_cents": top["profit_cents"] if top else None,
        "best_roi_player_name": best["name"] if best else None,
        "best_roi_player_id": best["player_id"] if best else None,
        "best_roi": best["roi"] if best else None,
    }


def top_n_lists(players: Iterable[PlayerPeriodStats], n: int) -> Dict[str, List[PlayerPeriodStats]]:
    """Top-N series by ROI, profit, score and action (ties by player_id)."""
    players = _by_id(players)
    with_roi = [p for p in players if p.roi is not None]
    with_score = [p for p in players if p.season_score is not None]
    return {
        "top_roi": sorted(with_roi, key=lambda p: p.roi, reverse=True)[:n],
        "top_profit": sorted(players, key=lambda p: p.total_profit_cents, reverse=True)[:n],
        "top_score": sorted(with_score, key=lambda p: p.season_score, reverse=True)[:n],
        "top_action": sorted(players, key=lambda p: p.total_buy_in_cents, reverse=True)[:n],
        "top_podium": sorted(players, key=lambda p: p.podium_points, reverse=True)[:n],
    }
