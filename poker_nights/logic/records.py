# poker_nights/logic/records.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from ..utils.num import half_up, safe_ratio
from .aggregation import PlayerPeriodStats
from .night_evaluator import NightResult, evaluate_night, evaluate_nights, profit_cents
from .types import LedgerNight, LedgerPlayer, chronological

OVERVIEW_RECENT_NIGHTS = 10
OVERVIEW_RECENT_DAYS = 30
DOMINATED_SHARE = 0.45
RECENT_ACTIVITY_NIGHTS = 5
ACTIVITY_POINTS_ALL = 100
ACTIVITY_POINTS_RANGED = 50
DISTRIBUTION_BUCKETS = 10


# ---------- Night table ----------


def rebuys_estimate(buy_in_cents: int) -> int:
    """Each started $1 past the first counts as a rebuy."""
    return max(0, math.ceil(buy_in_cents / 100) - 1)


def _winner(results: List[NightResult]) -> Optional[NightResult]:
    return results[0] if results else None


def _loser(results: List[NightResult]) -> Optional[NightResult]:
    # deepest loss; ranks are profit desc so the last one is the biggest loser
    if not results or results[-1].profit_cents >= 0:
        return None
    worst = min(r.profit_cents for r in results)
    return next(r for r in results if r.profit_cents == worst)


def night_row(night: LedgerNight, results: List[NightResult] | None = None) -> Dict[str, Any]:
    if results is None:
        results = evaluate_night(night.entries)
    winner = _winner(results)
    loser = _loser(results)
    return {
        "game_id": night.id,
        "date": night.scheduled_at,
        "status": night.status,
        "pot_cents": night.pot_cents,
        "players_count": len(night.entries),
        "biggest_winner_name": winner.name if winner else None,
        "biggest_winner_player_id": winner.player_id if winner else None,
        "biggest_winner_profit_cents": winner.profit_cents if winner else None,
        "biggest_loser_name": loser.name if loser else None,
        "biggest_loser_player_id": loser.player_id if loser else None,
        "biggest_loser_loss_cents": -loser.profit_cents if loser else None,
        "rebuys_count": sum(rebuys_estimate(e.buy_in_cents) for e in night.entries),
    }


def night_rows(
    nights: Iterable[LedgerNight],
    evaluations: Mapping[int, List[NightResult]] | None = None,
) -> List[Dict[str, Any]]:
    """Night table, newest first."""
    nights = list(nights)
    if evaluations is None:
        evaluations = evaluate_nights(nights)
    ordered = sorted(nights, key=lambda n: (n.scheduled_at, n.id), reverse=True)
    return [night_row(n, evaluations[n.id]) for n in ordered]


def night_detail(night: LedgerNight) -> Dict[str, Any]:
    results = evaluate_night(night.entries)
    pot = night.pot_cents
    entries = [
        {
            "player_id": r.player_id,
            "name": r.name,
            "buy_in_cents": r.buy_in_cents,
            "cash_out_cents": r.cash_out_cents,
            "profit_cents": r.profit_cents,
            "rank": r.rank,
            "night_score": r.night_score,
            "podium_points": r.podium_points,
            "roi": r.roi,
            "table_share": safe_ratio(r.buy_in_cents, pot),
        }
        for r in results
    ]

    with_roi = [r for r in sorted(results, key=lambda r: r.player_id) if r.roi is not None]
    top_roi = max(with_roi, key=lambda r: r.roi) if with_roi else None

    detail = night_row(night, results)
    detail.update(
        {
            "name": night.name,
            "season_id": night.season_id,
            "entries": entries,
            "highest_roi": (
                {"player_id": top_roi.player_id, "name": top_roi.name, "roi": top_roi.roi} if top_roi else None
            ),
        }
    )
    return detail


# ---------- League overview ----------


def league_overview(nights: Iterable[LedgerNight], today: date) -> Dict[str, Any]:
    nights = chronological(nights)
    pots = [n.pot_cents for n in nights]
    total = len(nights)

    recent_pots = pots[-OVERVIEW_RECENT_NIGHTS:]
    cutoff = today - timedelta(days=OVERVIEW_RECENT_DAYS)

    everyone = set()
    recent_players = set()
    seats = 0
    for n in nights:
        ids = {e.player_id for e in n.entries}
        everyone |= ids
        seats += len(ids)
        if n.scheduled_at.date() >= cutoff:
            recent_players |= ids

    return {
        "total_nights": total,
        "total_pot_cents": sum(pots),
        "average_pot_cents": half_up(sum(pots) / total) if total else 0,
        "average_pot_last_10_cents": half_up(sum(recent_pots) / len(recent_pots)) if recent_pots else None,
        "largest_pot_cents": max(pots) if pots else 0,
        "unique_players_all_time": len(everyone),
        "unique_players_last_30_days": len(recent_players),
        "average_players_per_night": half_up(seats * 100 / total) / 100 if total else 0.0,
    }


def activity_trend(nights: Iterable[LedgerNight], date_range: str = "all") -> List[Dict[str, Any]]:
    """One point per night, oldest first; the last 100 nights for "all", else the last 50."""
    limit = ACTIVITY_POINTS_ALL if date_range == "all" else ACTIVITY_POINTS_RANGED
    return [
        {
            "date": n.scheduled_at.date().isoformat(),
            "pot_cents": n.pot_cents,
            "players_count": len(n.entries),
        }
        for n in chronological(nights)[-limit:]
    ]


def recent_activity(
    nights: Iterable[LedgerNight],
    evaluations: Mapping[int, List[NightResult]] | None = None,
    limit: int = RECENT_ACTIVITY_NIGHTS,
) -> List[Dict[str, Any]]:
    """The latest `limit` nights, newest first, each with its biggest winner."""
    latest = list(reversed(chronological(nights)))[:limit]
    if evaluations is None:
        evaluations = evaluate_nights(latest)

    feed: List[Dict[str, Any]] = []
    for n in latest:
        winner = _winner(evaluations[n.id])
        feed.append(
            {
                "game_id": n.id,
                "date": n.scheduled_at,
                "pot_cents": n.pot_cents,
                "players_count": len(n.entries),
                "biggest_winner_name": winner.name if winner else None,
                "biggest_winner_player_id": winner.player_id if winner else None,
                "biggest_winner_profit_cents": winner.profit_cents if winner else None,
            }
        )
    return feed


# ---------- Distributions ----------


def _buckets(values: List[float], label) -> List[Dict[str, Any]]:
    """
    Histogram with a whole-number bucket width of ceil(spread / 10), at least 1.
    Buckets are floored multiples of the width, ascending; empty ones are omitted.
    """
    if not values:
        return []
    width = max(1, math.ceil((max(values) - min(values)) / DISTRIBUTION_BUCKETS))
    counts: Dict[int, int] = {}
    for v in values:
        bucket = math.floor(v / width) * width
        counts[bucket] = counts.get(bucket, 0) + 1
    return [{"label": label(b), "count": counts[b]} for b in sorted(counts)]


def distributions(players: Iterable[PlayerPeriodStats]) -> Dict[str, Any]:
    """Profit (dollars) and ROI (percent) histograms plus the share of players in profit."""
    players = list(players)
    profitable = sum(1 for p in players if p.total_profit_cents > 0)
    return {
        "profit_buckets": _buckets([p.total_profit_cents / 100 for p in players], lambda b: f"${b}"),
        "roi_buckets": _buckets([p.roi * 100 for p in players if p.roi is not None], lambda b: f"{b}%"),
        "percent_profitable": profitable / len(players) * 100 if players else 0.0,
    }


# ---------- Streaks ----------


@dataclass(frozen=True)
class StreakRow:
    player_id: int
    name: str
    current_win_streak: int
    longest_win_streak: int
    current_losing_streak: int
    longest_losing_streak: int

    @property
    def current_streak(self) -> int:
        """Signed: +n for a win run, -n for a losing run, 0 otherwise."""
        if self.current_win_streak:
            return self.current_win_streak
        return -self.current_losing_streak


def streak_for(player_id: int, name: str, profits: Iterable[int]) -> StreakRow:
    """Walk profits oldest first; a break-even night resets both runs."""
    win = lose = best_win = best_lose = 0
    for p in profits:
        if p > 0:
            win, lose = win + 1, 0
        elif p < 0:
            win, lose = 0, lose + 1
        else:
            win = lose = 0
        best_win = max(best_win, win)
        best_lose = max(best_lose, lose)
    return StreakRow(player_id, name, win, best_win, lose, best_lose)


def streaks(roster: Iterable[LedgerPlayer], nights: Iterable[LedgerNight]) -> List[StreakRow]:
    """Streak table for roster players; players with no nights are left out."""
    history: Dict[int, List[int]] = {}
    for n in chronological(nights):
        for e in n.entries:
            history.setdefault(e.player_id, []).append(profit_cents(e))

    rows: List[StreakRow] = []
    for p in roster:
        if p.id not in history:
            continue
        rows.append(streak_for(p.id, p.name, history[p.id]))
    rows.sort(key=lambda r: (-r.longest_win_streak, -r.current_win_streak, r.player_id))
    return rows


# ---------- Records ----------


def records(
    nights: Iterable[LedgerNight],
    streak_rows: Iterable[StreakRow],
    evaluations: Mapping[int, List[NightResult]] | None = None,
    player_ids: Optional[Set[int]] = None,
) -> Dict[str, Any]:
    """
    League records; each entry is None when nothing qualifies.
    Player records only consider `player_ids` when given.
    """
    nights = chronological(nights)
    if evaluations is None:
        evaluations = evaluate_nights(nights)

    best_profit: Optional[Dict[str, Any]] = None
    worst_loss: Optional[Dict[str, Any]] = None
    largest_pot: Optional[Dict[str, Any]] = None

    for n in nights:
        for r in sorted(evaluations[n.id], key=lambda r: r.player_id):
            if player_ids is not None and r.player_id not in player_ids:
                continue
            if r.profit_cents > 0 and (best_profit is None or r.profit_cents > best_profit["profit_cents"]):
                best_profit = {
                    "player_id": r.player_id,
                    "name": r.name,
                    "game_id": n.id,
                    "date": n.scheduled_at,
                    "profit_cents": r.profit_cents,
                }
            if r.profit_cents < 0 and (worst_loss is None or -r.profit_cents > worst_loss["loss_cents"]):
                worst_loss = {
                    "player_id": r.player_id,
                    "name": r.name,
                    "game_id": n.id,
                    "date": n.scheduled_at,
                    "loss_cents": -r.profit_cents,
                }
        if n.entries and (largest_pot is None or n.pot_cents > largest_pot["pot_cents"]):
            largest_pot = {"game_id": n.id, "date": n.scheduled_at, "pot_cents": n.pot_cents}

    rows = sorted(streak_rows, key=lambda r: r.player_id)
    win_row = max(rows, key=lambda r: r.longest_win_streak, default=None)
    lose_row = max(rows, key=lambda r: r.longest_losing_streak, default=None)

    return {
        "biggest_single_night_profit": best_profit,
        "biggest_single_night_loss": worst_loss,
        "largest_pot_night": largest_pot,
        "longest_winning_streak": (
            {"player_id": win_row.player_id, "name": win_row.name, "streak": win_row.longest_win_streak}
            if win_row and win_row.longest_win_streak > 0
            else None
        ),
        "longest_losing_streak": (
            {"player_id": lose_row.player_id, "name": lose_row.name, "streak": lose_row.longest_losing_streak}
            if lose_row and lose_row.longest_losing_streak > 0
            else None
        ),
    }


# ---------- Competitiveness ----------


def competitiveness(players: Iterable[PlayerPeriodStats]) -> Dict[str, Any]:
    """
    How concentrated the winnings are: share of all positive profit held by
    the top winner and by the top three.
    """
    winners = sorted(
        (p for p in players if p.total_profit_cents > 0),
        key=lambda p: (-p.total_profit_cents, p.player_id),
    )
    pool = sum(p.total_profit_cents for p in winners)
    top1 = safe_ratio(winners[0].total_profit_cents, pool) if winners else None
    top3 = safe_ratio(sum(p.total_profit_cents for p in winners[:3]), pool) if winners else None
    return {
        "positive_profit_pool_cents": pool,
        "top1_share": top1,
        "top3_share": top3,
        "top1_player_id": winners[0].player_id if winners else None,
        "top1_name": winners[0].name if winners else None,
        "badge": "Dominated" if top1 is not None and top1 > DOMINATED_SHARE else "Competitive",
    }
