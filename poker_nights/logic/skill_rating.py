# poker_nights/logic/skill_rating.py
from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from itertools import combinations
from typing import Dict, Iterable, List, Mapping

from .night_evaluator import profit_cents
from .types import LedgerNight, chronological

BASELINE_RATING = 1500.0
K_FACTOR = 32.0


@dataclass(frozen=True)
class SkillRating:
    player_id: int
    name: str
    rating: float
    change_last_n: float


def expected_score(rating: float, opponent: float) -> float:
    """Classic Elo expectation of `rating` against `opponent`."""
    return 1.0 / (1.0 + 10.0 ** ((opponent - rating) / 400.0))


def pair_outcome(profit: int, opponent_profit: int) -> float:
    if profit > opponent_profit:
        return 1.0
    if profit < opponent_profit:
        return 0.0
    return 0.5


def rate_night(ratings: Mapping[int, float], night: LedgerNight, k: float = K_FACTOR) -> Dict[int, float]:
    """
    One step of the fold: returns a new rating map after `night`.

    Every unordered pair is scored against the pre-night ratings and the
    summed deltas are applied at once, so pair order inside a night is irrelevant.
    """
    before = dict(ratings)
    for e in night.entries:
        before.setdefault(e.player_id, BASELINE_RATING)

    deltas: Dict[int, float] = {e.player_id: 0.0 for e in night.entries}
    for a, b in combinations(night.entries, 2):
        ra, rb = before[a.player_id], before[b.player_id]
        sa = pair_outcome(profit_cents(a), profit_cents(b))
        deltas[a.player_id] += k * (sa - expected_score(ra, rb))
        deltas[b.player_id] += k * ((1.0 - sa) - expected_score(rb, ra))

    after = dict(before)
    for pid, delta in deltas.items():
        after[pid] = before[pid] + delta
    return after


def replay(nights: Iterable[LedgerNight], ratings: Mapping[int, float] | None = None) -> Dict[int, float]:
    """Left fold of rate_night over nights in chronological order."""
    start: Dict[int, float] = dict(ratings or {})
    return reduce(rate_night, chronological(nights), start)


def skill_ratings(nights: Iterable[LedgerNight], last_n: int) -> List[SkillRating]:
    """
    Ratings after replaying every night, plus the change over the last `last_n`
    nights (final rating minus the snapshot taken before those nights).
    Players who never sat at a table are absent.
    """
    ordered = chronological(nights)
    if not ordered:
        return []

    split = max(0, len(ordered) - last_n)
    before = replay(ordered[:split])
    final = replay(ordered[split:], before)

    names: Dict[int, str] = {}
    for n in ordered:
        for e in n.entries:
            names[e.player_id] = e.name

    rows = [
        SkillRating(
            player_id=pid,
            name=names.get(pid, f"Player {pid}"),
            rating=rating,
            change_last_n=rating - before.get(pid, BASELINE_RATING),
        )
        for pid, rating in final.items()
    ]
    rows.sort(key=lambda r: (-r.rating, r.player_id))
    return rows
