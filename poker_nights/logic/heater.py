# poker_nights/logic/heater.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from ..utils.num import safe_ratio
from .night_evaluator import profit_cents
from .types import LedgerEntry, LedgerNight

# A "heater": better than +50% on a stake of $20 or less
HEATER_ROI_THRESHOLD = 0.5
HEATER_MAX_BUY_IN_CENTS = 2000


@dataclass(frozen=True)
class HeaterRow:
    player_id: int
    name: str
    heater_night_count: int


def is_heater(entry: LedgerEntry) -> bool:
    if entry.buy_in_cents > HEATER_MAX_BUY_IN_CENTS:
        return False
    roi = safe_ratio(profit_cents(entry), entry.buy_in_cents)
    return roi is not None and roi > HEATER_ROI_THRESHOLD


def heater_index(nights: Iterable[LedgerNight]) -> List[HeaterRow]:
    """Heater-night counts per player; players with none are omitted."""
    counts: Dict[int, int] = {}
    names: Dict[int, str] = {}
    for n in nights:
        for e in n.entries:
            if is_heater(e):
                counts[e.player_id] = counts.get(e.player_id, 0) + 1
                names[e.player_id] = e.name

    rows = [HeaterRow(player_id=pid, name=names[pid], heater_night_count=c) for pid, c in counts.items()]
    rows.sort(key=lambda r: (-r.heater_night_count, r.player_id))
    return rows
