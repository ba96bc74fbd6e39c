# poker_nights/logic/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

# ---------------------------------------------------------------------------
# Immutable ledger snapshot consumed by the stats engine.
# Built once per request by services.ledger; never written back.
# ---------------------------------------------------------------------------

OPEN = "OPEN"
CLOSED = "CLOSED"


@dataclass(frozen=True)
class LedgerPlayer:
    id: int
    name: str
    is_guest: bool = False


@dataclass(frozen=True)
class LedgerSeason:
    id: int
    name: str
    starts_at: datetime
    ends_at: datetime | None = None


@dataclass(frozen=True)
class LedgerEntry:
    """One participation: a player's buy-in / cash-out / adjustment for a night."""

    player_id: int
    name: str
    buy_in_cents: int
    cash_out_cents: int | None = None
    adjustment_cents: int = 0


@dataclass(frozen=True)
class LedgerNight:
    id: int
    name: str
    scheduled_at: datetime
    status: str = CLOSED
    season_id: int | None = None
    entries: tuple[LedgerEntry, ...] = ()

    @property
    def pot_cents(self) -> int:
        # every buy-in on the table
        return sum(e.buy_in_cents for e in self.entries)

    def entry_for(self, player_id: int) -> LedgerEntry | None:
        for e in self.entries:
            if e.player_id == player_id:
                return e
        return None


@dataclass(frozen=True)
class LedgerSnapshot:
    group_id: int
    group_name: str
    players: tuple[LedgerPlayer, ...] = ()
    seasons: tuple[LedgerSeason, ...] = ()
    # chronological: scheduled_at asc, then id asc
    nights: tuple[LedgerNight, ...] = field(default_factory=tuple)

    @property
    def player_ids(self) -> frozenset[int]:
        return frozenset(p.id for p in self.players)


def chronological(nights) -> list[LedgerNight]:
    """Nights ordered oldest first; id breaks same-timestamp ties."""
    return sorted(nights, key=lambda n: (n.scheduled_at, n.id))
