# poker_nights/services/ledger.py
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from .. import models
from ..logic.types import LedgerEntry, LedgerNight, LedgerPlayer, LedgerSeason, LedgerSnapshot
from ..schemas import StatsFilters
from .periods import resolve_date_bounds

logger = logging.getLogger("poker_nights.ledger")


def _status(night: models.Night) -> str:
    return night.status.value if hasattr(night.status, "value") else str(night.status)


def to_ledger_night(night: models.Night) -> LedgerNight:
    entries = tuple(
        LedgerEntry(
            player_id=p.player_id,
            name=p.player.name if p.player else f"Player {p.player_id}",
            buy_in_cents=p.buy_in_cents or 0,
            cash_out_cents=p.cash_out_cents,
            adjustment_cents=p.adjustment_cents or 0,
        )
        for p in sorted(night.participations, key=lambda p: p.player_id)
    )
    return LedgerNight(
        id=night.id,
        name=night.name,
        scheduled_at=night.scheduled_at,
        status=_status(night),
        season_id=night.season_id,
        entries=entries,
    )


def load_snapshot(
    db: Session,
    group: models.Group,
    filters: StatsFilters | None = None,
    now: datetime | None = None,
) -> LedgerSnapshot:
    """
    Materialize one group's ledger as immutable records, pre-filtered.

    - nights: CLOSED only unless include_draft_nights; season / date range applied
    - every participant of a night is kept, so ranks see the whole table
    - roster: guests dropped when include_guest_players is off
    """
    filters = filters or StatsFilters()
    start, end = resolve_date_bounds(filters.date_range, filters.date_from, filters.date_to, now=now)

    q = (
        select(models.Night)
        .where(models.Night.group_id == group.id)
        .options(selectinload(models.Night.participations).selectinload(models.Participation.player))
        .order_by(models.Night.scheduled_at.asc(), models.Night.id.asc())
    )
    if not filters.include_draft_nights:
        q = q.where(models.Night.status == models.NightStatus.CLOSED)
    if filters.season_id is not None:
        q = q.where(models.Night.season_id == filters.season_id)
    if start is not None:
        q = q.where(models.Night.scheduled_at >= start)
    if end is not None:
        q = q.where(models.Night.scheduled_at <= end)
    nights = tuple(to_ledger_night(n) for n in db.scalars(q).all())

    pq = select(models.Player).where(models.Player.group_id == group.id).order_by(models.Player.id.asc())
    if not filters.include_guest_players:
        pq = pq.where(models.Player.is_guest.is_(False))
    players = tuple(LedgerPlayer(id=p.id, name=p.name, is_guest=p.is_guest) for p in db.scalars(pq).all())

    sq = select(models.Season).where(models.Season.group_id == group.id)
    if filters.season_id is not None:
        sq = sq.where(models.Season.id == filters.season_id)
    seasons = tuple(
        LedgerSeason(id=s.id, name=s.name, starts_at=s.starts_at, ends_at=s.ends_at)
        for s in db.scalars(sq.order_by(models.Season.starts_at.asc(), models.Season.id.asc())).all()
    )

    logger.debug(
        "snapshot group=%s players=%d seasons=%d nights=%d",
        group.id,
        len(players),
        len(seasons),
        len(nights),
    )
    return LedgerSnapshot(
        group_id=group.id,
        group_name=group.name,
        players=players,
        seasons=seasons,
        nights=nights,
    )


def load_night(db: Session, group_id: int, night_id: int) -> LedgerNight | None:
    """A single night of the group (any status), or None."""
    night = db.get(models.Night, night_id)
    if night is None or night.group_id != group_id:
        return None
    return to_ledger_night(night)
