# poker_nights/routers/players.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models
from ..db import get_db
from ..logic.aggregation import aggregate_players
from ..logic.profile import player_profile
from ..logic.types import LedgerPlayer
from ..schemas import PlayerRow, StatsFilters
from ..services.filters import get_stats_filters
from ..services.ledger import load_snapshot

router = APIRouter(prefix="/players", tags=["players"])


@router.get("/{group_id}")
def list_players(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> list[dict[str, Any]]:
    """Roster with all-time rows; every player is listed, eligible or not."""
    group = db.get(models.Group, group_id)
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")

    snap = load_snapshot(db, group, filters)
    rows = aggregate_players(snap.players, snap.nights)
    return [PlayerRow.model_validate(r).model_dump() for r in rows]


@router.get("/{group_id}/{player_id}/profile")
def get_profile(
    group_id: int,
    player_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    group = db.get(models.Group, group_id)
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    player = db.get(models.Player, player_id)
    if not player or player.group_id != group_id:
        raise HTTPException(status_code=404, detail="Player not found")

    snap = load_snapshot(db, group, filters)
    me = LedgerPlayer(id=player.id, name=player.name, is_guest=player.is_guest)
    return {"group_id": group_id, **player_profile(me, snap)}
