# poker_nights/routers/nights.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models
from ..db import get_db
from ..logic.records import night_detail, night_rows
from ..schemas import NightRow, StatsFilters
from ..services.filters import get_stats_filters
from ..services.ledger import load_night, load_snapshot

router = APIRouter(prefix="/nights", tags=["nights"])


@router.get("/{group_id}")
def list_nights(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> list[dict[str, Any]]:
    """Night table for the filtered ledger, newest first."""
    group = db.get(models.Group, group_id)
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")

    snap = load_snapshot(db, group, filters)
    return [NightRow.model_validate(r).model_dump() for r in night_rows(snap.nights)]


@router.get("/{group_id}/{night_id}")
def get_night(group_id: int, night_id: int, db: Session = Depends(get_db)) -> dict[str, Any]:
    """
    One night with every participant's result.
    Open nights are shown too; unresolved cash-outs count as 0.
    """
    group = db.get(models.Group, group_id)
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")

    night = load_night(db, group_id, night_id)
    if night is None:
        raise HTTPException(status_code=404, detail="Night not found")
    return night_detail(night)
