# poker_nights/routers/insights.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models
from ..db import get_db
from ..logic.aggregation import aggregate_by_player
from ..logic.eligibility import meets_eligibility
from ..logic.heater import heater_index
from ..logic.night_evaluator import evaluate_nights
from ..logic.records import streaks
from ..logic.rolling_form import rolling_form
from ..logic.skill_rating import skill_ratings
from ..logic.types import LedgerSnapshot
from ..schemas import HeaterRow, RollingFormRow, SkillRatingRow, StatsFilters, StreakRow
from ..services.filters import get_stats_filters, thresholds_for
from ..services.ledger import load_snapshot

router = APIRouter(prefix="/insights", tags=["insights"])


def _load(db: Session, group_id: int, filters: StatsFilters) -> tuple[models.Group, LedgerSnapshot]:
    group = db.get(models.Group, group_id)
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    return group, load_snapshot(db, group, filters)


@router.get("/{group_id}/rolling_form")
def get_rolling_form(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """
    Each eligible player's last `rolling_nights` nights, with the trend
    against the window before. Eligibility is judged on the full filtered range.
    """
    group, snap = _load(db, group_id, filters)
    thresholds = thresholds_for(group, filters)

    evaluations = evaluate_nights(snap.nights)
    totals = aggregate_by_player(snap.players, snap.nights, evaluations)
    rows = [
        r
        for r in rolling_form(snap.players, snap.nights, filters.rolling_nights, evaluations)
        if meets_eligibility(totals[r.player_id], thresholds)
    ]
    return {
        "group_id": group.id,
        "rolling_nights": filters.rolling_nights,
        "rows": [RollingFormRow.model_validate(r).model_dump() for r in rows],
    }


@router.get("/{group_id}/skill_ratings")
def get_skill_ratings(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """
    Experimental Elo-style rating replayed over the filtered nights.
    change_last_n covers the last `rolling_nights` nights of the range.
    """
    group, snap = _load(db, group_id, filters)
    roster = snap.player_ids
    rows = [r for r in skill_ratings(snap.nights, filters.rolling_nights) if r.player_id in roster]
    return {
        "group_id": group.id,
        "last_n": filters.rolling_nights,
        "rows": [SkillRatingRow.model_validate(r).model_dump() for r in rows],
    }


@router.get("/{group_id}/heater_index")
def get_heater_index(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    group, snap = _load(db, group_id, filters)
    roster = snap.player_ids
    rows = [r for r in heater_index(snap.nights) if r.player_id in roster]
    return {"group_id": group.id, "rows": [HeaterRow.model_validate(r).model_dump() for r in rows]}


@router.get("/{group_id}/streaks")
def get_streaks(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    group, snap = _load(db, group_id, filters)
    rows = streaks(snap.players, snap.nights)
    return {"group_id": group.id, "rows": [StreakRow.model_validate(r).model_dump() for r in rows]}
