# poker_nights/routers/seasons.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models
from ..db import get_db
from ..logic.eligibility import filter_eligible
from ..logic.night_evaluator import evaluate_nights
from ..logic.seasons import season_table_row, summarize_season, summarize_seasons, top_n_lists
from ..schemas import PlayerRow, SeasonRow, SeasonSummaryOut, StatsFilters
from ..services.filters import get_stats_filters, thresholds_for
from ..services.ledger import load_snapshot

router = APIRouter(prefix="/seasons", tags=["seasons"])


@router.get("/{group_id}")
def season_table(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> list[dict[str, Any]]:
    group = db.get(models.Group, group_id)
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")

    snap = load_snapshot(db, group, filters)
    return [SeasonRow.model_validate(season_table_row(s)).model_dump() for s in summarize_seasons(snap)]


@router.get("/{group_id}/summaries")
def season_summaries(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> list[dict[str, Any]]:
    group = db.get(models.Group, group_id)
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")

    snap = load_snapshot(db, group, filters)
    return [SeasonSummaryOut.model_validate(s).model_dump() for s in summarize_seasons(snap)]


@router.get("/{group_id}/{season_id}")
def season_detail(
    group_id: int,
    season_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """
    One season: summary, eligible players and top-N lists.
    The season_id in the path overrides any season filter.
    """
    group = db.get(models.Group, group_id)
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    season = db.get(models.Season, season_id)
    if not season or season.group_id != group_id:
        raise HTTPException(status_code=404, detail="Season not found")

    scoped = filters.model_copy(update={"season_id": season_id})
    snap = load_snapshot(db, group, scoped)
    evaluations = evaluate_nights(snap.nights)
    summary = summarize_season(snap.seasons[0], snap.nights, snap.players, evaluations)
    eligible = filter_eligible(summary.players, thresholds_for(group, filters))

    return {
        "group_id": group.id,
        "summary": SeasonSummaryOut.model_validate(summary).model_dump(),
        "players": [PlayerRow.model_validate(p).model_dump() for p in eligible],
        "top_n": filters.top_n,
        **{
            key: [PlayerRow.model_validate(p).model_dump() for p in rows]
            for key, rows in top_n_lists(eligible, filters.top_n).items()
        },
    }
