# poker_nights/routers/stats.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models
from ..db import get_db
from ..logic.aggregation import aggregate_players
from ..logic.awards import compute_awards
from ..logic.eligibility import EligibilityThresholds, filter_eligible, meets_eligibility
from ..logic.night_evaluator import evaluate_nights, profit_cents
from ..logic.records import (
    activity_trend,
    competitiveness,
    distributions,
    league_overview,
    recent_activity,
    records,
    streaks,
)
from ..logic.seasons import summarize_seasons, top_n_lists
from ..logic.types import LedgerSnapshot
from ..schemas import EligiblePlayerRow, PlayerRow, SeasonSummaryOut, StatsFilters
from ..services.filters import get_stats_filters, thresholds_for
from ..services.ledger import load_snapshot
from ..services.periods import today_utc

router = APIRouter(prefix="/stats", tags=["stats"])


def _load(db: Session, group_id: int, filters: StatsFilters) -> tuple[models.Group, LedgerSnapshot]:
    group = db.get(models.Group, group_id)
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    return group, load_snapshot(db, group, filters)


def _thresholds_out(t: EligibilityThresholds) -> dict[str, int]:
    return {"min_nights_played": t.min_nights_played, "min_total_buy_in_cents": t.min_total_buy_in_cents}


def _totals(snap: LedgerSnapshot) -> dict[str, int]:
    entries = [e for n in snap.nights for e in n.entries]
    return {
        "nights": len(snap.nights),
        "total_buy_in_cents": sum(e.buy_in_cents for e in entries),
        "total_cash_out_cents": sum(e.cash_out_cents or 0 for e in entries),
        "total_profit_cents": sum(profit_cents(e) for e in entries),
    }


@router.get("/{group_id}")
def stats_summary(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """
    All-time summary for the filtered ledger:
      - totals: night count and table-wide money totals
      - players: eligibility-filtered rows, profit order
      - seasons: per-season summaries, newest first
      - awards: one winner per category
    """
    group, snap = _load(db, group_id, filters)
    thresholds = thresholds_for(group, filters)

    evaluations = evaluate_nights(snap.nights)
    eligible = filter_eligible(aggregate_players(snap.players, snap.nights, evaluations), thresholds)
    seasons = summarize_seasons(snap, evaluations)

    return {
        "ok": True,
        "group_id": group.id,
        "group_name": group.name,
        "filters": filters.model_dump(),
        "thresholds": _thresholds_out(thresholds),
        "totals": _totals(snap),
        "players": [PlayerRow.model_validate(p).model_dump() for p in eligible],
        "seasons": [SeasonSummaryOut.model_validate(s).model_dump() for s in seasons],
        "awards": compute_awards(eligible, seasons),
    }


@router.get("/{group_id}/players")
def stats_players(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Every roster player with an `eligible` flag against the applied thresholds."""
    group, snap = _load(db, group_id, filters)
    thresholds = thresholds_for(group, filters)
    rows = aggregate_players(snap.players, snap.nights)
    return {
        "group_id": group.id,
        "thresholds": _thresholds_out(thresholds),
        "players": [
            EligiblePlayerRow.model_validate(
                {**PlayerRow.model_validate(p).model_dump(), "eligible": meets_eligibility(p, thresholds)}
            ).model_dump()
            for p in rows
        ],
    }


@router.get("/{group_id}/awards")
def stats_awards(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    group, snap = _load(db, group_id, filters)
    evaluations = evaluate_nights(snap.nights)
    eligible = filter_eligible(
        aggregate_players(snap.players, snap.nights, evaluations), thresholds_for(group, filters)
    )
    return {"group_id": group.id, "awards": compute_awards(eligible, summarize_seasons(snap, evaluations))}


@router.get("/{group_id}/leaderboards")
def stats_leaderboards(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Top-N lists (n = top_n) over eligible players."""
    group, snap = _load(db, group_id, filters)
    eligible = filter_eligible(aggregate_players(snap.players, snap.nights), thresholds_for(group, filters))
    lists = top_n_lists(eligible, filters.top_n)
    return {
        "group_id": group.id,
        "top_n": filters.top_n,
        **{key: [PlayerRow.model_validate(p).model_dump() for p in rows] for key, rows in lists.items()},
    }


@router.get("/{group_id}/overview")
def stats_overview(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    group, snap = _load(db, group_id, filters)
    return {"group_id": group.id, **league_overview(snap.nights, today_utc())}


@router.get("/{group_id}/records")
def stats_records(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    group, snap = _load(db, group_id, filters)
    table = streaks(snap.players, snap.nights)
    return {"group_id": group.id, **records(snap.nights, table, player_ids=set(snap.player_ids))}


@router.get("/{group_id}/competitiveness")
def stats_competitiveness(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    group, snap = _load(db, group_id, filters)
    eligible = filter_eligible(aggregate_players(snap.players, snap.nights), thresholds_for(group, filters))
    return {"group_id": group.id, **competitiveness(eligible)}


@router.get("/{group_id}/activity")
def stats_activity(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Pot size and head count per night, oldest first."""
    group, snap = _load(db, group_id, filters)
    return {"group_id": group.id, "points": activity_trend(snap.nights, filters.date_range)}


@router.get("/{group_id}/recent")
def stats_recent(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    group, snap = _load(db, group_id, filters)
    return {"group_id": group.id, "nights": recent_activity(snap.nights)}


@router.get("/{group_id}/distributions")
def stats_distributions(
    group_id: int,
    filters: StatsFilters = Depends(get_stats_filters),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Profit and ROI histograms over the eligible players."""
    group, snap = _load(db, group_id, filters)
    eligible = filter_eligible(aggregate_players(snap.players, snap.nights), thresholds_for(group, filters))
    return {"group_id": group.id, **distributions(eligible)}
