# poker_nights/services/filters.py
from __future__ import annotations

import logging
import os
from typing import Any, Mapping

from fastapi import Request
from pydantic import ValidationError

from ..logic.eligibility import EligibilityThresholds, resolve_thresholds
from ..schemas import StatsFilters

logger = logging.getLogger("poker_nights.filters")


def parse_stats_filters(params: Mapping[str, Any]) -> StatsFilters:
    """
    Build StatsFilters from raw query params.
    Malformed input never fails the request: the whole set falls back to defaults.
    """
    try:
        return StatsFilters.model_validate(dict(params))
    except ValidationError as exc:
        logger.warning("invalid stats filters %s, using defaults: %s", dict(params), exc.errors())
        return StatsFilters()


def get_stats_filters(request: Request) -> StatsFilters:
    """FastAPI dependency: filters from the current query string."""
    return parse_stats_filters(request.query_params)


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning("ignoring non-integer %s=%r", name, raw)
        return None
    return value if value >= 0 else None


def env_thresholds() -> tuple[int | None, int | None]:
    """Deployment-wide eligibility fallbacks (MIN_NIGHTS_PLAYED, MIN_TOTAL_BUY_IN_CENTS)."""
    return _env_int("MIN_NIGHTS_PLAYED"), _env_int("MIN_TOTAL_BUY_IN_CENTS")


def thresholds_for(group, filters: StatsFilters) -> EligibilityThresholds:
    env_nights, env_buy_in = env_thresholds()
    return resolve_thresholds(
        request_min_nights=filters.min_nights_played,
        request_min_buy_in=filters.min_total_buy_in_cents,
        group_min_nights=group.min_nights_played,
        group_min_buy_in=group.min_total_buy_in_cents,
        env_min_nights=env_nights,
        env_min_buy_in=env_buy_in,
    )
