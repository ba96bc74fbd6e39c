# poker_nights/services/periods.py
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple

__all__ = [
    "RELATIVE_RANGES",
    "today_utc",
    "now_utc",
    "parse_when",
    "resolve_date_bounds",
]

# ---------------------------------------------------------------------------
# Date-range utilities for stats filters
# - Presets: "all", "7", "30", "90" (N x 24h back from now), "custom"
# - Bounds are naive UTC datetimes, inclusive on both ends
# ---------------------------------------------------------------------------

RELATIVE_RANGES = {"7": 7, "30": 30, "90": 90}


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def now_utc() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_when(value: str, *, end_of_day: bool = False) -> datetime:
    """
    Parse an ISO date or datetime string into a naive UTC datetime.
    A bare date becomes midnight, or 23:59:59.999999 when end_of_day is set.
    """
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid date '{value}'. Expected ISO-8601 date or datetime.") from exc

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)

    # fromisoformat("2025-01-31") yields midnight; widen bare dates when asked
    if end_of_day and len(raw) == 10:
        parsed = datetime.combine(parsed.date(), time.max)
    return parsed


def resolve_date_bounds(
    date_range: str,
    date_from: str | None = None,
    date_to: str | None = None,
    now: datetime | None = None,
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Turn a date-range preset into (start, end) bounds; None means unbounded.
    "custom" uses date_from/date_to; a relative preset starts exactly N days before `now`.
    """
    if date_range == "all":
        return None, None

    if date_range == "custom":
        start = parse_when(date_from) if date_from else None
        end = parse_when(date_to, end_of_day=True) if date_to else None
        return start, end

    days = RELATIVE_RANGES.get(date_range)
    if days is None:
        raise ValueError(f"Unknown date range '{date_range}'.")
    if now is None:
        now = now_utc()
    start = now - timedelta(days=days)
    return start, None
