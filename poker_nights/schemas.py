# poker_nights/schemas.py
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .services.periods import parse_when

ROLLING_NIGHTS_CHOICES = (5, 10, 20)
TOP_N_CHOICES = (3, 5, 10)
DEFAULT_ROLLING_NIGHTS = 10
DEFAULT_TOP_N = 5


# -----------------------
# Shared / Enums
# -----------------------
class DateRange(str, Enum):
    ALL = "all"
    LAST_7 = "7"
    LAST_30 = "30"
    LAST_90 = "90"
    CUSTOM = "custom"


# -----------------------
# Stats filters (query string)
# -----------------------
class StatsFilters(BaseModel):
    """
    Filter set shared by every stats view. Accepts snake_case or camelCase keys.
    rolling_nights / top_n outside their choices are coerced to the defaults;
    anything else malformed is a ValidationError (callers fall back to defaults).
    """

    date_range: DateRange = Field(DateRange.ALL, alias="dateRange")
    date_from: str | None = Field(None, alias="dateFrom")
    date_to: str | None = Field(None, alias="dateTo")
    season_id: int | None = Field(None, alias="seasonId")
    rolling_nights: int = Field(DEFAULT_ROLLING_NIGHTS, alias="rollingNights")
    min_nights_played: int | None = Field(None, ge=0, alias="minNightsPlayed")
    min_total_buy_in_cents: int | None = Field(None, ge=0, alias="minTotalBuyInCents")
    top_n: int = Field(DEFAULT_TOP_N, alias="topN")
    include_guest_players: bool = Field(True, alias="includeGuestPlayers")
    include_draft_nights: bool = Field(False, alias="includeDraftNights")

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True, extra="ignore")

    @field_validator("rolling_nights", mode="before")
    @classmethod
    def _coerce_rolling(cls, v):
        try:
            v = int(v)
        except (TypeError, ValueError):
            return DEFAULT_ROLLING_NIGHTS
        return v if v in ROLLING_NIGHTS_CHOICES else DEFAULT_ROLLING_NIGHTS

    @field_validator("top_n", mode="before")
    @classmethod
    def _coerce_top_n(cls, v):
        try:
            v = int(v)
        except (TypeError, ValueError):
            return DEFAULT_TOP_N
        return v if v in TOP_N_CHOICES else DEFAULT_TOP_N

    @model_validator(mode="after")
    def _check_custom_dates(self):
        if self.date_range != DateRange.CUSTOM.value:
            return self
        start = parse_when(self.date_from) if self.date_from else None
        end = parse_when(self.date_to, end_of_day=True) if self.date_to else None
        if start and end and start > end:
            raise ValueError("date_from must not be after date_to")
        return self


# -----------------------
# Output rows
# -----------------------
class PlayerRow(BaseModel):
    player_id: int
    name: str
    total_buy_in_cents: int
    total_cash_out_cents: int
    total_profit_cents: int
    roi: float | None = None
    nights_won: int
    podium_points: int
    win_rate: float
    nights_in_profit: int
    total_games: int
    consistency: float
    season_score: float | None = None
    best_night_profit_cents: int | None = None
    worst_night_profit_cents: int | None = None

    model_config = ConfigDict(from_attributes=True)


class EligiblePlayerRow(PlayerRow):
    eligible: bool


class NightRow(BaseModel):
    game_id: int
    date: datetime
    status: str
    pot_cents: int
    players_count: int
    biggest_winner_name: str | None = None
    biggest_winner_player_id: int | None = None
    biggest_winner_profit_cents: int | None = None
    biggest_loser_name: str | None = None
    biggest_loser_player_id: int | None = None
    biggest_loser_loss_cents: int | None = None
    rebuys_count: int


class SeasonRow(BaseModel):
    season_id: int
    name: str
    starts_at: datetime
    ends_at: datetime | None = None
    nights: int
    total_pot_cents: int
    avg_pot_cents: int
    players_participated: int
    most_profitable_player_name: str | None = None
    most_profitable_player_id: int | None = None
    most_profitable_profit_cents: int | None = None
    best_roi_player_name: str | None = None
    best_roi_player_id: int | None = None
    best_roi: float | None = None


class SeasonSummaryOut(BaseModel):
    season_id: int
    name: str
    starts_at: datetime
    ends_at: datetime | None = None
    total_games: int
    total_buy_in_cents: int
    total_cash_out_cents: int
    total_profit_cents: int
    total_pot_cents: int
    avg_pot_cents: int
    players: list[PlayerRow]
    top_winner: dict | None = None
    best_roi: dict | None = None
    best_performer: dict | None = None

    model_config = ConfigDict(from_attributes=True)


class SkillRatingRow(BaseModel):
    player_id: int
    name: str
    rating: float
    change_last_n: float

    model_config = ConfigDict(from_attributes=True)

    @field_validator("rating", "change_last_n")
    @classmethod
    def _one_decimal(cls, v: float) -> float:
        return round(v, 1)


class HeaterRow(BaseModel):
    player_id: int
    name: str
    heater_night_count: int

    model_config = ConfigDict(from_attributes=True)


class RollingFormRow(BaseModel):
    player_id: int
    name: str
    profit_last_n: int
    roi_last_n: float | None = None
    games_last_n: int
    trend_direction: str

    model_config = ConfigDict(from_attributes=True)


class StreakRow(BaseModel):
    player_id: int
    name: str
    current_win_streak: int
    longest_win_streak: int
    current_losing_streak: int
    longest_losing_streak: int
    current_streak: int

    model_config = ConfigDict(from_attributes=True)
