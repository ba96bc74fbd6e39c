# poker_nights/models.py
import enum
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy import (
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


# -----------------------
# Night status
# -----------------------
class NightStatus(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class Group(Base):
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)

    # Leaderboard eligibility defaults; NULL = fall back to deployment env, then 0
    min_nights_played: Mapped[int | None] = mapped_column(Integer, nullable=True)
    min_total_buy_in_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    players = relationship("Player", back_populates="group")
    seasons = relationship("Season", back_populates="group")
    nights = relationship("Night", back_populates="group")


class Player(Base):
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    group_id: Mapped[int] = mapped_column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)

    # guests are players without a registered member account
    is_guest: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    group = relationship("Group", back_populates="players")
    participations = relationship("Participation", back_populates="player")

    __table_args__ = (UniqueConstraint("group_id", "name", name="uq_player_group_name"),)


class Season(Base):
    __tablename__ = "seasons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    group_id: Mapped[int] = mapped_column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    starts_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    ends_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    group = relationship("Group", back_populates="seasons")
    nights = relationship("Night", back_populates="season")


class Night(Base):
    __tablename__ = "nights"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    group_id: Mapped[int] = mapped_column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    scheduled_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)

    # Only CLOSED nights count toward stats unless drafts are requested
    status: Mapped[NightStatus] = mapped_column(SAEnum(NightStatus), nullable=False, default=NightStatus.OPEN)

    season_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("seasons.id", ondelete="SET NULL"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    group = relationship("Group", back_populates="nights")
    season = relationship("Season", back_populates="nights")
    participations = relationship("Participation", back_populates="night", cascade="all, delete-orphan")


class Participation(Base):
    """
    One player's ledger line for one night.
    cash_out_cents stays NULL until the player cashes out.
    """

    __tablename__ = "participations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    night_id: Mapped[int] = mapped_column(Integer, ForeignKey("nights.id", ondelete="CASCADE"), index=True)
    player_id: Mapped[int] = mapped_column(Integer, ForeignKey("players.id", ondelete="CASCADE"), index=True)

    buy_in_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cash_out_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    adjustment_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    night = relationship("Night", back_populates="participations")
    player = relationship("Player", back_populates="participations")

    __table_args__ = (UniqueConstraint("night_id", "player_id", name="uq_participation_night_player"),)
