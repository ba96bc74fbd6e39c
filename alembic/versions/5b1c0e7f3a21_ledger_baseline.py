"""ledger baseline

Revision ID: 5b1c0e7f3a21
Revises:
Create Date: 2026-10-17 00:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5b1c0e7f3a21"
down_revision = None
branch_labels = None
depends_on = None

night_status = sa.Enum("OPEN", "CLOSED", name="nightstatus")


def upgrade() -> None:
    # groups
    op.create_table(
        "groups",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False, unique=True),
        sa.Column("min_nights_played", sa.Integer(), nullable=True),
        sa.Column("min_total_buy_in_cents", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_groups_id", "groups", ["id"])

    # players
    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("is_guest", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("group_id", "name", name="uq_player_group_name"),
    )
    op.create_index("ix_players_id", "players", ["id"])
    op.create_index("ix_players_group_id", "players", ["group_id"])

    # seasons
    op.create_table(
        "seasons",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("starts_at", sa.DateTime(), nullable=False),
        sa.Column("ends_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_seasons_id", "seasons", ["id"])
    op.create_index("ix_seasons_group_id", "seasons", ["group_id"])

    # nights
    op.create_table(
        "nights",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("scheduled_at", sa.DateTime(), nullable=False),
        sa.Column("status", night_status, nullable=False, server_default="OPEN"),
        sa.Column("season_id", sa.Integer(), sa.ForeignKey("seasons.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_nights_id", "nights", ["id"])
    op.create_index("ix_nights_group_id", "nights", ["group_id"])
    op.create_index("ix_nights_scheduled_at", "nights", ["scheduled_at"])
    op.create_index("ix_nights_season_id", "nights", ["season_id"])

    # participations
    op.create_table(
        "participations",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("night_id", sa.Integer(), sa.ForeignKey("nights.id", ondelete="CASCADE"), nullable=False),
        sa.Column("player_id", sa.Integer(), sa.ForeignKey("players.id", ondelete="CASCADE"), nullable=False),
        sa.Column("buy_in_cents", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("cash_out_cents", sa.Integer(), nullable=True),
        sa.Column("adjustment_cents", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.UniqueConstraint("night_id", "player_id", name="uq_participation_night_player"),
    )
    op.create_index("ix_participations_id", "participations", ["id"])
    op.create_index("ix_participations_night_id", "participations", ["night_id"])
    op.create_index("ix_participations_player_id", "participations", ["player_id"])


def downgrade() -> None:
    op.drop_table("participations")
    op.drop_table("nights")
    op.drop_table("seasons")
    op.drop_table("players")
    op.drop_table("groups")
    night_status.drop(op.get_bind(), checkfirst=True)
