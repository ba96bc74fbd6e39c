# tests/test_records.py
from datetime import date, datetime, timedelta

from poker_nights.logic.aggregation import aggregate_players
from poker_nights.logic.records import (
    activity_trend,
    competitiveness,
    distributions,
    league_overview,
    night_detail,
    night_rows,
    rebuys_estimate,
    recent_activity,
    records,
    streak_for,
    streaks,
)
from poker_nights.logic.types import LedgerEntry, LedgerNight, LedgerPlayer

START = datetime(2025, 5, 1, 20, 0)
ROSTER = (LedgerPlayer(1, "Ana"), LedgerPlayer(2, "Ben"), LedgerPlayer(3, "Cy"))


def _night(nid, day, *lines):
    entries = tuple(
        LedgerEntry(player_id=pid, name=f"P{pid}", buy_in_cents=b, cash_out_cents=c) for pid, b, c in lines
    )
    return LedgerNight(id=nid, name=f"N{nid}", scheduled_at=START + timedelta(days=day), entries=entries)


NIGHTS = [
    _night(1, 0, (1, 2000, 5000), (2, 2000, 500), (3, 1000, 500)),
    _night(2, 7, (1, 1000, 1500), (2, 3000, 2500), (3, 1000, 1000)),
    _night(3, 14, (1, 1000, 0), (2, 1000, 2000)),
]


def test_rebuys_estimate():
    assert [rebuys_estimate(c) for c in (0, 100, 101, 250, 2000)] == [0, 0, 1, 2, 19]


def test_night_rows_newest_first_with_winner_and_loser():
    rows = night_rows(NIGHTS)
    assert [r["game_id"] for r in rows] == [3, 2, 1]

    first = rows[-1]
    assert first["pot_cents"] == 5000
    assert first["players_count"] == 3
    assert (first["biggest_winner_player_id"], first["biggest_winner_profit_cents"]) == (1, 3000)
    assert (first["biggest_loser_player_id"], first["biggest_loser_loss_cents"]) == (2, 1500)
    assert first["rebuys_count"] == 19 + 19 + 9


def test_no_loser_when_nobody_lost():
    row = night_rows([_night(9, 0, (1, 1000, 1000), (2, 1000, 1000))])[0]
    assert row["biggest_loser_name"] is None
    assert row["biggest_loser_loss_cents"] is None
    assert row["biggest_winner_player_id"] == 1  # break-even tie, lowest id ranks first


def test_night_detail_table_share_and_highest_roi():
    detail = night_detail(NIGHTS[0])
    shares = {e["player_id"]: e["table_share"] for e in detail["entries"]}
    assert shares == {1: 0.4, 2: 0.4, 3: 0.2}
    assert detail["highest_roi"] == {"player_id": 1, "name": "P1", "roi": 1.5}
    assert [e["rank"] for e in detail["entries"]] == [1, 2, 3]


def test_league_overview():
    ov = league_overview(NIGHTS, today=date(2025, 5, 20))
    assert ov["total_nights"] == 3
    assert ov["total_pot_cents"] == 5000 + 5000 + 2000
    assert ov["average_pot_cents"] == 4000
    assert ov["average_pot_last_10_cents"] == 4000
    assert ov["largest_pot_cents"] == 5000
    assert ov["unique_players_all_time"] == 3
    # cutoff 2025-04-20: everything is recent
    assert ov["unique_players_last_30_days"] == 3
    assert ov["average_players_per_night"] == round(8 / 3, 2)

    later = league_overview(NIGHTS, today=date(2025, 6, 14))
    # only night 3 (May 15) is inside the window
    assert later["unique_players_last_30_days"] == 2


def test_empty_overview():
    ov = league_overview([], today=date(2025, 1, 1))
    assert ov["total_nights"] == 0
    assert ov["average_pot_cents"] == 0
    assert ov["average_pot_last_10_cents"] is None
    assert ov["average_players_per_night"] == 0.0


def test_streak_walk():
    s = streak_for(1, "a", [100, 200, -50, 0, 300, 400, 500])
    assert (s.current_win_streak, s.longest_win_streak) == (3, 3)
    assert (s.current_losing_streak, s.longest_losing_streak) == (0, 1)
    assert s.current_streak == 3

    assert streak_for(1, "a", [100, -1, -2]).current_streak == -2
    assert streak_for(1, "a", [100, 0]).current_streak == 0


def test_streaks_and_records():
    table = streaks(ROSTER, NIGHTS)
    by_id = {r.player_id: r for r in table}
    assert by_id[1].longest_win_streak == 2 and by_id[1].current_losing_streak == 1
    assert by_id[2].longest_losing_streak == 2 and by_id[2].current_win_streak == 1

    rec = records(NIGHTS, table)
    assert rec["biggest_single_night_profit"]["player_id"] == 1
    assert rec["biggest_single_night_profit"]["profit_cents"] == 3000
    assert rec["biggest_single_night_loss"]["loss_cents"] == 1500
    assert rec["largest_pot_night"]["game_id"] == 1  # 5000 twice, first night kept
    assert rec["longest_winning_streak"] == {"player_id": 1, "name": "Ana", "streak": 2}
    assert rec["longest_losing_streak"]["streak"] == 2

    only_cy = records(NIGHTS, [], player_ids={3})
    assert only_cy["biggest_single_night_profit"] is None
    assert only_cy["biggest_single_night_loss"]["player_id"] == 3
    assert only_cy["longest_winning_streak"] is None


def test_competitiveness_badge():
    players = aggregate_players(ROSTER, NIGHTS)
    comp = competitiveness(players)
    # only Ana (+2500) and nobody else is up overall
    assert comp["top1_player_id"] == 1
    assert comp["top1_share"] == 1.0
    assert comp["badge"] == "Dominated"

    none = competitiveness([])
    assert none["top1_share"] is None and none["badge"] == "Competitive"


def test_overview_rounds_half_up():
    ov = league_overview([_night(1, 0, (1, 1001, 0)), _night(2, 1, (1, 1000, 0))], today=date(2025, 5, 20))
    assert ov["average_pot_cents"] == 1001
    assert ov["average_pot_last_10_cents"] == 1001
    assert ov["average_players_per_night"] == 1.0


def test_activity_trend_points_and_cap():
    points = activity_trend(NIGHTS)
    assert points == [
        {"date": "2025-05-01", "pot_cents": 5000, "players_count": 3},
        {"date": "2025-05-08", "pot_cents": 5000, "players_count": 3},
        {"date": "2025-05-15", "pot_cents": 2000, "players_count": 2},
    ]

    many = [_night(i, i, (1, 100 * i, 0)) for i in range(1, 121)]
    assert len(activity_trend(many, "all")) == 100
    ranged = activity_trend(many, "30")
    assert len(ranged) == 50
    assert ranged[-1]["pot_cents"] == 12000


def test_recent_activity_newest_first():
    feed = recent_activity(NIGHTS, limit=2)
    assert [n["game_id"] for n in feed] == [3, 2]
    assert (feed[0]["biggest_winner_player_id"], feed[0]["biggest_winner_profit_cents"]) == (2, 1000)
    assert (feed[1]["biggest_winner_player_id"], feed[1]["biggest_winner_profit_cents"]) == (1, 500)
    assert feed[0]["pot_cents"] == 2000 and feed[0]["players_count"] == 2

    assert len(recent_activity(NIGHTS)) == 3
    assert recent_activity([]) == []


def test_distributions():
    dist = distributions(aggregate_players(ROSTER, NIGHTS))
    # profits $25, -$10, -$5: spread 35, bucket width 4
    assert dist["profit_buckets"] == [
        {"label": "$-12", "count": 1},
        {"label": "$-8", "count": 1},
        {"label": "$24", "count": 1},
    ]
    # ROI 62.5%, -16.7%, -25%: spread 87.5, bucket width 9
    assert [b["label"] for b in dist["roi_buckets"]] == ["-27%", "-18%", "54%"]
    assert round(dist["percent_profitable"], 4) == 33.3333

    empty = distributions([])
    assert empty == {"profit_buckets": [], "roi_buckets": [], "percent_profitable": 0.0}
