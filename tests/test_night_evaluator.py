# tests/test_night_evaluator.py
import math
from datetime import datetime

from poker_nights.logic.night_evaluator import (
    evaluate_night,
    evaluate_nights,
    night_score,
    podium_points_for,
    profit_cents,
)
from poker_nights.logic.types import LedgerEntry, LedgerNight


def _e(pid, buy_in, cash_out, adj=0):
    return LedgerEntry(player_id=pid, name=f"P{pid}", buy_in_cents=buy_in, cash_out_cents=cash_out, adjustment_cents=adj)


def test_heads_up_night_scenario():
    results = evaluate_night([_e(1, 2000, 4000), _e(2, 2000, 0)])
    a, b = results

    assert (a.player_id, a.profit_cents, a.rank, a.podium_points) == (1, 2000, 1, 3)
    assert a.roi == 1.0
    assert math.isclose(a.night_score, math.sqrt(20), rel_tol=1e-9)  # ~4.472

    assert (b.player_id, b.profit_cents, b.rank, b.podium_points) == (2, -2000, 2, 2)
    assert b.roi == -1.0
    assert a.is_podium and b.is_podium


def test_profit_subtracts_adjustment_and_treats_missing_cash_out_as_zero():
    assert profit_cents(_e(1, 1000, 1500, adj=200)) == 300
    assert profit_cents(_e(1, 1000, 1500, adj=-200)) == 700
    assert profit_cents(_e(1, 1000, None)) == -1000


def test_night_score_zero_without_stake():
    assert night_score(500, 0) == 0.0
    assert night_score(-500, -10) == 0.0
    r = evaluate_night([_e(1, 0, 500)])[0]
    assert r.night_score == 0.0
    assert r.roi is None


def test_ranks_are_dense_and_podium_capped():
    entries = [_e(pid, 1000, cash) for pid, cash in [(4, 0), (2, 3000), (7, 1000), (1, 500), (9, 2500)]]
    results = evaluate_night(entries)

    assert sorted(r.rank for r in results) == [1, 2, 3, 4, 5]
    assert sum(r.podium_points for r in results) == 6
    assert [r.player_id for r in results] == [2, 9, 7, 1, 4]
    assert [r.podium_points for r in results] == [3, 2, 1, 0, 0]


def test_equal_profit_ranks_by_player_id():
    results = evaluate_night([_e(5, 1000, 2000), _e(3, 1000, 2000), _e(8, 1000, 0)])
    assert [(r.player_id, r.rank) for r in results] == [(3, 1), (5, 2), (8, 3)]


def test_podium_points_table():
    assert [podium_points_for(r) for r in range(1, 6)] == [3, 2, 1, 0, 0]


def test_pot_and_per_night_evaluation():
    n1 = LedgerNight(id=10, name="a", scheduled_at=datetime(2025, 1, 1), entries=(_e(1, 2000, 0), _e(2, 500, 2500)))
    n2 = LedgerNight(id=11, name="b", scheduled_at=datetime(2025, 1, 8), entries=(_e(1, 1000, 1000),))

    assert n1.pot_cents == 2500

    by_night = evaluate_nights([n1, n2])
    assert set(by_night) == {10, 11}
    assert by_night[10][0].player_id == 2
    assert by_night[11][0].rank == 1 and by_night[11][0].podium_points == 3
