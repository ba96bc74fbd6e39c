# tests/test_heater.py
from datetime import datetime

from poker_nights.logic.heater import heater_index, is_heater
from poker_nights.logic.types import LedgerEntry, LedgerNight


def _e(pid, buy_in, cash_out):
    return LedgerEntry(player_id=pid, name=f"P{pid}", buy_in_cents=buy_in, cash_out_cents=cash_out)


def test_heater_needs_small_stake_and_big_roi():
    assert is_heater(_e(1, 1500, 3000))  # roi 1.0 at $15
    assert not is_heater(_e(1, 2500, 5000))  # same roi at $25
    assert is_heater(_e(1, 2000, 3100))  # $20 is still small
    assert not is_heater(_e(1, 1000, 1500))  # exactly +50% is not enough
    assert not is_heater(_e(1, 0, 500))  # no stake, no roi


def test_heater_index_counts_and_order():
    nights = [
        LedgerNight(1, "a", datetime(2025, 1, 1), entries=(_e(3, 1000, 2000), _e(2, 1000, 2000), _e(1, 1000, 0))),
        LedgerNight(2, "b", datetime(2025, 1, 8), entries=(_e(3, 1000, 1600), _e(1, 5000, 10000))),
    ]
    rows = heater_index(nights)
    assert [(r.player_id, r.heater_night_count) for r in rows] == [(3, 2), (2, 1)]
    assert rows[0].name == "P3"
