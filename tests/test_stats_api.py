# tests/test_stats_api.py
from poker_nights.models import NightStatus


def seed_league(ledger, **group_kw):
    g = ledger.group(**group_kw)
    ana = ledger.player(g, "Ana")
    ben = ledger.player(g, "Ben")
    cy = ledger.player(g, "Cy")
    gus = ledger.player(g, "Gus", is_guest=True)

    ledger.night(g, "2025-04-01T20:00:00", {ana: (2000, 4000), ben: (2000, 0), gus: (1000, 1000)})
    ledger.night(g, "2025-04-08T20:00:00", {ana: (1000, 500), ben: (1000, 2500), cy: (1000, 0)})
    ledger.night(g, "2025-04-15T20:00:00", {ana: (2000, 2500), gus: (1000, 3500)})
    # still open: not counted by default
    ledger.night(g, "2025-04-22T20:00:00", {cy: (5000, None)}, status=NightStatus.OPEN)
    return g, {"ana": ana, "ben": ben, "cy": cy, "gus": gus}


def test_unknown_group_404(client):
    for path in ["/stats/999999", "/stats/999999/awards", "/stats/999999/overview"]:
        r = client.get(path)
        assert r.status_code == 404
        assert r.json()["detail"] == "Group not found"


def test_summary_counts_closed_nights_only(client, ledger):
    g, p = seed_league(ledger)

    r = client.get(f"/stats/{g.id}")
    assert r.status_code == 200, r.text
    js = r.json()

    assert js["ok"] is True
    assert js["totals"]["nights"] == 3
    assert js["totals"]["total_buy_in_cents"] == 11000
    assert js["thresholds"] == {"min_nights_played": 0, "min_total_buy_in_cents": 0}

    names = [row["name"] for row in js["players"]]
    assert names == ["Gus", "Ana", "Ben", "Cy"]
    ana = js["players"][1]
    assert ana["total_games"] == 3
    assert ana["total_profit_cents"] == 2000
    assert ana["nights_won"] == 1
    assert ana["roi"] == 0.4

    assert js["awards"]["top_winner"]["player_id"] == p["gus"].id
    assert js["awards"]["most_action"]["player_id"] == p["ana"].id
    assert js["awards"]["win_rate_leader"] is None
    assert js["seasons"] == []

    r = client.get(f"/stats/{g.id}", params={"include_draft_nights": "true"})
    assert r.json()["totals"]["nights"] == 4


def test_guests_can_be_hidden(client, ledger):
    g, _ = seed_league(ledger)
    r = client.get(f"/stats/{g.id}", params={"includeGuestPlayers": "false"})
    assert r.status_code == 200
    assert [row["name"] for row in r.json()["players"]] == ["Ana", "Ben", "Cy"]


def test_eligibility_from_group_and_request(client, ledger):
    g, _ = seed_league(ledger, min_nights_played=2)

    r = client.get(f"/stats/{g.id}/players")
    assert r.status_code == 200
    js = r.json()
    assert js["thresholds"]["min_nights_played"] == 2
    flags = {row["name"]: row["eligible"] for row in js["players"]}
    assert flags == {"Ana": True, "Ben": True, "Gus": True, "Cy": False}

    # request value beats the group default
    r = client.get(f"/stats/{g.id}", params={"min_nights_played": 3})
    assert [row["name"] for row in r.json()["players"]] == ["Ana"]


def test_malformed_filters_do_not_fail(client, ledger):
    g, _ = seed_league(ledger)
    r = client.get(f"/stats/{g.id}", params={"date_range": "fortnight", "min_nights_played": 3})
    assert r.status_code == 200
    js = r.json()
    # whole filter reset: the min_nights_played=3 is dropped too
    assert js["filters"]["date_range"] == "all"
    assert js["thresholds"]["min_nights_played"] == 0
    assert len(js["players"]) == 4


def test_leaderboards_top_n(client, ledger):
    g, _ = seed_league(ledger)
    r = client.get(f"/stats/{g.id}/leaderboards", params={"top_n": 3})
    assert r.status_code == 200
    js = r.json()
    assert js["top_n"] == 3
    for key in ["top_roi", "top_profit", "top_score", "top_action", "top_podium"]:
        assert len(js[key]) <= 3
    assert js["top_profit"][0]["name"] == "Gus"
    assert js["top_action"][0]["name"] == "Ana"

    # unsupported sizes fall back to 5
    r = client.get(f"/stats/{g.id}/leaderboards", params={"top_n": 4})
    assert r.json()["top_n"] == 5


def test_overview_records_competitiveness(client, ledger):
    g, _ = seed_league(ledger)

    ov = client.get(f"/stats/{g.id}/overview").json()
    assert ov["total_nights"] == 3
    assert ov["largest_pot_cents"] == 5000
    assert ov["unique_players_all_time"] == 4

    rec = client.get(f"/stats/{g.id}/records").json()
    assert rec["biggest_single_night_profit"]["name"] == "Gus"
    assert rec["biggest_single_night_profit"]["profit_cents"] == 2500
    assert rec["largest_pot_night"]["pot_cents"] == 5000

    # guests hidden: Ana's +2000 on night one is the record
    rec = client.get(f"/stats/{g.id}/records", params={"include_guest_players": "false"}).json()
    assert rec["biggest_single_night_profit"]["name"] == "Ana"

    comp = client.get(f"/stats/{g.id}/competitiveness").json()
    assert comp["badge"] in {"Dominated", "Competitive"}
    assert 0 < comp["top1_share"] <= comp["top3_share"] <= 1


def test_player_rows_carry_best_and_worst_night(client, ledger):
    g, _ = seed_league(ledger)

    rows = {row["name"]: row for row in client.get(f"/stats/{g.id}/players").json()["players"]}
    assert (rows["Ana"]["best_night_profit_cents"], rows["Ana"]["worst_night_profit_cents"]) == (2000, -500)
    assert (rows["Cy"]["best_night_profit_cents"], rows["Cy"]["worst_night_profit_cents"]) == (-1000, -1000)

    summary = {row["name"]: row for row in client.get(f"/stats/{g.id}").json()["players"]}
    assert summary["Gus"]["best_night_profit_cents"] == 2500


def test_activity_and_recent_feed(client, ledger):
    g, _ = seed_league(ledger)

    points = client.get(f"/stats/{g.id}/activity").json()["points"]
    assert [p["date"] for p in points] == ["2025-04-01", "2025-04-08", "2025-04-15"]
    assert [p["pot_cents"] for p in points] == [5000, 3000, 3000]
    assert [p["players_count"] for p in points] == [3, 3, 2]

    feed = client.get(f"/stats/{g.id}/recent").json()["nights"]
    assert [n["biggest_winner_name"] for n in feed] == ["Gus", "Ben", "Ana"]
    assert [n["biggest_winner_profit_cents"] for n in feed] == [2500, 1500, 2000]

    assert client.get("/stats/999999/recent").status_code == 404


def test_distributions_over_eligible_players(client, ledger):
    g, _ = seed_league(ledger)

    js = client.get(f"/stats/{g.id}/distributions").json()
    assert js["percent_profitable"] == 50.0
    # profits $20, -$5, -$10, $25: bucket width 4
    assert [b["label"] for b in js["profit_buckets"]] == ["$-12", "$-8", "$20", "$24"]
    # ROI 40%, -16.7%, -100%, 125%: bucket width 23
    assert [b["label"] for b in js["roi_buckets"]] == ["-115%", "-23%", "23%", "115%"]

    # Cy (one night) drops out
    js = client.get(f"/stats/{g.id}/distributions", params={"min_nights_played": 2}).json()
    assert sum(b["count"] for b in js["profit_buckets"]) == 3
