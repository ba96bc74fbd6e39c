# smoke.py - end-to-end check against a running Poker Nights API
#
# Seeds a small ledger straight into the database the server uses
# (same DATABASE_URL), then walks the read endpoints.
#   uvicorn poker_nights.main:app &
#   python smoke.py
import json
from datetime import datetime, timedelta

import requests

from poker_nights import models
from poker_nights.db import Base, SessionLocal, engine

BASE = "http://127.0.0.1:8000"


def get(path, **params):
    r = requests.get(BASE + path, params=params)
    r.raise_for_status()
    return r.json()


def seed() -> int:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        stamp = datetime.utcnow().strftime("%Y%m%d%H%M%S")
        group = models.Group(name=f"Smoke Night {stamp}")
        db.add(group)
        db.flush()

        names = ["Alice", "Bob", "Cara", "Dev"]
        players = [models.Player(group_id=group.id, name=n) for n in names]
        players.append(models.Player(group_id=group.id, name="Guest Gus", is_guest=True))
        db.add_all(players)

        start = datetime.utcnow() - timedelta(days=60)
        season = models.Season(group_id=group.id, name="Fall", starts_at=start)
        db.add(season)
        db.flush()

        # (buy_in, cash_out) per player, one row per night
        ledger = [
            [(2000, 4000), (2000, 0), (1000, 1500), (1000, 500), (1000, 1000)],
            [(1500, 3000), (3000, 2000), (1000, 0), (2000, 3500), (500, 500)],
            [(2000, 1000), (2000, 5000), (1000, 1000), (1000, 0), (1000, 1000)],
        ]
        for i, row in enumerate(ledger):
            night = models.Night(
                group_id=group.id,
                name=f"Night {i + 1}",
                scheduled_at=start + timedelta(days=7 * i),
                status=models.NightStatus.CLOSED,
                season_id=season.id,
            )
            db.add(night)
            db.flush()
            for p, (buy_in, cash_out) in zip(players, row):
                db.add(
                    models.Participation(
                        night_id=night.id, player_id=p.id, buy_in_cents=buy_in, cash_out_cents=cash_out
                    )
                )
        db.commit()
        return group.id
    finally:
        db.close()


print("=== 0) health ===")
print(get("/health/ping"))

print("=== 1) seed ledger ===")
group_id = seed()
print("group_id", group_id)

print("=== 2) stats ===")
summary = get(f"/stats/{group_id}")
print(json.dumps(summary["totals"], indent=2))
print(json.dumps(summary["awards"], indent=2, default=str))

print("=== 3) nights & seasons ===")
print(json.dumps(get(f"/nights/{group_id}"), indent=2))
print(json.dumps(get(f"/seasons/{group_id}"), indent=2))

print("=== 4) insights ===")
print(json.dumps(get(f"/insights/{group_id}/skill_ratings", rolling_nights=5), indent=2))
print(json.dumps(get(f"/insights/{group_id}/heater_index"), indent=2))
print(json.dumps(get(f"/insights/{group_id}/rolling_form", include_guest_players="false"), indent=2))

print("=== 5) filters fall back on bad input ===")
print(json.dumps(get(f"/stats/{group_id}/players", date_range="bogus")["thresholds"], indent=2))

print("\nSmoke test complete ✅")
