# tests/conftest.py
import uuid
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Make sure models are imported so Base has all tables
from poker_nights import models  # noqa: F401
from poker_nights.db import Base, get_db
from poker_nights.main import app

# Single in-memory DB shared across the whole process
TEST_DATABASE_URL = "sqlite+pysqlite://"


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # <<< key: share the same memory DB
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db_session):
    # Override app DB dependency to use our shared in-memory session
    def _get_db_override():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_override

    from starlette.testclient import TestClient

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


class LedgerFactory:
    """
    Writes ledger rows through the test session. The API is read-only,
    so this is how tests put groups, players and nights in place.
    """

    def __init__(self, db):
        self.db = db

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def group(self, name=None, **kw):
        # shared DB across tests: keep names unique
        return self._save(models.Group(name=name or f"Group {uuid.uuid4().hex[:8]}", **kw))

    def player(self, group, name, is_guest=False):
        return self._save(models.Player(group_id=group.id, name=name, is_guest=is_guest))

    def season(self, group, name, starts_at, ends_at=None):
        return self._save(models.Season(group_id=group.id, name=name, starts_at=starts_at, ends_at=ends_at))

    def night(self, group, when, results, status=models.NightStatus.CLOSED, season=None, name=None):
        """
        results: {player: (buy_in, cash_out)} or {player: (buy_in, cash_out, adjustment)}
        """
        if isinstance(when, str):
            when = datetime.fromisoformat(when)
        night = self._save(
            models.Night(
                group_id=group.id,
                name=name or f"Night {when:%Y-%m-%d}",
                scheduled_at=when,
                status=status,
                season_id=season.id if season else None,
            )
        )
        for player, line in results.items():
            buy_in, cash_out, *rest = line
            self.db.add(
                models.Participation(
                    night_id=night.id,
                    player_id=player.id,
                    buy_in_cents=buy_in,
                    cash_out_cents=cash_out,
                    adjustment_cents=rest[0] if rest else 0,
                )
            )
        self.db.commit()
        self.db.refresh(night)
        return night


@pytest.fixture()
def ledger(db_session):
    return LedgerFactory(db_session)
