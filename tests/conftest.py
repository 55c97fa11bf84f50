"""
Shared fixtures: an in-memory SQLite database per test and a user factory.
"""

import os

os.environ.setdefault("REWARD_LEDGER_DATABASE_URL", "sqlite://")
os.environ.setdefault("REWARD_LEDGER_LEDGER_AUDIT_ENABLED", "false")

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from reward_ledger.core.config import Settings
from reward_ledger.core.database import Base, build_engine
from reward_ledger.models import PointHistory, PointHistoryType, User


@pytest.fixture()
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def settings():
    return Settings(
        database_url="sqlite://",
        ledger_audit_enabled=False,
    )


def create_user(db, points: int = 0) -> User:
    """Persist a user whose balance is backed by a single EARNED entry."""
    user = User(points=points)
    db.add(user)
    db.flush()
    if points:
        db.add(PointHistory(user_id=user.id, points=points, type=PointHistoryType.EARNED))
    db.commit()
    return user


@pytest.fixture()
def make_user(session):
    def _make(points: int = 0) -> User:
        return create_user(session, points)

    return _make
