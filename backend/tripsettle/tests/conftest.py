"""
Shared fixtures: in-memory SQLite database and a FastAPI test client.
"""
import os

# Must be set before tripsettle.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SETTLEMENT_STRICT_VALIDATION"] = "false"

from datetime import date

import pytest
from fastapi.testclient import TestClient

import tripsettle.models  # noqa: F401
from tripsettle.db.base import Base
from tripsettle.db.session import SessionLocal, engine, get_db
from tripsettle.main import app
from tripsettle.services import trip_service


@pytest.fixture
def db():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """Test client whose requests share the test session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def trip_with_people(db):
    """A three-day trip with Alice, Bob and Carol on the roster."""
    alice = trip_service.create_participant("Alice", db)
    bob = trip_service.create_participant("Bob", db)
    carol = trip_service.create_participant("Carol", db)
    trip = trip_service.create_trip(
        name="Jeju",
        start_date=date(2024, 5, 1),
        end_date=date(2024, 5, 3),
        participant_ids=[alice.id, bob.id, carol.id],
        db=db
    )
    return trip, alice, bob, carol
