"""
Pytest configuration for the marketplace API tests.

Every test gets a fresh in-memory SQLite database; the API's get_db
dependency is pointed at it and the moderation outbox is emptied around
each test.
"""

import os
import uuid
from datetime import datetime, timedelta

# Must be in place before the app modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_EMAILS"] = "admin@example.com"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.testclient import TestClient

import main
from auth import sign_session
from db import Base, get_db
from models import Campaign, Profile
from outbox import moderation_outbox

ADMIN_EMAIL = "admin@example.com"


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        except SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()

    main.app.dependency_overrides[get_db] = override_get_db
    moderation_outbox.clear()
    with TestClient(main.app) as c:
        yield c
    main.app.dependency_overrides.clear()
    moderation_outbox.clear()


@pytest.fixture
def break_store(monkeypatch):
    """Make every Session.<method> call fail like a dropped connection."""

    def _break(method):
        def fail(self, *args, **kwargs):
            raise OperationalError(method, {}, Exception("server closed the connection unexpectedly"))

        monkeypatch.setattr(Session, method, fail)

    return _break


def auth_headers(user_id, email=None):
    return {"Authorization": f"Bearer {sign_session(user_id, email)}"}


@pytest.fixture
def admin_headers():
    return auth_headers(uuid.uuid4(), ADMIN_EMAIL)


@pytest.fixture
def make_profile(db_session):
    """Insert a profile row directly, bypassing the API."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        values = {
            "id": uuid.uuid4(),
            "name": f"Profile {counter['n']}",
            "type": "creator",
            "categories": [],
            "platforms": [],
            "followers_count": 0,
            "created_at": datetime(2024, 1, 1) + timedelta(days=counter["n"]),
        }
        values.update(overrides)
        row = Profile(**values)
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row

    return _make


@pytest.fixture
def make_campaign(db_session):
    counter = {"n": 0}

    def _make(brand_id, **overrides):
        counter["n"] += 1
        values = {
            "brand_id": brand_id,
            "title": f"Campaign {counter['n']}",
            "status": "draft",
            "created_at": datetime(2024, 1, 1) + timedelta(days=counter["n"]),
        }
        values.update(overrides)
        row = Campaign(**values)
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row

    return _make
