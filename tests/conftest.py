"""
conftest.py — Shared Test Fixtures

Provides an in-memory SQLite database, a FastAPI TestClient with the
session and identity dependencies overridden, and user fixtures.

Business Rules:
- All tests run against an isolated in-memory DB
- Rate limiting is off unless a test turns it on
- Each test function gets fresh tables

Called by: all test files via pytest autodiscovery
Depends on: app.models (Base), app.database (get_db), app.dependencies
"""

import os

# Must be set before importing app modules
os.environ["TESTING"] = "1"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_URL"] = "http://localhost:8000"

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base, User

# ── In-memory SQLite engine ──────────────────────────────────────────

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@event.listens_for(engine, "connect")
def _enable_fk(dbapi_conn, _):
    """SQLite ignores FKs by default — turn them on."""
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def db_session():
    """Create all tables, yield a session, then tear down."""
    Base.metadata.create_all(bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """A standard signed-in user."""
    user = User(
        email="member@example.com",
        name="Test Member",
        created_at=datetime.now(timezone.utc),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def inactive_user(db_session: Session) -> User:
    """A deactivated user."""
    user = User(
        email="gone@example.com",
        name="Gone User",
        is_active=False,
        created_at=datetime.now(timezone.utc),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def client(db_session: Session, test_user: User) -> TestClient:
    """FastAPI TestClient with get_db on the test session and the caller set to test_user."""
    from app.database import get_db
    from app.dependencies import get_user_id
    from app.main import app

    def _override_db():
        yield db_session

    def _override_user_id():
        return test_user.id

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_user_id] = _override_user_id

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture()
def anon_client(db_session: Session) -> TestClient:
    """TestClient with the real identity dependency (no session cookie)."""
    from app.database import get_db
    from app.main import app

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
