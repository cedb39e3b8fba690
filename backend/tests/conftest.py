"""Pytest fixtures: file-backed SQLite database, recreated for every test."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from app.config import settings
from app.database import Base, enable_sqlite_foreign_keys, get_db
from app.main import app

# Import all models so they register with Base.metadata
from app.models.user import User, AdminBootstrap     # noqa: F401
from app.models.schedule import Schedule             # noqa: F401
from app.models.participation import Participation   # noqa: F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
    enable_sqlite_foreign_keys(engine)

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session bound to the test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine, monkeypatch):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    monkeypatch.setattr(settings, "AUTO_APPROVE_USERS", False)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: accounts and schedules via the API, returning the response "data"
# ---------------------------------------------------------------------------
def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_user(client: TestClient, name: str = "Kim Minsu", phone: str = "010-1234-5678") -> dict:
    """Helper: POST /api/auth/register and return the session data."""
    resp = client.post("/api/auth/register", json={"name": name, "phone": phone})
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def create_admin(client: TestClient, name: str = "Kim Minsu", phone: str = "010-1234-5678") -> tuple[dict, dict]:
    """Helper: the first registration in an empty store becomes the admin."""
    admin = register_user(client, name=name, phone=phone)
    assert admin["isAdmin"] is True
    return admin, auth_headers(admin["token"])


def create_member(
    client: TestClient,
    admin_headers: dict,
    name: str = "Lee Jiwon",
    phone: str = "010-2222-3333",
) -> tuple[dict, dict]:
    """Helper: register, approve as admin, then log in. Returns (session data, headers)."""
    pending = register_user(client, name=name, phone=phone)
    resp = client.patch(f"/api/users/{pending['userId']}/approve", headers=admin_headers)
    assert resp.status_code == 200, resp.text

    resp = client.post("/api/auth/login", json={"name": name, "phone": phone})
    assert resp.status_code == 200, resp.text
    member = resp.json()["data"]
    return member, auth_headers(member["token"])


def create_test_schedule(
    client: TestClient,
    headers: dict,
    title: str = "Practice",
    date: str = "2025-06-01",
    start_time: str = "18:00",
    end_time: str = "19:00",
    **extra,
) -> dict:
    """Helper: POST /api/schedules and return the created schedule."""
    payload = {"title": title, "date": date, "startTime": start_time, "endTime": end_time, **extra}
    resp = client.post("/api/schedules", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]
