from __future__ import annotations

import os
import uuid
from datetime import datetime, timedelta

# Must be set before anything under app/ is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_VERIFY_MODE"] = "hs256"
os.environ["SUPABASE_JWT_SECRET"] = "tests-jwt-secret"
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "tests-service-role-key"
os.environ["CLEANUP_SECRET"] = "tests-cleanup-secret"
os.environ["LOG_FILE"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.core.clock import Clock, get_clock
from app.core.db import Base, SessionLocal, engine
from app.main import app
from app.models.location import LocationFix
from app.models.user import User
from app.schemas.enums import PresenceStatus

JWT_SECRET = os.environ["SUPABASE_JWT_SECRET"]
CLEANUP_SECRET = os.environ["CLEANUP_SECRET"]
START = datetime(2025, 6, 1, 12, 0, 0)


class FrozenClock(Clock):
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


def make_token(user_id: str) -> str:
    return jwt.encode({"sub": user_id, "role": "authenticated"}, JWT_SECRET, algorithm="HS256")


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture(autouse=True)
def _reset_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(START)


@pytest.fixture()
def client(clock: FrozenClock):
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(clock: FrozenClock):
    def _make_user(
        name: str | None = "Tester",
        *,
        email: str | None = None,
        status: PresenceStatus = PresenceStatus.offline,
        idle_seconds: float | None = None,
        user_id: str | None = None,
    ) -> str:
        user_id = user_id or str(uuid.uuid4())
        last_active = (
            clock.now() - timedelta(seconds=idle_seconds)
            if idle_seconds is not None
            else None
        )
        with SessionLocal() as session:
            session.add(
                User(
                    id=user_id,
                    email=email or f"{user_id[:8]}@example.com",
                    name=name,
                    presence_status=status,
                    last_active_at=last_active,
                    created_at=clock.now(),
                    updated_at=clock.now(),
                )
            )
            session.commit()
        return user_id

    return _make_user


@pytest.fixture()
def add_fix(clock: FrozenClock):
    def _add_fix(user_id: str, lat: float, lon: float, age_seconds: float = 10) -> None:
        recorded = clock.now() - timedelta(seconds=age_seconds)
        with SessionLocal() as session:
            session.add(
                LocationFix(
                    user_id=user_id,
                    latitude=lat,
                    longitude=lon,
                    recorded_at=recorded,
                    created_at=recorded,
                )
            )
            session.commit()

    return _add_fix
