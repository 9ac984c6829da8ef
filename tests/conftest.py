"""Shared pytest fixtures for all test suites."""

import os
import uuid
from collections.abc import AsyncGenerator
from datetime import date
from typing import Annotated, Any

import httpx
import pytest
import pytest_asyncio
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from backend.app.api.deps import get_trip_generator
from backend.app.db.emission_factors import SqlFactorStore, seed_default_factors
from backend.app.db.engine import get_session
from backend.app.db.models import Base, User
from backend.app.llm.client import Draft
from backend.app.models.common import (
    AccommodationPreference,
    Location,
    TransportPreference,
    TravelStyle,
)
from backend.app.models.trip import TripRequest
from backend.app.pipeline.generator import TripGenerator
from backend.app.ratelimit import InMemoryRateLimiter, get_rate_limiter

USER_ID = uuid.UUID("00000000-0000-0000-0000-00000000000a")
OTHER_USER_ID = uuid.UUID("00000000-0000-0000-0000-00000000000b")
ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-00000000000c")

PARIS = Location(lat=48.8566, lng=2.3522, formatted_address="Paris, France", place_id="ChIJD7fiBh9u5kcRYJSMaMOCCwQ")


class FakeGeocoder:
    """Geocoder returning a fixed location, or raising a configured error."""

    def __init__(self, location: Location = PARIS, error: Exception | None = None) -> None:
        self.location = location
        self.error = error
        self.calls: list[str] = []

    async def geocode(self, destination: str) -> Location:
        self.calls.append(destination)
        if self.error is not None:
            raise self.error
        return self.location


class FakeDrafter:
    """AI drafter returning a fixed payload, or raising a configured error."""

    def __init__(self, payload: dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.calls: list[TripRequest] = []

    async def draft(self, request: TripRequest) -> Draft:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return Draft(payload=self.payload or {}, source="openai")


def make_draft_day(day: int, activities: list[dict[str, Any]] | None = None, daily_cost: float = 100) -> dict[str, Any]:
    """Raw draft day in the shape the AI provider returns."""
    if activities is None:
        activities = [
            {
                "time": "10:00",
                "title": f"Museum visit {day}",
                "type": "museum",
                "estimated_cost": 20,
                "carbon_kg": 2.0,
                "transport_mode": "metro",
            },
            {
                "time": "13:00",
                "name": f"Lunch {day}",
                "category": "restaurant",
                "cost": 30,
                "carbon_kg": 3.5,
                "transport_mode": "walking",
            },
        ]
    return {"day": day, "theme": f"Day {day}", "activities": activities, "daily_cost": daily_cost}


@pytest.fixture
def draft_day() -> Any:
    """Factory for raw draft days."""
    return make_draft_day


@pytest.fixture
def drafter_factory() -> type[FakeDrafter]:
    return FakeDrafter


@pytest.fixture
def geocoder_factory() -> type[FakeGeocoder]:
    return FakeGeocoder


@pytest.fixture
def trip_request() -> TripRequest:
    """Paris, 2026-06-01..07, budget 2000, hotel_standard, mixed."""
    return TripRequest(
        destination="Paris",
        start_date=date(2026, 6, 1),
        end_date=date(2026, 6, 7),
        budget=2000,
        interests=["culture", "food"],
        travel_style=TravelStyle.balanced,
        accommodation_preference=AccommodationPreference.hotel_standard,
        transport_preference=TransportPreference.mixed,
    )


@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the schema and default factors."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSession(engine, expire_on_commit=False) as session:
        await seed_default_factors(session)
        for user_id, email, role in (
            (USER_ID, "traveler@example.com", "user"),
            (OTHER_USER_ID, "other@example.com", "user"),
            (ADMIN_ID, "admin@example.com", "admin"),
        ):
            session.add(User(id=user_id, name=email.split("@")[0], email=email, password_hash="stub", role=role))
        await session.commit()

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(sqlite_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSession(sqlite_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def fake_drafter() -> FakeDrafter:
    return FakeDrafter(payload={"summary": "Seven days in Paris", "days": [make_draft_day(d) for d in range(1, 8)]})


@pytest.fixture
def fake_geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest_asyncio.fixture
async def client(
    sqlite_engine: AsyncEngine,
    fake_drafter: FakeDrafter,
    fake_geocoder: FakeGeocoder,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """API client against the in-memory database and fake providers."""
    from backend.app.main import app

    limiter = InMemoryRateLimiter(max_requests=10, window_seconds=3600)

    async def _session() -> AsyncGenerator[AsyncSession, None]:
        async with AsyncSession(sqlite_engine, expire_on_commit=False) as session:
            yield session

    async def _generator(session: Annotated[AsyncSession, Depends(get_session)]) -> TripGenerator:
        return TripGenerator(drafter=fake_drafter, geocoder=fake_geocoder, factor_store=SqlFactorStore(session))

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_trip_generator] = _generator
    app.dependency_overrides[get_rate_limiter] = lambda: limiter

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def auth(user_id: uuid.UUID, admin: bool = False) -> dict[str, str]:
    """Stub bearer header for a user."""
    token = f"{user_id}:admin" if admin else str(user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_header() -> Any:
    """Factory for stub bearer headers."""
    return auth


@pytest.fixture
def user_id() -> uuid.UUID:
    return USER_ID


@pytest.fixture
def other_user_id() -> uuid.UUID:
    return OTHER_USER_ID


@pytest.fixture
def admin_id() -> uuid.UUID:
    return ADMIN_ID


@pytest_asyncio.fixture
async def postgres_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine for PostgreSQL integration tests.

    Requires DATABASE_URL to be set to a real PostgreSQL connection string.
    Tests using this fixture should be marked with @pytest.mark.postgres.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL not set - skipping postgres test")

    if not database_url.startswith(("postgresql://", "postgresql+asyncpg://")):
        pytest.skip(f"DATABASE_URL is not PostgreSQL: {database_url}")

    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    engine = create_async_engine(database_url, poolclass=NullPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
