"""API tests against SQLite with foreign key enforcement turned on."""

import uuid
from collections.abc import AsyncGenerator
from datetime import date, timedelta
from typing import Any

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine


@pytest_asyncio.fixture
async def sqlite_engine(sqlite_engine: AsyncEngine) -> AsyncGenerator[AsyncEngine, None]:
    """The shared seeded engine, with PRAGMA foreign_keys enabled."""
    async with sqlite_engine.connect() as conn:
        await conn.exec_driver_sql("PRAGMA foreign_keys=ON")
        result = await conn.exec_driver_sql("PRAGMA foreign_keys")
        assert result.scalar_one() == 1

    yield sqlite_engine


def _generation_body() -> dict[str, Any]:
    start = date.today() + timedelta(days=14)
    return {
        "destination": "Paris",
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(days=6)).isoformat(),
        "budget": 2000,
        "interests": ["culture"],
        "travel_style": "balanced",
        "accommodation_preference": "hotel_standard",
        "transport_preference": "mixed",
    }


@pytest.mark.asyncio
async def test_unknown_bearer_user_rejected(client: httpx.AsyncClient, auth_header: Any) -> None:
    response = await client.post("/trips/generate", json=_generation_body(), headers=auth_header(uuid.uuid4()))

    assert response.status_code == 401
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_known_user_generates_and_deletes(
    client: httpx.AsyncClient, auth_header: Any, user_id: uuid.UUID
) -> None:
    headers = auth_header(user_id)
    created = await client.post("/trips/generate", json=_generation_body(), headers=headers)
    assert created.status_code == 201
    trip_id = created.json()["id"]

    expense = await client.post(
        f"/trips/{trip_id}/expenses",
        json={"category": "food", "amount": 12.5, "expense_date": date.today().isoformat()},
        headers=headers,
    )
    assert expense.status_code == 201

    deleted = await client.delete(f"/trips/{trip_id}", headers=headers)
    assert deleted.status_code == 200
