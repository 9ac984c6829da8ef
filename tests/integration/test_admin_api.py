"""API tests for emission factor administration and the audit log."""

import uuid
from datetime import date, timedelta
from typing import Any

import httpx
import pytest


@pytest.fixture
def admin(auth_header: Any, admin_id: uuid.UUID) -> dict[str, str]:
    return auth_header(admin_id, admin=True)


async def _factor_id(client: httpx.AsyncClient, headers: dict[str, str], category: str, sub_category: str) -> str:
    response = await client.get("/admin/emission-factors", params={"category": category}, headers=headers)
    matches = [f for f in response.json() if f["sub_category"] == sub_category and f["is_active"]]
    assert len(matches) == 1
    return matches[0]["id"]


@pytest.mark.asyncio
async def test_non_admin_forbidden(client: httpx.AsyncClient, auth_header: Any, user_id: uuid.UUID) -> None:
    for method, path in (
        ("GET", "/admin/emission-factors"),
        ("POST", "/admin/emission-factors"),
        ("GET", "/admin/audit-logs"),
    ):
        response = await client.request(method, path, headers=auth_header(user_id), json={})
        assert response.status_code == 403, path


@pytest.mark.asyncio
async def test_list_seeded_factors(client: httpx.AsyncClient, admin: dict[str, str]) -> None:
    response = await client.get("/admin/emission-factors", params={"category": "accommodation"}, headers=admin)

    assert response.status_code == 200
    factors = {f["sub_category"]: f for f in response.json()}
    assert factors["hotel_standard"]["factor_kg_per_unit"] == pytest.approx(20.9)
    assert factors["hotel_standard"]["unit"] == "night"
    assert factors["hotel_standard"]["source"] == "DEFRA 2023"
    assert all(f["category"] == "accommodation" for f in factors.values())


@pytest.mark.asyncio
async def test_create_factor_and_audit(client: httpx.AsyncClient, admin: dict[str, str], admin_id: uuid.UUID) -> None:
    response = await client.post(
        "/admin/emission-factors",
        json={
            "category": "transport",
            "sub_category": "cable_car",
            "factor_kg_per_unit": 0.012,
            "unit": "km",
            "description": "Alpine cable car",
        },
        headers={**admin, "User-Agent": "pytest-admin"},
    )

    assert response.status_code == 201
    factor = response.json()
    assert factor["is_active"] is True
    assert factor["factor_kg_per_unit"] == pytest.approx(0.012)

    fetched = await client.get(f"/admin/emission-factors/{factor['id']}", headers=admin)
    assert fetched.json()["sub_category"] == "cable_car"

    logs = (await client.get("/admin/audit-logs", headers=admin)).json()
    assert logs[0]["action"] == "emission_factor.create"
    assert logs[0]["target_resource"] == "emission_factor"
    assert logs[0]["target_id"] == factor["id"]
    assert logs[0]["admin_user_id"] == str(admin_id)
    assert logs[0]["user_agent"] == "pytest-admin"
    assert logs[0]["details"]["sub_category"] == "cable_car"


@pytest.mark.asyncio
async def test_create_duplicate_active_factor_conflicts(client: httpx.AsyncClient, admin: dict[str, str]) -> None:
    response = await client.post(
        "/admin/emission-factors",
        json={"category": "accommodation", "sub_category": "hostel", "factor_kg_per_unit": 7.0, "unit": "night"},
        headers=admin,
    )

    assert response.status_code == 409
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_update_factor_records_changes(client: httpx.AsyncClient, admin: dict[str, str]) -> None:
    factor_id = await _factor_id(client, admin, "accommodation", "hostel")

    response = await client.put(
        f"/admin/emission-factors/{factor_id}", json={"factor_kg_per_unit": 7.25}, headers=admin
    )

    assert response.status_code == 200
    assert response.json()["factor_kg_per_unit"] == pytest.approx(7.25)

    logs = (await client.get("/admin/audit-logs", params={"action": "emission_factor.update"}, headers=admin)).json()
    assert len(logs) == 1
    assert logs[0]["details"]["changes"]["factor_kg_per_unit"] == {"old": pytest.approx(8.5), "new": pytest.approx(7.25)}


@pytest.mark.asyncio
async def test_updated_factor_used_by_generation(
    client: httpx.AsyncClient, admin: dict[str, str], auth_header: Any, user_id: uuid.UUID
) -> None:
    factor_id = await _factor_id(client, admin, "accommodation", "hotel_standard")
    await client.put(f"/admin/emission-factors/{factor_id}", json={"factor_kg_per_unit": 10}, headers=admin)

    start = date.today() + timedelta(days=30)
    response = await client.post(
        "/trips/generate",
        json={
            "destination": "Paris",
            "start_date": start.isoformat(),
            "end_date": (start + timedelta(days=6)).isoformat(),
            "budget": 2000,
            "interests": ["culture"],
            "travel_style": "balanced",
            "accommodation_preference": "hotel_standard",
            "transport_preference": "mixed",
        },
        headers=auth_header(user_id),
    )

    assert response.status_code == 201
    assert response.json()["carbon_breakdown"]["accommodation"] == pytest.approx(70.0)


@pytest.mark.asyncio
async def test_soft_delete_deactivates(client: httpx.AsyncClient, admin: dict[str, str]) -> None:
    factor_id = await _factor_id(client, admin, "activity", "theme_park")

    response = await client.delete(f"/admin/emission-factors/{factor_id}", headers=admin)

    assert response.status_code == 200
    assert response.json()["message"] == "Emission factor deactivated"

    fetched = (await client.get(f"/admin/emission-factors/{factor_id}", headers=admin)).json()
    assert fetched["is_active"] is False

    active = await client.get(
        "/admin/emission-factors", params={"category": "activity", "include_inactive": False}, headers=admin
    )
    assert "theme_park" not in [f["sub_category"] for f in active.json()]

    # A replacement may be created once the old factor is inactive
    replacement = await client.post(
        "/admin/emission-factors",
        json={"category": "activity", "sub_category": "theme_park", "factor_kg_per_unit": 7.9, "unit": "visit"},
        headers=admin,
    )
    assert replacement.status_code == 201

    logs = (await client.get("/admin/audit-logs", headers=admin)).json()
    assert sorted(log["action"] for log in logs) == ["emission_factor.create", "emission_factor.deactivate"]


@pytest.mark.asyncio
async def test_reactivating_shadowed_factor_conflicts(client: httpx.AsyncClient, admin: dict[str, str]) -> None:
    old_id = await _factor_id(client, admin, "activity", "spa_wellness")
    await client.delete(f"/admin/emission-factors/{old_id}", headers=admin)
    await client.post(
        "/admin/emission-factors",
        json={"category": "activity", "sub_category": "spa_wellness", "factor_kg_per_unit": 3.9, "unit": "visit"},
        headers=admin,
    )

    response = await client.put(f"/admin/emission-factors/{old_id}", json={"is_active": True}, headers=admin)

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_hard_delete_removes_row(client: httpx.AsyncClient, admin: dict[str, str]) -> None:
    factor_id = await _factor_id(client, admin, "transport", "ferry_car")

    response = await client.delete(f"/admin/emission-factors/{factor_id}", params={"hard": True}, headers=admin)

    assert response.status_code == 200
    assert response.json()["message"] == "Emission factor deleted"

    missing = await client.get(f"/admin/emission-factors/{factor_id}", headers=admin)
    assert missing.status_code == 404

    logs = (await client.get("/admin/audit-logs", params={"action": "emission_factor.delete"}, headers=admin)).json()
    assert logs[0]["target_id"] == factor_id
    assert logs[0]["details"] == {"category": "transport", "sub_category": "ferry_car"}


@pytest.mark.asyncio
async def test_missing_factor_not_found(client: httpx.AsyncClient, admin: dict[str, str]) -> None:
    response = await client.put(f"/admin/emission-factors/{uuid.uuid4()}", json={"unit": "km"}, headers=admin)

    assert response.status_code == 404
