"""Tests for owner scoping in the trip and expense repositories."""

import uuid
from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db import expenses as expense_repo
from backend.app.db import trips as trip_repo
from backend.app.db.context import RequestContext
from backend.app.errors import NotFoundError, PermissionDeniedError
from backend.app.models.carbon import CarbonBreakdown
from backend.app.models.common import ExpenseCategory, Location, UserRole
from backend.app.models.expense import ExpenseCreate
from backend.app.models.itinerary import Itinerary
from backend.app.models.trip import GeneratedTrip, TripRequest


def _generated(trip_request: TripRequest) -> GeneratedTrip:
    return GeneratedTrip(
        itinerary=Itinerary(days=[]),
        location=Location.placeholder(trip_request.destination),
        total_carbon_kg=146.3,
        total_cost=0,
        green_score=45,
        carbon_breakdown=CarbonBreakdown(accommodation=146.3, total=146.3),
        itinerary_source="template",
    )


@pytest.mark.asyncio
async def test_trip_repository_owner_isolation(
    db_session: AsyncSession,
    trip_request: TripRequest,
    user_id: uuid.UUID,
    other_user_id: uuid.UUID,
    admin_id: uuid.UUID,
) -> None:
    ctx_a = RequestContext(user_id=user_id)
    ctx_b = RequestContext(user_id=other_user_id)
    ctx_admin = RequestContext(user_id=admin_id, role=UserRole.admin)

    trip_a = await trip_repo.create_trip(db_session, ctx_a, trip_request, _generated(trip_request))
    trip_b = await trip_repo.create_trip(db_session, ctx_b, trip_request, _generated(trip_request))
    await db_session.commit()

    assert (await trip_repo.get_trip(db_session, ctx_a, trip_a.id)).user_id == user_id
    with pytest.raises(PermissionDeniedError):
        await trip_repo.get_trip(db_session, ctx_a, trip_b.id)
    with pytest.raises(PermissionDeniedError):
        await trip_repo.get_trip(db_session, ctx_b, trip_a.id)

    # Admins may open any trip but list only their own
    assert (await trip_repo.get_trip(db_session, ctx_admin, trip_a.id)).id == trip_a.id
    assert await trip_repo.list_trips(db_session, ctx_admin) == []

    assert [t.id for t in await trip_repo.list_trips(db_session, ctx_a)] == [trip_a.id]
    assert [t.id for t in await trip_repo.list_trips(db_session, ctx_b)] == [trip_b.id]


@pytest.mark.asyncio
async def test_missing_trip_is_not_found(db_session: AsyncSession, user_id: uuid.UUID) -> None:
    with pytest.raises(NotFoundError):
        await trip_repo.get_trip(db_session, RequestContext(user_id=user_id), uuid.uuid4())


@pytest.mark.asyncio
async def test_dashboard_counts_only_own_spend(
    db_session: AsyncSession,
    trip_request: TripRequest,
    user_id: uuid.UUID,
    other_user_id: uuid.UUID,
) -> None:
    ctx_a = RequestContext(user_id=user_id)
    ctx_b = RequestContext(user_id=other_user_id)
    trip_a = await trip_repo.create_trip(db_session, ctx_a, trip_request, _generated(trip_request))
    trip_b = await trip_repo.create_trip(db_session, ctx_b, trip_request, _generated(trip_request))
    for ctx, trip, amount in ((ctx_a, trip_a, 30.0), (ctx_b, trip_b, 500.0)):
        await expense_repo.create_expense(
            db_session,
            ctx,
            trip.id,
            ExpenseCreate(category=ExpenseCategory.food, amount=amount, expense_date=date(2026, 6, 2)),
        )
    await db_session.commit()

    stats = await trip_repo.dashboard_stats(db_session, ctx_a)

    assert stats.total_trips == 1
    assert stats.total_spent == pytest.approx(30.0)
    assert stats.total_carbon_kg == pytest.approx(146.3)
    assert stats.avg_green_score == 45
