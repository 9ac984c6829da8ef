"""Repository for trip operations.

Every read and write is scoped by the request context: owners see their own
trips, admins may access any trip.
"""

import logging
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.carbon.green_score import score_band
from backend.app.db.context import RequestContext
from backend.app.db.models import Expense, Trip
from backend.app.errors import NotFoundError, PermissionDeniedError
from backend.app.models.carbon import CarbonBreakdown
from backend.app.models.itinerary import Itinerary
from backend.app.models.trip import (
    DashboardStats,
    GeneratedTrip,
    TripDetail,
    TripRequest,
    TripSummary,
    TripUpdate,
)
from backend.app.pipeline.costs import total_cost

if TYPE_CHECKING:
    from backend.app.pipeline.generator import TripGenerator

logger = logging.getLogger(__name__)


def _decimal(value: float) -> Decimal:
    return Decimal(str(round(value, 2)))


async def create_trip(
    session: AsyncSession,
    ctx: RequestContext,
    request: TripRequest,
    generated: GeneratedTrip,
) -> Trip:
    """Persist a generated trip for the calling user.

    Args:
        session: Database session
        ctx: Request context (owner)
        request: Validated generation request
        generated: Pipeline output

    Returns:
        The new trip row
    """
    breakdown = generated.carbon_breakdown
    trip = Trip(
        id=uuid.uuid4(),
        user_id=ctx.user_id,
        destination=request.destination,
        start_date=request.start_date,
        end_date=request.end_date,
        budget=_decimal(request.budget),
        interests=list(request.interests),
        travel_style=request.travel_style.value,
        accommodation_preference=request.accommodation_preference.value,
        transport_preference=request.transport_preference.value,
        itinerary=generated.itinerary.model_dump(mode="json"),
        location=generated.location.model_dump(mode="json"),
        total_carbon_kg=_decimal(generated.total_carbon_kg),
        transport_carbon_kg=_decimal(breakdown.transport),
        accommodation_carbon_kg=_decimal(breakdown.accommodation),
        activities_carbon_kg=_decimal(breakdown.activities),
        total_cost=_decimal(generated.total_cost),
        green_score=generated.green_score,
        destination_distance_km=_decimal(request.destination_distance_km),
    )
    session.add(trip)
    await session.flush()
    return trip


async def list_trips(
    session: AsyncSession, ctx: RequestContext, limit: int = 50, offset: int = 0
) -> list[Trip]:
    """List the caller's trips, newest first."""
    result = await session.execute(
        select(Trip)
        .where(Trip.user_id == ctx.user_id)
        .order_by(Trip.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all())


async def get_trip(session: AsyncSession, ctx: RequestContext, trip_id: uuid.UUID) -> Trip:
    """Fetch a trip the caller may access.

    Raises:
        NotFoundError: If the trip does not exist
        PermissionDeniedError: If the caller is neither owner nor admin
    """
    trip = await session.get(Trip, trip_id)
    if trip is None:
        raise NotFoundError(f"Trip {trip_id} not found")
    if not ctx.can_access(trip.user_id):
        raise PermissionDeniedError("Not authorized to access this trip")
    return trip


async def update_trip(
    session: AsyncSession,
    ctx: RequestContext,
    trip_id: uuid.UUID,
    data: TripUpdate,
    generator: "TripGenerator",
) -> Trip:
    """Apply a partial update, recomputing emissions when they may change.

    A new itinerary or accommodation preference triggers a rescore: carbon
    breakdown, total cost and green score are recomputed from the stored
    itinerary exactly as at generation time.

    Raises:
        NotFoundError: If the trip does not exist
        PermissionDeniedError: If the caller is neither owner nor admin
    """
    trip = await get_trip(session, ctx, trip_id)
    updates = data.model_dump(exclude_unset=True, exclude={"itinerary"})

    for field in ("destination", "interests"):
        if updates.get(field) is not None:
            setattr(trip, field, updates[field])
    if updates.get("budget") is not None:
        trip.budget = _decimal(updates["budget"])
    for field in ("travel_style", "accommodation_preference", "transport_preference"):
        if updates.get(field) is not None:
            setattr(trip, field, updates[field].value)

    needs_rescore = data.itinerary is not None or data.accommodation_preference is not None
    if needs_rescore and (data.itinerary is not None or trip.itinerary):
        itinerary = data.itinerary or Itinerary.model_validate(trip.itinerary)
        num_days = (trip.end_date - trip.start_date).days + 1
        emissions = await generator.rescore(
            itinerary,
            num_days,
            trip.accommodation_preference,
            float(trip.destination_distance_km or 0),
        )
        breakdown = emissions.breakdown
        itinerary.transport_carbon = breakdown.transport
        itinerary.accommodation_carbon = breakdown.accommodation
        itinerary.activities_carbon = breakdown.activities

        trip.itinerary = itinerary.model_dump(mode="json")
        trip.total_carbon_kg = _decimal(breakdown.total)
        trip.transport_carbon_kg = _decimal(breakdown.transport)
        trip.accommodation_carbon_kg = _decimal(breakdown.accommodation)
        trip.activities_carbon_kg = _decimal(breakdown.activities)
        trip.total_cost = _decimal(total_cost(itinerary))
        trip.green_score = emissions.green_score
        logger.info(
            f"Rescored trip {trip.id}: {breakdown.total} kg CO2, score {emissions.green_score}"
        )

    await session.flush()
    await session.refresh(trip)
    return trip


async def delete_trip(session: AsyncSession, ctx: RequestContext, trip_id: uuid.UUID) -> None:
    """Delete a trip and its expenses.

    Raises:
        NotFoundError: If the trip does not exist
        PermissionDeniedError: If the caller is neither owner nor admin
    """
    trip = await get_trip(session, ctx, trip_id)
    await session.execute(delete(Expense).where(Expense.trip_id == trip.id))
    await session.delete(trip)
    await session.flush()


async def dashboard_stats(session: AsyncSession, ctx: RequestContext) -> DashboardStats:
    """Aggregate the caller's trips and actual spend."""
    result = await session.execute(
        select(
            func.count(Trip.id),
            func.coalesce(func.sum(Trip.total_carbon_kg), 0),
            func.coalesce(func.avg(Trip.green_score), 0),
            func.coalesce(func.sum(Trip.transport_carbon_kg), 0),
            func.coalesce(func.sum(Trip.accommodation_carbon_kg), 0),
            func.coalesce(func.sum(Trip.activities_carbon_kg), 0),
        ).where(Trip.user_id == ctx.user_id)
    )
    count, carbon, avg_score, transport, accommodation, activities = result.one()

    spent_result = await session.execute(
        select(func.coalesce(func.sum(Expense.amount), 0))
        .join(Trip, Expense.trip_id == Trip.id)
        .where(Trip.user_id == ctx.user_id)
    )
    total_spent = spent_result.scalar_one()

    return DashboardStats(
        total_trips=count,
        total_carbon_kg=round(float(carbon), 2),
        total_spent=round(float(total_spent), 2),
        avg_green_score=int(round(float(avg_score))),
        carbon_breakdown=CarbonBreakdown(
            transport=round(float(transport), 2),
            accommodation=round(float(accommodation), 2),
            activities=round(float(activities), 2),
            total=round(float(carbon), 2),
        ),
    )


def to_summary(trip: Trip) -> TripSummary:
    """Map a trip row to its listing view."""
    return TripSummary(
        id=trip.id,
        destination=trip.destination,
        start_date=trip.start_date,
        end_date=trip.end_date,
        budget=float(trip.budget),
        total_carbon_kg=float(trip.total_carbon_kg),
        total_cost=float(trip.total_cost),
        green_score=trip.green_score,
        created_at=trip.created_at,
    )


def to_detail(trip: Trip) -> TripDetail:
    """Map a trip row to its full view."""
    return TripDetail(
        **to_summary(trip).model_dump(),
        interests=list(trip.interests or []),
        travel_style=trip.travel_style,
        accommodation_preference=trip.accommodation_preference,
        transport_preference=trip.transport_preference,
        itinerary=trip.itinerary,
        green_band=score_band(trip.green_score),
        updated_at=trip.updated_at,
    )
