"""Trip endpoints - AI generation and owner-scoped CRUD."""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context
from backend.app.api.deps import enforce_rate_limit, get_trip_generator
from backend.app.db import trips as trip_repo
from backend.app.db.context import RequestContext
from backend.app.db.engine import get_session
from backend.app.models.trip import (
    GenerateTripResponse,
    TripDetail,
    TripGenerationRequest,
    TripSummary,
    TripUpdate,
)
from backend.app.pipeline.generator import TripGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])


@router.post(
    "/generate",
    response_model=GenerateTripResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_rate_limit)],
)
async def generate_trip(
    request: TripGenerationRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
    generator: Annotated[TripGenerator, Depends(get_trip_generator)],
) -> GenerateTripResponse:
    """Generate an itinerary, score it and store it as a new trip.

    Provider failures degrade to placeholder location and template itinerary;
    only a normalization failure aborts (500, nothing stored).
    """
    generated = await generator.generate(request)
    trip = await trip_repo.create_trip(session, ctx, request, generated)
    await session.commit()

    if generated.degraded:
        logger.info(f"Stored degraded trip {trip.id} (source {generated.itinerary_source})")

    return GenerateTripResponse(
        **trip_repo.to_detail(trip).model_dump(),
        carbon_breakdown=generated.carbon_breakdown,
        itinerary_source=generated.itinerary_source,
        stages=generated.stages,
    )


@router.get("", response_model=list[TripSummary])
async def list_trips(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[TripSummary]:
    """List the caller's trips, newest first."""
    trips = await trip_repo.list_trips(session, ctx, limit=limit, offset=offset)
    return [trip_repo.to_summary(trip) for trip in trips]


@router.get("/{trip_id}", response_model=TripDetail)
async def get_trip(
    trip_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TripDetail:
    """Get one trip with its itinerary."""
    trip = await trip_repo.get_trip(session, ctx, trip_id)
    return trip_repo.to_detail(trip)


@router.put("/{trip_id}", response_model=TripDetail)
async def update_trip(
    trip_id: uuid.UUID,
    data: TripUpdate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
    generator: Annotated[TripGenerator, Depends(get_trip_generator)],
) -> TripDetail:
    """Update a trip; itinerary or accommodation changes recompute its scores."""
    trip = await trip_repo.update_trip(session, ctx, trip_id, data, generator)
    await session.commit()
    return trip_repo.to_detail(trip)


@router.delete("/{trip_id}")
async def delete_trip(
    trip_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> dict[str, object]:
    """Delete a trip and its expenses."""
    await trip_repo.delete_trip(session, ctx, trip_id)
    await session.commit()
    return {"success": True, "message": "Trip deleted successfully"}
