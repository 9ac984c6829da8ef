"""Dashboard statistics and carbon helper endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context
from backend.app.api.deps import get_calculator
from backend.app.carbon.calculator import CarbonCalculator
from backend.app.db.context import RequestContext
from backend.app.db.engine import get_session
from backend.app.db.trips import dashboard_stats
from backend.app.models.carbon import EcoAlternative
from backend.app.models.trip import DashboardStats

router = APIRouter()


class AlternativesResponse(BaseModel):
    """Response for GET /carbon/alternatives."""

    mode: str
    distance_km: float
    emissions_kg: float
    alternatives: list[EcoAlternative]


@router.get("/stats/dashboard", response_model=DashboardStats, tags=["stats"])
async def get_dashboard_stats(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DashboardStats:
    """Totals across the caller's trips."""
    return await dashboard_stats(session, ctx)


@router.get("/carbon/alternatives", response_model=AlternativesResponse, tags=["carbon"])
async def get_alternatives(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    calculator: Annotated[CarbonCalculator, Depends(get_calculator)],
    mode: Annotated[str, Query(min_length=1, max_length=50)],
    distance_km: Annotated[float, Query(gt=0)],
) -> AlternativesResponse:
    """Lower-emission options for one transport leg."""
    return AlternativesResponse(
        mode=mode,
        distance_km=distance_km,
        emissions_kg=await calculator.transport_emissions(mode, distance_km),
        alternatives=await calculator.eco_alternatives(mode, distance_km),
    )
