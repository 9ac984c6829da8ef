"""Carbon models - emission factors, breakdowns and alternatives."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.common import FactorCategory
from backend.app.models.itinerary import Itinerary


class CarbonBreakdown(BaseModel):
    """Trip emissions in kg CO2, each field rounded to 2 decimals independently."""

    transport: float = 0.0
    accommodation: float = 0.0
    activities: float = 0.0
    total: float = 0.0


class TripEmissionsInput(BaseModel):
    """Quantities needed to compute a trip's emissions."""

    accommodation_preference: str | None = None
    nights: int = 0
    itinerary: Itinerary | None = None
    destination_distance_km: float = 0.0


class EcoAlternative(BaseModel):
    """Lower-emission transport option for a leg."""

    mode: str
    emissions_kg: float
    savings_kg: float
    savings_percent: int


class EmissionFactorCreate(BaseModel):
    """Request body for creating an emission factor."""

    category: FactorCategory
    sub_category: str = Field(..., min_length=1, max_length=100)
    factor_kg_per_unit: float = Field(..., ge=0)
    unit: str = Field(..., min_length=1, max_length=50)
    source: str = "DEFRA 2023"
    description: str | None = None


class EmissionFactorUpdate(BaseModel):
    """Partial update for an emission factor."""

    sub_category: str | None = Field(None, min_length=1, max_length=100)
    factor_kg_per_unit: float | None = Field(None, ge=0)
    unit: str | None = Field(None, min_length=1, max_length=50)
    source: str | None = None
    description: str | None = None
    is_active: bool | None = None


class EmissionFactorOut(BaseModel):
    """Emission factor as returned by the admin API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category: FactorCategory
    sub_category: str
    factor_kg_per_unit: float
    unit: str
    source: str | None
    description: str | None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
