"""Trip models - generation request, pipeline output and API views."""

from datetime import date, datetime
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from backend.app.models.carbon import CarbonBreakdown
from backend.app.models.common import (
    AccommodationPreference,
    Location,
    TransportPreference,
    TravelStyle,
)
from backend.app.models.itinerary import MAX_DISTANCE_KM, Itinerary

ItinerarySource = Literal["openai", "template"]

MAX_BUDGET = 1_000_000


class TripRequest(BaseModel):
    """Validated input of the itinerary generation pipeline."""

    destination: Annotated[str, Field(min_length=2, max_length=200)]
    start_date: date
    end_date: date
    budget: Annotated[float, Field(gt=0, le=MAX_BUDGET)]
    interests: Annotated[list[str], Field(min_length=1)]
    travel_style: TravelStyle
    accommodation_preference: AccommodationPreference
    transport_preference: TransportPreference
    destination_distance_km: Annotated[float, Field(ge=0, le=MAX_DISTANCE_KM)] = 0.0

    @field_validator("end_date")
    @classmethod
    def validate_end_after_start(cls, v: date, info: ValidationInfo) -> date:
        """Ensure end_date >= start_date."""
        if "start_date" in info.data and v < info.data["start_date"]:
            raise ValueError("End date must be on or after start date")
        return v

    @property
    def num_days(self) -> int:
        """Inclusive day count."""
        return (self.end_date - self.start_date).days + 1


class TripGenerationRequest(TripRequest):
    """Request body for POST /trips/generate; start date must be in the future."""

    @field_validator("start_date")
    @classmethod
    def validate_start_in_future(cls, v: date) -> date:
        if v <= date.today():
            raise ValueError("Start date must be in the future")
        return v


class StageReport(BaseModel):
    """Outcome of one pipeline stage, for observability."""

    stage: str
    status: Literal["succeeded", "degraded", "failed"]
    reason: str | None = None


class GeneratedTrip(BaseModel):
    """Composed pipeline output, persisted as one trip."""

    itinerary: Itinerary
    location: Location
    total_carbon_kg: float = Field(..., ge=0)
    total_cost: float = Field(..., ge=0)
    green_score: int = Field(..., ge=0, le=100)
    carbon_breakdown: CarbonBreakdown
    itinerary_source: ItinerarySource = "openai"
    stages: list[StageReport] = Field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return any(s.status == "degraded" for s in self.stages)


class TripSummary(BaseModel):
    """Trip row for listings."""

    id: UUID
    destination: str
    start_date: date
    end_date: date
    budget: float
    total_carbon_kg: float
    total_cost: float
    green_score: int
    created_at: datetime | None = None


class TripDetail(TripSummary):
    """Full trip view."""

    interests: list[str]
    travel_style: str | None
    accommodation_preference: str | None
    transport_preference: str | None
    itinerary: dict[str, Any] | None
    green_band: str
    updated_at: datetime | None = None


class GenerateTripResponse(TripDetail):
    """Response for POST /trips/generate."""

    success: bool = True
    message: str = "Trip generated successfully"
    carbon_breakdown: CarbonBreakdown
    itinerary_source: ItinerarySource
    stages: list[StageReport]


class TripUpdate(BaseModel):
    """Partial trip update; itinerary or accommodation changes trigger rescoring."""

    destination: Annotated[str | None, Field(min_length=2, max_length=200)] = None
    budget: Annotated[float | None, Field(gt=0, le=MAX_BUDGET)] = None
    interests: Annotated[list[str] | None, Field(min_length=1)] = None
    travel_style: TravelStyle | None = None
    accommodation_preference: AccommodationPreference | None = None
    transport_preference: TransportPreference | None = None
    itinerary: Itinerary | None = None


class DashboardStats(BaseModel):
    """Aggregate statistics for a user's trips."""

    total_trips: int
    total_carbon_kg: float
    total_spent: float
    avg_green_score: int
    carbon_breakdown: CarbonBreakdown
