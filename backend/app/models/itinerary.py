"""Itinerary models - canonical shape produced by normalization."""

from datetime import date

from pydantic import BaseModel, Field

# Longest great-circle distance on Earth, rounded up
MAX_DISTANCE_KM = 20_100


class Activity(BaseModel):
    """Single activity in a day."""

    id: str
    time: str = "09:00"
    title: str
    location: str = ""
    duration_hours: float = Field(2.0, ge=0)
    estimated_cost: float = Field(0.0, ge=0)
    carbon_kg: float = Field(1.5, ge=0)
    type: str = "tour"
    description: str = ""
    transport_mode: str = "walking"
    transport_distance_km: float | None = Field(None, ge=0, le=MAX_DISTANCE_KM)
    eco_alternative: str = ""


class Meals(BaseModel):
    """Meal recommendations for a day."""

    breakfast: str = ""
    lunch: str = ""
    dinner: str = ""


class Day(BaseModel):
    """Itinerary for a single day."""

    day: int = Field(..., ge=1)
    date: date
    theme: str = ""
    activities: list[Activity]
    meals: Meals = Field(default_factory=Meals)
    daily_cost: float = Field(0.0, ge=0)


class Coordinates(BaseModel):
    """Destination coordinates stored on the itinerary."""

    latitude: float
    longitude: float


class Itinerary(BaseModel):
    """Complete itinerary document stored on a trip."""

    summary: str = ""
    sustainability_score: int = 75
    estimated_total_cost: float = 0.0
    days: list[Day]
    packing_tips: list[str] = Field(default_factory=list)
    eco_tips: list[str] = Field(default_factory=list)
    local_customs: list[str] = Field(default_factory=list)
    destination_coordinates: Coordinates | None = None

    # Carbon breakdown, written after scoring
    transport_carbon: float = 0.0
    accommodation_carbon: float = 0.0
    activities_carbon: float = 0.0

    @property
    def num_days(self) -> int:
        return len(self.days)
