"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, Field


class FactorCategory(str, Enum):
    """Emission factor category."""

    transport = "transport"
    accommodation = "accommodation"
    activity = "activity"


class TravelStyle(str, Enum):
    """Overall spending style for the trip."""

    budget = "budget"
    balanced = "balanced"
    luxury = "luxury"


class AccommodationPreference(str, Enum):
    """Accommodation type; values double as accommodation emission sub-categories."""

    hostel = "hostel"
    hotel_budget = "hotel_budget"
    hotel_standard = "hotel_standard"
    eco_lodge = "eco_lodge"
    airbnb = "airbnb"


class TransportPreference(str, Enum):
    """Preferred way of getting around."""

    train = "train"
    bus = "bus"
    car = "car"
    mixed = "mixed"


class ExpenseCategory(str, Enum):
    """Expense category."""

    transport = "transport"
    accommodation = "accommodation"
    food = "food"
    activities = "activities"
    shopping = "shopping"
    other = "other"


class UserRole(str, Enum):
    """User role."""

    user = "user"
    admin = "admin"


class Location(BaseModel):
    """Geocoded destination (WGS84)."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    formatted_address: str
    place_id: str | None = None

    @classmethod
    def placeholder(cls, destination: str) -> "Location":
        """Degraded location used when geocoding is unavailable."""
        return cls(lat=0.0, lng=0.0, formatted_address=destination, place_id=None)
