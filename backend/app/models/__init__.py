"""Models package - re-exports for convenience."""

from backend.app.models.carbon import (
    CarbonBreakdown,
    EcoAlternative,
    EmissionFactorCreate,
    EmissionFactorOut,
    EmissionFactorUpdate,
    TripEmissionsInput,
)
from backend.app.models.common import (
    AccommodationPreference,
    ExpenseCategory,
    FactorCategory,
    Location,
    TransportPreference,
    TravelStyle,
    UserRole,
)
from backend.app.models.expense import ExpenseCreate, ExpenseOut, ExpenseSummary, ExpenseUpdate
from backend.app.models.itinerary import Activity, Coordinates, Day, Itinerary, Meals
from backend.app.models.trip import (
    DashboardStats,
    GeneratedTrip,
    GenerateTripResponse,
    StageReport,
    TripDetail,
    TripGenerationRequest,
    TripRequest,
    TripSummary,
    TripUpdate,
)
from backend.app.models.user import UserDetail, UserList, UserOut, UserUpdate

__all__ = [
    # Common
    "FactorCategory",
    "TravelStyle",
    "AccommodationPreference",
    "TransportPreference",
    "ExpenseCategory",
    "UserRole",
    "Location",
    # Itinerary
    "Itinerary",
    "Day",
    "Activity",
    "Meals",
    "Coordinates",
    # Carbon
    "CarbonBreakdown",
    "TripEmissionsInput",
    "EcoAlternative",
    "EmissionFactorCreate",
    "EmissionFactorUpdate",
    "EmissionFactorOut",
    # Trip
    "TripRequest",
    "TripGenerationRequest",
    "GeneratedTrip",
    "StageReport",
    "TripSummary",
    "TripDetail",
    "GenerateTripResponse",
    "TripUpdate",
    "DashboardStats",
    # Expense
    "ExpenseCreate",
    "ExpenseUpdate",
    "ExpenseOut",
    "ExpenseSummary",
    # User
    "UserOut",
    "UserList",
    "UserDetail",
    "UserUpdate",
]
