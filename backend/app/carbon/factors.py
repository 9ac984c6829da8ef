"""Emission factor table - default DEFRA values and the FactorStore capability.

Source: UK Government GHG Conversion Factors for Company Reporting (DEFRA 2023).
"""

from dataclasses import dataclass
from typing import Protocol

from backend.app.models.common import FactorCategory


@dataclass(frozen=True)
class FactorSeed:
    """One row of the default emission factor table."""

    category: FactorCategory
    sub_category: str
    factor_kg_per_unit: float
    unit: str
    description: str
    source: str = "DEFRA 2023"


_T = FactorCategory.transport
_A = FactorCategory.accommodation
_ACT = FactorCategory.activity

DEFAULT_EMISSION_FACTORS: tuple[FactorSeed, ...] = (
    # Air travel
    FactorSeed(_T, "flight_short_haul", 0.255, "km", "Short-haul flight (<500km)"),
    FactorSeed(_T, "flight_medium_haul", 0.156, "km", "Medium-haul flight (500-3700km)"),
    FactorSeed(_T, "flight_long_haul", 0.195, "km", "Long-haul flight (>3700km)"),
    FactorSeed(_T, "flight_domestic", 0.255, "km", "Domestic flight (average)"),
    # Rail
    FactorSeed(_T, "train_national", 0.041, "km", "National rail"),
    FactorSeed(_T, "train_international", 0.006, "km", "International rail (e.g., Eurostar)"),
    FactorSeed(_T, "train_light_rail", 0.035, "km", "Light rail and tram"),
    FactorSeed(_T, "train_underground", 0.031, "km", "Underground/Metro"),
    # Road
    FactorSeed(_T, "bus_local", 0.105, "km", "Local bus"),
    FactorSeed(_T, "bus_coach", 0.028, "km", "Coach/long-distance bus"),
    FactorSeed(_T, "car_small", 0.142, "km", "Small car (petrol)"),
    FactorSeed(_T, "car_medium", 0.171, "km", "Medium car (petrol)"),
    FactorSeed(_T, "car_large", 0.209, "km", "Large car (petrol)"),
    FactorSeed(_T, "car_average", 0.171, "km", "Average car (all fuels)"),
    FactorSeed(_T, "car_electric", 0.047, "km", "Electric car"),
    FactorSeed(_T, "taxi_regular", 0.211, "km", "Regular taxi"),
    FactorSeed(_T, "taxi_black_cab", 0.225, "km", "Black cab (London)"),
    FactorSeed(_T, "motorcycle_small", 0.084, "km", "Motorcycle (small)"),
    FactorSeed(_T, "motorcycle_large", 0.135, "km", "Motorcycle (large)"),
    # Water and active
    FactorSeed(_T, "ferry_foot", 0.019, "km", "Ferry (foot passenger)"),
    FactorSeed(_T, "ferry_car", 0.129, "km", "Ferry (car passenger)"),
    FactorSeed(_T, "bicycle", 0.0, "km", "Bicycle (zero emissions)"),
    FactorSeed(_T, "walking", 0.0, "km", "Walking (zero emissions)"),
    # Accommodation
    FactorSeed(_A, "hotel_budget", 15.2, "night", "Budget hotel (1-3 stars)"),
    FactorSeed(_A, "hotel_standard", 20.9, "night", "Standard hotel (3-4 stars)"),
    FactorSeed(_A, "hotel_luxury", 35.5, "night", "Luxury hotel (5 stars)"),
    FactorSeed(_A, "hostel", 8.5, "night", "Hostel/budget accommodation"),
    FactorSeed(_A, "eco_lodge", 5.2, "night", "Eco-lodge/green hotel"),
    FactorSeed(_A, "airbnb", 12.5, "night", "Airbnb/vacation rental"),
    FactorSeed(_A, "camping", 2.5, "night", "Camping/outdoor accommodation"),
    # Activities
    FactorSeed(_ACT, "museum_indoor", 2.0, "visit", "Museum/gallery visit"),
    FactorSeed(_ACT, "outdoor_activity", 0.5, "activity", "Outdoor activity (hiking, etc.)"),
    FactorSeed(_ACT, "restaurant_meal", 3.5, "meal", "Restaurant meal (average)"),
    FactorSeed(_ACT, "fast_food_meal", 2.1, "meal", "Fast food meal"),
    FactorSeed(_ACT, "cafe_snack", 0.8, "visit", "Cafe/snack"),
    FactorSeed(_ACT, "shopping_mall", 1.0, "visit", "Shopping mall visit"),
    FactorSeed(_ACT, "entertainment_venue", 1.5, "visit", "Entertainment venue (cinema, theater)"),
    FactorSeed(_ACT, "theme_park", 8.5, "visit", "Theme park/amusement park"),
    FactorSeed(_ACT, "spa_wellness", 4.2, "visit", "Spa/wellness center"),
    FactorSeed(_ACT, "water_sports", 6.5, "activity", "Water sports (motorized)"),
    FactorSeed(_ACT, "tour_guided", 3.0, "tour", "Guided tour (walking)"),
)


class FactorStore(Protocol):
    """Read access to active emission factors."""

    async def get_active_factor(self, category: FactorCategory, sub_category: str) -> float | None:
        """Get the active factor (kg CO2 per unit) for a category/sub-category.

        Returns:
            Factor value, or None if no active factor exists
        """
        ...


class InMemoryFactorStore:
    """FactorStore backed by a dict; defaults to the DEFRA table."""

    def __init__(self, factors: dict[tuple[str, str], float] | None = None) -> None:
        if factors is None:
            factors = {
                (seed.category.value, seed.sub_category): seed.factor_kg_per_unit
                for seed in DEFAULT_EMISSION_FACTORS
            }
        self._factors = dict(factors)

    async def get_active_factor(self, category: FactorCategory, sub_category: str) -> float | None:
        return self._factors.get((FactorCategory(category).value, sub_category))

