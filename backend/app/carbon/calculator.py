"""Carbon calculator - converts trip quantities into kg CO2.

Every public method returns a number. Missing factors degrade to documented
defaults, store errors and malformed quantities degrade to 0; nothing here
raises for missing pricing data.
"""

import logging
import math
from typing import Any

from backend.app.carbon.factors import FactorStore
from backend.app.models.carbon import CarbonBreakdown, EcoAlternative, TripEmissionsInput
from backend.app.models.common import FactorCategory
from backend.app.utils.metrics import factor_lookup_misses_total

logger = logging.getLogger(__name__)

TRANSPORT_ALIASES: dict[str, str] = {
    "car": "car_average",
    "train": "train_national",
    "bus": "bus_local",
    "flight": "flight_medium_haul",
    "taxi": "taxi_regular",
    "bicycle": "bicycle",
    "walking": "walking",
}

ACTIVITY_ALIASES: dict[str, str] = {
    "museum": "museum_indoor",
    "restaurant": "restaurant_meal",
    "cafe": "cafe_snack",
    "shopping": "shopping_mall",
    "hiking": "outdoor_activity",
    "tour": "tour_guided",
    "outdoor": "outdoor_activity",
}

DEFAULT_TRANSPORT_SUBCATEGORY = "car_average"
DEFAULT_TRANSPORT_KG_PER_KM = 0.171
DEFAULT_ACCOMMODATION_SUBCATEGORY = "hotel_standard"
DEFAULT_ACCOMMODATION_KG_PER_NIGHT = 20.9
DEFAULT_ACTIVITY_KG = 1.5

# Long-distance legs above this distance are flown
FLIGHT_THRESHOLD_KM = 100.0
SHORT_HAUL_MAX_KM = 500.0
MEDIUM_HAUL_MAX_KM = 3700.0


def _as_positive_number(value: Any) -> float:
    """Coerce a quantity to float; anything unusable or non-positive is 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number <= 0:
        return 0.0
    return number


def flight_subcategory(distance_km: float) -> str:
    """Pick the flight emission class for a one-way distance."""
    if distance_km < SHORT_HAUL_MAX_KM:
        return "flight_short_haul"
    if distance_km <= MEDIUM_HAUL_MAX_KM:
        return "flight_medium_haul"
    return "flight_long_haul"


class CarbonCalculator:
    """Emission calculations over a FactorStore."""

    def __init__(self, store: FactorStore) -> None:
        self._store = store

    async def _lookup(self, category: FactorCategory, sub_category: str) -> float | None:
        factor = await self._store.get_active_factor(category, sub_category)
        if factor is None:
            factor_lookup_misses_total.labels(category=category.value).inc()
            return None
        return float(factor)

    async def transport_emissions(self, mode: str | None, distance_km: Any) -> float:
        """Emissions for travelling distance_km by mode.

        Unknown modes fall back to the average car factor.
        """
        distance = _as_positive_number(distance_km)
        if not mode or not isinstance(mode, str) or distance == 0:
            return 0.0

        sub_category = TRANSPORT_ALIASES.get(mode.lower(), mode)
        try:
            factor = await self._lookup(FactorCategory.transport, sub_category)
            if factor is None:
                logger.warning(f"No emission factor found for transport mode: {mode}, using default")
                factor = await self._lookup(FactorCategory.transport, DEFAULT_TRANSPORT_SUBCATEGORY)
            if factor is None:
                factor = DEFAULT_TRANSPORT_KG_PER_KM
        except Exception as e:
            logger.error(f"Error calculating transport emissions: {e}")
            return 0.0

        return distance * factor

    async def accommodation_emissions(self, accommodation_type: str | None, nights: Any) -> float:
        """Emissions for staying the given number of nights."""
        count = _as_positive_number(nights)
        if not accommodation_type or count == 0:
            return 0.0

        try:
            factor = await self._lookup(FactorCategory.accommodation, accommodation_type)
            if factor is None:
                logger.warning(
                    f"No emission factor found for accommodation type: {accommodation_type}, "
                    "using default"
                )
                factor = await self._lookup(
                    FactorCategory.accommodation, DEFAULT_ACCOMMODATION_SUBCATEGORY
                )
            if factor is None:
                factor = DEFAULT_ACCOMMODATION_KG_PER_NIGHT
        except Exception as e:
            logger.error(f"Error calculating accommodation emissions: {e}")
            return 0.0

        return count * factor

    async def activity_emissions(self, activity_type: str | None, count: Any = 1) -> float:
        """Emissions for count occurrences of an activity."""
        occurrences = _as_positive_number(count)
        if not activity_type or not isinstance(activity_type, str) or occurrences == 0:
            return 0.0

        sub_category = ACTIVITY_ALIASES.get(activity_type.lower(), activity_type)
        try:
            factor = await self._lookup(FactorCategory.activity, sub_category)
        except Exception as e:
            logger.error(f"Error calculating activity emissions: {e}")
            return 0.0

        if factor is None:
            logger.warning(f"No emission factor found for activity: {activity_type}, using default")
            factor = DEFAULT_ACTIVITY_KG

        return occurrences * factor

    async def trip_emissions(self, trip: TripEmissionsInput) -> CarbonBreakdown:
        """Emission breakdown for a whole trip.

        Sums accommodation over the nights, every activity and inter-activity
        transport leg in the itinerary, and a round-trip flight when the
        destination is more than 100 km away.
        """
        transport = 0.0
        accommodation = 0.0
        activities = 0.0

        if trip.accommodation_preference and trip.nights:
            accommodation = await self.accommodation_emissions(
                trip.accommodation_preference, trip.nights
            )

        if trip.itinerary is not None:
            for day in trip.itinerary.days:
                for activity in day.activities:
                    if activity.type:
                        activities += await self.activity_emissions(activity.type, 1)

                    if activity.transport_mode and activity.transport_distance_km:
                        transport += await self.transport_emissions(
                            activity.transport_mode, activity.transport_distance_km
                        )

        distance = _as_positive_number(trip.destination_distance_km)
        if distance > FLIGHT_THRESHOLD_KM:
            transport += await self.transport_emissions(flight_subcategory(distance), distance * 2)

        total = transport + accommodation + activities

        # Components and total are rounded independently of each other
        return CarbonBreakdown(
            transport=round(transport, 2),
            accommodation=round(accommodation, 2),
            activities=round(activities, 2),
            total=round(total, 2),
        )

    async def eco_alternatives(self, current_mode: str, distance_km: float) -> list[EcoAlternative]:
        """Lower-emission transport options for a leg, cleanest first."""
        current = await self.transport_emissions(current_mode, distance_km)
        if current <= 0:
            return []

        if distance_km < SHORT_HAUL_MAX_KM:
            options = ["train_national", "bus_local", "car_electric"]
        else:
            options = ["train_international", "bus_coach"]

        alternatives: list[EcoAlternative] = []
        for option in options:
            emissions = await self.transport_emissions(option, distance_km)
            if emissions < current:
                savings = current - emissions
                alternatives.append(
                    EcoAlternative(
                        mode=option,
                        emissions_kg=round(emissions, 2),
                        savings_kg=round(savings, 2),
                        savings_percent=round(savings / current * 100),
                    )
                )

        return sorted(alternatives, key=lambda a: a.emissions_kg)
