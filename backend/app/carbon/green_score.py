"""Green score - 0-100 sustainability rating from average daily emissions.

Benchmarks (kg CO2 per day):
    < 5      excellent   score 90-100
    5-15     good        score 50-90
    15-30    average     score 20-50
    30-50    high        score 10-20
    >= 50    very high   score 0-10
"""

import math
from typing import Literal

GreenBand = Literal["good", "moderate", "poor"]


def green_score(total_carbon_kg: float | None, trip_days: int | None) -> int:
    """Map total trip emissions to an integer score in [0, 100].

    Higher score means more sustainable. Missing carbon or a missing or
    non-positive day count scores 0.
    """
    if total_carbon_kg is None or not trip_days or trip_days <= 0:
        return 0

    daily = total_carbon_kg / trip_days

    if daily < 5:
        score = 100 - daily * 2
    elif daily < 15:
        score = 90 - (daily - 5) * 4
    elif daily < 30:
        score = 50 - (daily - 15) * 2
    elif daily < 50:
        score = 20 - (daily - 30) * 0.5
    else:
        score = max(0.0, 10 - (daily - 50) * 0.2)

    # Round half up
    return max(0, min(100, math.floor(score + 0.5)))


def score_band(score: int) -> GreenBand:
    """Colour band used by dashboards: green, yellow, red."""
    if score >= 70:
        return "good"
    if score >= 40:
        return "moderate"
    return "poor"
