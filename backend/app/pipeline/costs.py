"""Cost aggregation over a normalized itinerary."""

from backend.app.models.itinerary import Itinerary


def total_cost(itinerary: Itinerary) -> float:
    """Sum every activity's estimated cost plus every day's daily_cost.

    Both contribute even when a draft populates them from the same spend, so a
    day whose daily_cost already includes its activities is counted twice.
    """
    total = 0.0
    for day in itinerary.days:
        for activity in day.activities:
            total += activity.estimated_cost
        total += day.daily_cost

    return round(total, 2)
