"""Deterministic template itinerary used when the AI provider is unavailable."""

import math
from datetime import timedelta
from typing import Any

from backend.app.models.trip import TripRequest

PACKING_TIPS = [
    "Reusable water bottle",
    "Eco-friendly toiletries",
    "Comfortable walking shoes",
    "Light, layered clothing",
    "Reusable shopping bag",
]

ECO_TIPS = [
    "Use public transportation whenever possible",
    "Support local businesses and artisans",
    "Choose restaurants with locally-sourced ingredients",
    "Avoid single-use plastics",
    "Walk or cycle for short distances",
]

LOCAL_CUSTOMS = [
    "Respect local customs and traditions",
    "Learn a few basic phrases in the local language",
    "Dress appropriately for cultural sites",
    "Ask permission before taking photos of people",
]


def _daily_budget(request: TripRequest) -> int:
    return math.floor(request.budget / request.num_days * 0.8 + 0.5)


def _theme(request: TripRequest, day_number: int) -> str:
    if day_number == 1:
        return "Arrival & Exploration"
    if day_number == request.num_days:
        return "Final Day & Departure"
    return f"Discover {request.destination}"


def template_day(request: TripRequest, day_number: int) -> dict[str, Any]:
    """Build one template day (1-based day_number) as a raw draft dict."""
    destination = request.destination
    day_date = request.start_date + timedelta(days=day_number - 1)

    return {
        "day": day_number,
        "date": day_date.isoformat(),
        "theme": _theme(request, day_number),
        "activities": [
            {
                "id": f"{day_number}-1",
                "time": "09:00",
                "title": f"Morning Exploration of {destination}",
                "location": f"Central {destination}",
                "duration_hours": 2,
                "estimated_cost": 0,
                "carbon_kg": 0.5,
                "type": "outdoor_activity",
                "description": "Start your day with a walking tour of the city center",
                "transport_mode": "walking",
                "eco_alternative": "Walking is the most eco-friendly way to explore",
            },
            {
                "id": f"{day_number}-2",
                "time": "11:30",
                "title": "Local Museum Visit",
                "location": "City Museum",
                "duration_hours": 2,
                "estimated_cost": 15,
                "carbon_kg": 2.0,
                "type": "museum",
                "description": "Explore local history and culture",
                "transport_mode": "walking",
                "eco_alternative": "Support local cultural institutions",
            },
            {
                "id": f"{day_number}-3",
                "time": "13:30",
                "title": "Lunch at Local Restaurant",
                "location": "Local Cuisine Restaurant",
                "duration_hours": 1.5,
                "estimated_cost": 25,
                "carbon_kg": 3.5,
                "type": "restaurant",
                "description": "Try authentic local dishes made with seasonal ingredients",
                "transport_mode": "walking",
                "eco_alternative": "Choose restaurants using locally-sourced ingredients",
            },
            {
                "id": f"{day_number}-4",
                "time": "15:30",
                "title": "Afternoon Cultural Experience",
                "location": "Historic District",
                "duration_hours": 2,
                "estimated_cost": 10,
                "carbon_kg": 1.5,
                "type": "tour",
                "description": "Guided walking tour of historic landmarks",
                "transport_mode": "walking",
                "eco_alternative": "Walking tours have zero carbon footprint",
            },
            {
                "id": f"{day_number}-5",
                "time": "18:00",
                "title": "Evening Leisure",
                "location": "City Park",
                "duration_hours": 1,
                "estimated_cost": 0,
                "carbon_kg": 0,
                "type": "outdoor_activity",
                "description": "Relax in a local park and enjoy the atmosphere",
                "transport_mode": "walking",
                "eco_alternative": "Public parks are free and eco-friendly",
            },
        ],
        "meals": {
            "breakfast": "Hotel breakfast or local bakery",
            "lunch": "Local restaurant with seasonal menu",
            "dinner": "Traditional local cuisine",
        },
        "daily_cost": _daily_budget(request),
    }


def template_itinerary(request: TripRequest) -> dict[str, Any]:
    """Build a full template itinerary covering every requested day."""
    num_days = request.num_days
    return {
        "summary": (
            f"An eco-friendly {num_days}-day adventure in {request.destination} with "
            "sustainable transportation, local experiences, and carbon-conscious activities. "
            "This is a sample itinerary generated while the AI planner is unavailable."
        ),
        "sustainability_score": 85,
        "estimated_total_cost": max(0.0, min(request.budget * 0.9, request.budget - 100)),
        "days": [template_day(request, n) for n in range(1, num_days + 1)],
        "packing_tips": list(PACKING_TIPS),
        "eco_tips": list(ECO_TIPS),
        "local_customs": list(LOCAL_CUSTOMS),
    }
