"""Prompt construction for itinerary drafting."""

from backend.app.models.trip import TripRequest

SYSTEM_PROMPT = (
    "You are an expert sustainable travel planner. You create detailed, eco-friendly "
    "itineraries that minimize carbon footprint while maximizing traveler experiences. "
    "Always prioritize sustainable options like public transport, local experiences, "
    "and eco-friendly accommodations."
)

TRAVEL_STYLE_DESCRIPTIONS: dict[str, str] = {
    "budget": "budget-friendly with free or low-cost activities",
    "balanced": "balanced mix of budget and premium experiences",
    "luxury": "comfortable and premium experiences",
}

INTEREST_DESCRIPTIONS: dict[str, str] = {
    "culture": "cultural sites and historical landmarks",
    "nature": "natural scenery and outdoor activities",
    "food": "local cuisine and dining experiences",
    "photography": "photogenic locations and scenic spots",
    "music": "live music venues and cultural performances",
    "relaxation": "relaxing and wellness activities",
    "adventure": "adventure sports and thrilling activities",
    "shopping": "shopping districts and local markets",
    "beaches": "beaches and water activities",
    "museums": "museums, galleries, and art",
}

ACTIVITY_TYPES = (
    "museum, restaurant, outdoor_activity, shopping, tour, entertainment_venue, cafe, "
    "hiking, cultural_site, beach, adventure_sport, spa_wellness"
)

TRANSPORT_MODES = "walking, bicycle, train, bus, car, taxi"

RETURN_FORMAT = """{
  "summary": "Brief 2-3 sentence overview of the trip",
  "sustainability_score": 85,
  "estimated_total_cost": 950,
  "days": [
    {
      "day": 1,
      "date": "YYYY-MM-DD",
      "theme": "Arrival and City Exploration",
      "activities": [
        {
          "id": "1-1",
          "time": "09:00",
          "title": "Activity name",
          "location": "Specific address or landmark",
          "duration_hours": 2,
          "estimated_cost": 15,
          "carbon_kg": 2.0,
          "type": "museum",
          "description": "Brief description of the activity",
          "transport_mode": "walking",
          "transport_distance_km": 1.2,
          "eco_alternative": "Eco-friendly aspect or tip"
        }
      ],
      "meals": {
        "breakfast": "Recommended breakfast spot",
        "lunch": "Recommended lunch spot",
        "dinner": "Recommended dinner spot"
      },
      "daily_cost": 120
    }
  ],
  "packing_tips": ["Essential item 1", "Essential item 2"],
  "eco_tips": ["Sustainability tip 1", "Sustainability tip 2"],
  "local_customs": ["Cultural tip 1", "Cultural tip 2"]
}"""


def build_prompt(request: TripRequest) -> str:
    """Build the user prompt for an itinerary draft."""
    num_days = request.num_days
    style = request.travel_style.value
    interests = ", ".join(INTEREST_DESCRIPTIONS.get(i, i) for i in request.interests)

    lines = [
        f"Create a detailed {num_days}-day sustainable travel itinerary for {request.destination}.",
        "",
        "TRIP DETAILS:",
        f"- Destination: {request.destination}",
        f"- Dates: {request.start_date.isoformat()} to {request.end_date.isoformat()}",
        f"- Duration: {num_days} days",
        f"- Budget: £{request.budget:g} (total for the entire trip)",
        f"- Travel Style: {TRAVEL_STYLE_DESCRIPTIONS.get(style, style)}",
        f"- Interests: {interests}",
        f"- Preferred Accommodation: {request.accommodation_preference.value}",
        f"- Preferred Transport: {request.transport_preference.value}",
        "",
        "REQUIREMENTS:",
        "1. Create a day-by-day itinerary with 3-5 activities per day",
        "2. Prioritize eco-friendly and sustainable options (public transport, walking, "
        "cycling, local experiences)",
        "3. Include specific activity names, locations, and approximate costs",
        "4. Provide realistic time allocations for each activity",
        "5. Consider travel time and distance between activities",
        "6. Stay within the budget while maximizing value",
        "7. Include a mix of activities based on the traveler's interests",
        "8. Suggest local, authentic experiences over tourist traps",
        "9. Include meal recommendations (breakfast, lunch, dinner)",
        "10. Add sustainability tips and carbon-friendly alternatives",
        "",
        "RETURN FORMAT (JSON):",
        RETURN_FORMAT,
        "",
        "ACTIVITY TYPES:",
        f'Use these for the "type" field: {ACTIVITY_TYPES}',
        "",
        "TRANSPORT MODES:",
        f'Use these for "transport_mode": {TRANSPORT_MODES} '
        "(prefer walking, bicycle, train, bus for sustainability)",
        "",
        "Generate the itinerary now:",
    ]
    return "\n".join(lines)
