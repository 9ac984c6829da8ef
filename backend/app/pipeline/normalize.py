"""Itinerary normalization - one place for field aliasing and defaults.

Drafts from the AI provider use inconsistent field names. Each canonical field
is read from a fixed priority list of source keys; the first present value
wins, otherwise the default applies.
"""

import math
from datetime import timedelta
from typing import Any

from pydantic import ValidationError

from backend.app.errors import NormalizationError
from backend.app.llm.template import template_day
from backend.app.models.itinerary import MAX_DISTANCE_KM, Activity, Day, Itinerary, Meals
from backend.app.models.trip import TripRequest

TITLE_KEYS = ("title", "name")
COST_KEYS = ("estimated_cost", "cost")
TYPE_KEYS = ("type", "category")
ECO_KEYS = ("eco_alternative", "sustainability_tip")
DISTANCE_KEYS = ("transport_distance_km", "distance_km")

DEFAULT_TIME = "09:00"
DEFAULT_DURATION_HOURS = 2.0
DEFAULT_CARBON_KG = 1.5
DEFAULT_TYPE = "tour"
DEFAULT_TRANSPORT_MODE = "walking"
DEFAULT_SUSTAINABILITY_SCORE = 75


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def _text(raw: dict[str, Any], keys: tuple[str, ...], default: str) -> str:
    for key in keys:
        value = raw.get(key)
        if _present(value):
            return str(value).strip()
    return default


def _to_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def _number(raw: dict[str, Any], keys: tuple[str, ...], default: float | None) -> float | None:
    for key in keys:
        number = _to_number(raw.get(key))
        if number is not None:
            return number
    return default


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if _present(item)]


def normalize_activity(raw: Any, day_number: int, position: int) -> Activity:
    """Normalize one raw activity (position is 1-based within its day)."""
    if not isinstance(raw, dict):
        raw = {}

    distance = _number(raw, DISTANCE_KEYS, None)
    if distance is not None and distance > MAX_DISTANCE_KM:
        distance = None

    return Activity(
        id=f"{day_number}-{position}",
        time=_text(raw, ("time",), DEFAULT_TIME),
        title=_text(raw, TITLE_KEYS, "Unnamed Activity"),
        location=_text(raw, ("location",), ""),
        duration_hours=_number(raw, ("duration_hours",), DEFAULT_DURATION_HOURS),
        estimated_cost=_number(raw, COST_KEYS, 0.0),
        carbon_kg=_number(raw, ("carbon_kg",), DEFAULT_CARBON_KG),
        type=_text(raw, TYPE_KEYS, DEFAULT_TYPE),
        description=_text(raw, ("description",), ""),
        transport_mode=_text(raw, ("transport_mode",), DEFAULT_TRANSPORT_MODE),
        transport_distance_km=distance,
        eco_alternative=_text(raw, ECO_KEYS, ""),
    )


def _normalize_meals(raw: Any) -> Meals:
    if not isinstance(raw, dict):
        return Meals()
    return Meals(
        breakfast=_text(raw, ("breakfast",), ""),
        lunch=_text(raw, ("lunch",), ""),
        dinner=_text(raw, ("dinner",), ""),
    )


def normalize_day(raw: dict[str, Any], index: int, request: TripRequest) -> Day:
    """Normalize one raw day at 0-based offset index from the start date."""
    day_number = index + 1
    activities = raw.get("activities")
    if not isinstance(activities, list):
        activities = []

    return Day(
        day=day_number,
        date=request.start_date + timedelta(days=index),
        theme=_text(raw, ("theme", "title"), ""),
        activities=[
            normalize_activity(activity, day_number, position)
            for position, activity in enumerate(activities, start=1)
        ],
        meals=_normalize_meals(raw.get("meals")),
        daily_cost=_number(raw, ("daily_cost",), 0.0),
    )


def normalize_itinerary(payload: dict[str, Any], request: TripRequest) -> Itinerary:
    """Bring a raw draft into the canonical itinerary shape.

    Days are renumbered 1..N and dated from the request's start date. Extra
    draft days are dropped; missing days are filled from the template.

    Raises:
        NormalizationError: If the draft cannot be normalized
    """
    raw_days = payload.get("days")
    if not isinstance(raw_days, list):
        raise NormalizationError("Itinerary draft has no days list")

    num_days = request.num_days
    raw_days = [d for d in raw_days if isinstance(d, dict)][:num_days]
    for day_number in range(len(raw_days) + 1, num_days + 1):
        raw_days.append(template_day(request, day_number))

    try:
        days = [normalize_day(raw, index, request) for index, raw in enumerate(raw_days)]

        estimated_total = _to_number(payload.get("estimated_total_cost"))
        if not estimated_total:
            estimated_total = sum(day.daily_cost for day in days)

        score = _to_number(payload.get("sustainability_score"))
        if not score:
            score = DEFAULT_SUSTAINABILITY_SCORE

        return Itinerary(
            summary=_text(payload, ("summary",), ""),
            sustainability_score=min(100, int(round(score))),
            estimated_total_cost=estimated_total,
            days=days,
            packing_tips=_string_list(payload.get("packing_tips")),
            eco_tips=_string_list(payload.get("eco_tips")),
            local_customs=_string_list(payload.get("local_customs")),
        )
    except ValidationError as e:
        raise NormalizationError(f"Normalized itinerary failed validation: {e}") from e
