"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint.

    Exposes all registered Prometheus metrics including:
    - trip_pipeline_stage_total{stage, outcome}
    - trip_generation_latency_ms{itinerary_source}
    - emission_factor_lookup_misses_total{category}
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
