"""Itinerary generation pipeline.

Stages run strictly in order: geocode -> draft -> normalize -> score -> cost.
Geocode and draft degrade to fallback data on provider failure; the remaining
stages are pure computation and any error there aborts the run.
"""

import logging
import time
import uuid
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import TypeVar

from backend.app.adapters.geocoding import Geocoder
from backend.app.carbon.calculator import CarbonCalculator
from backend.app.carbon.factors import FactorStore
from backend.app.carbon.green_score import green_score
from backend.app.errors import NormalizationError
from backend.app.llm.client import AiDrafter, Draft
from backend.app.llm.template import template_itinerary
from backend.app.models.carbon import CarbonBreakdown, TripEmissionsInput
from backend.app.models.common import Location
from backend.app.models.itinerary import Coordinates, Itinerary
from backend.app.models.trip import GeneratedTrip, StageReport, TripRequest
from backend.app.pipeline.costs import total_cost
from backend.app.pipeline.normalize import normalize_itinerary
from backend.app.pipeline.outcome import Degraded, Failed, StageOutcome, Succeeded
from backend.app.utils.logging import StructuredStageLogger
from backend.app.utils.metrics import PrometheusStageMetrics

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Emissions:
    """Scoring stage result."""

    breakdown: CarbonBreakdown
    green_score: int


class TripGenerator:
    """Runs the generation pipeline over injected provider capabilities."""

    def __init__(
        self,
        drafter: AiDrafter,
        geocoder: Geocoder,
        factor_store: FactorStore,
        stage_logger: StructuredStageLogger | None = None,
        metrics: PrometheusStageMetrics | None = None,
    ) -> None:
        self._drafter = drafter
        self._geocoder = geocoder
        self._calculator = CarbonCalculator(factor_store)
        self._stage_logger = stage_logger or StructuredStageLogger()
        self._metrics = metrics or PrometheusStageMetrics()

    async def generate(self, request: TripRequest) -> GeneratedTrip:
        """Generate a complete scored trip for a validated request.

        Raises:
            NormalizationError: If stages 3-5 cannot process the itinerary
        """
        trace_id = f"trip_{uuid.uuid4().hex[:8]}"
        started = time.perf_counter()
        reports: list[StageReport] = []

        geocoded = await self._run_stage(trace_id, "geocode", reports, self.geocode(request))
        location = geocoded.value

        drafted = await self._run_stage(trace_id, "draft", reports, self.draft(request))
        draft = drafted.value

        normalized = await self._run_stage(
            trace_id, "normalize", reports, self.normalize(draft, request, location)
        )
        itinerary = normalized.value

        scored = await self._run_stage(
            trace_id, "score", reports, self.score(itinerary, request)
        )
        emissions = scored.value

        costed = await self._run_stage(trace_id, "cost", reports, self.cost(itinerary))
        cost = costed.value

        itinerary.transport_carbon = emissions.breakdown.transport
        itinerary.accommodation_carbon = emissions.breakdown.accommodation
        itinerary.activities_carbon = emissions.breakdown.activities

        latency_ms = (time.perf_counter() - started) * 1000
        self._metrics.record_latency(draft.source, latency_ms)
        logger.info(
            f"Generated trip to {request.destination}: {emissions.breakdown.total} kg CO2, "
            f"score {emissions.green_score}, source {draft.source}",
            extra={"structured": {"trace_id": trace_id, "latency_ms": round(latency_ms, 2)}},
        )

        return GeneratedTrip(
            itinerary=itinerary,
            location=location,
            total_carbon_kg=emissions.breakdown.total,
            total_cost=cost,
            green_score=emissions.green_score,
            carbon_breakdown=emissions.breakdown,
            itinerary_source=draft.source,
            stages=reports,
        )

    async def _run_stage(
        self,
        trace_id: str,
        stage: str,
        reports: list[StageReport],
        pending: Awaitable[StageOutcome[T]],
    ) -> Succeeded[T] | Degraded[T]:
        """Await a stage, record its outcome, and unwrap its value.

        Failed outcomes abort the run with NormalizationError.
        """
        started = time.perf_counter()
        try:
            outcome: StageOutcome = await pending
        except NormalizationError as e:
            outcome = Failed(reason=str(e) or type(e).__name__)
            self._record(trace_id, stage, reports, outcome, started)
            raise
        except Exception as e:
            outcome = Failed(reason=f"{type(e).__name__}: {e}")
            self._record(trace_id, stage, reports, outcome, started)
            raise NormalizationError(f"Stage {stage} failed: {e}") from e

        self._record(trace_id, stage, reports, outcome, started)
        if isinstance(outcome, Failed):
            raise NormalizationError(f"Stage {stage} failed: {outcome.reason}")
        return outcome

    def _record(
        self,
        trace_id: str,
        stage: str,
        reports: list[StageReport],
        outcome: StageOutcome,
        started: float,
    ) -> None:
        latency_ms = (time.perf_counter() - started) * 1000
        reports.append(StageReport(stage=stage, status=outcome.status, reason=outcome.reason))
        self._metrics.record_stage(stage, outcome.status)
        self._stage_logger.log_stage(trace_id, stage, outcome.status, latency_ms, outcome.reason)

    # Stage 1
    async def geocode(self, request: TripRequest) -> StageOutcome[Location]:
        """Geocode the destination; provider failure yields a placeholder."""
        try:
            return Succeeded(await self._geocoder.geocode(request.destination))
        except Exception as e:
            logger.warning(f"Geocoding failed, continuing without location data: {e}")
            return Degraded(
                Location.placeholder(request.destination), reason=str(e) or type(e).__name__
            )

    # Stage 2
    async def draft(self, request: TripRequest) -> StageOutcome[Draft]:
        """Draft via the AI provider; provider failure yields the template."""
        try:
            return Succeeded(await self._drafter.draft(request))
        except Exception as e:
            logger.warning(f"Falling back to template itinerary: {e}")
            return Degraded(
                Draft(payload=template_itinerary(request), source="template"),
                reason=str(e) or type(e).__name__,
            )

    # Stage 3
    async def normalize(
        self, draft: Draft, request: TripRequest, location: Location
    ) -> StageOutcome[Itinerary]:
        itinerary = normalize_itinerary(draft.payload, request)
        itinerary.destination_coordinates = Coordinates(latitude=location.lat, longitude=location.lng)
        return Succeeded(itinerary)

    # Stage 4
    async def score(self, itinerary: Itinerary, request: TripRequest) -> StageOutcome[Emissions]:
        return Succeeded(
            await self.rescore(
                itinerary,
                request.num_days,
                request.accommodation_preference.value,
                request.destination_distance_km,
            )
        )

    # Stage 5
    async def cost(self, itinerary: Itinerary) -> StageOutcome[float]:
        return Succeeded(total_cost(itinerary))

    async def rescore(
        self,
        itinerary: Itinerary,
        num_days: int,
        accommodation_type: str | None,
        destination_distance_km: float = 0.0,
    ) -> Emissions:
        """Emissions and green score for an itinerary; also used after edits.

        Accommodation is charged for num_days nights.
        """
        breakdown = await self._calculator.trip_emissions(
            TripEmissionsInput(
                accommodation_preference=accommodation_type,
                nights=num_days,
                itinerary=itinerary,
                destination_distance_km=destination_distance_km,
            )
        )
        return Emissions(breakdown=breakdown, green_score=green_score(breakdown.total, num_days))
