"""Prometheus metrics for trip generation and carbon lookups."""

from prometheus_client import Counter, Histogram

# Pipeline metrics
pipeline_stage_total = Counter(
    "trip_pipeline_stage_total",
    "Trip generation stage outcomes",
    ["stage", "outcome"],
)

trip_generation_latency_ms = Histogram(
    "trip_generation_latency_ms",
    "End-to-end trip generation latency in milliseconds",
    ["itinerary_source"],
    buckets=[50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000],
)

# Carbon calculator metrics
factor_lookup_misses_total = Counter(
    "emission_factor_lookup_misses_total",
    "Emission factor lookups that fell back to a default",
    ["category"],
)


class PrometheusStageMetrics:
    """Prometheus-based pipeline metrics implementation."""

    def record_stage(self, stage: str, outcome: str) -> None:
        """Count a stage outcome."""
        pipeline_stage_total.labels(stage=stage, outcome=outcome).inc()

    def record_latency(self, itinerary_source: str, latency_ms: float) -> None:
        """Record end-to-end generation latency."""
        trip_generation_latency_ms.labels(itinerary_source=itinerary_source).observe(latency_ms)
