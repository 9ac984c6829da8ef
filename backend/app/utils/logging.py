"""Structured logging for pipeline stages."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredStageLogger:
    """Structured logger for trip generation stages."""

    def log_stage(
        self,
        trace_id: str,
        stage: str,
        outcome: str,
        latency_ms: float,
        reason: str | None = None,
    ) -> None:
        """Log a stage outcome with structured data."""
        log_data: dict[str, Any] = {
            "trace_id": trace_id,
            "stage": stage,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if reason:
            log_data["reason"] = reason

        log_msg = f"Trip pipeline stage: {stage} - {outcome}"

        if outcome == "succeeded":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the service."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
