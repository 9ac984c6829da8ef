"""Stage outcomes for the itinerary generation pipeline.

A stage either succeeds, degrades to fallback data with a reason, or fails.
Degradation is a normal outcome: the pipeline keeps going with the fallback.
"""

from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

T = TypeVar("T")

OutcomeStatus = Literal["succeeded", "degraded", "failed"]


@dataclass(frozen=True)
class Succeeded(Generic[T]):
    """Stage produced its primary result."""

    value: T
    status: OutcomeStatus = "succeeded"
    reason: str | None = None


@dataclass(frozen=True)
class Degraded(Generic[T]):
    """Stage fell back to substitute data."""

    value: T
    reason: str
    status: OutcomeStatus = "degraded"


@dataclass(frozen=True)
class Failed:
    """Stage could not produce a result."""

    reason: str
    status: OutcomeStatus = "failed"


StageOutcome = Succeeded[T] | Degraded[T] | Failed
