"""Shared FastAPI dependencies."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.adapters.geocoding import Geocoder, get_geocoder
from backend.app.api.auth import get_current_context
from backend.app.carbon.calculator import CarbonCalculator
from backend.app.db.context import RequestContext
from backend.app.db.emission_factors import SqlFactorStore
from backend.app.db.engine import get_session
from backend.app.llm.client import AiDrafter, get_ai_drafter
from backend.app.middleware.ratelimit import RateLimitMiddleware, create_default_bucket_map
from backend.app.pipeline.generator import TripGenerator
from backend.app.ratelimit import RateLimiter, get_rate_limiter


@lru_cache
def _drafter() -> AiDrafter:
    return get_ai_drafter()


@lru_cache
def _geocoder() -> Geocoder:
    return get_geocoder()


async def get_trip_generator(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TripGenerator:
    """Pipeline wired to the configured providers and the database factor table."""
    return TripGenerator(drafter=_drafter(), geocoder=_geocoder(), factor_store=SqlFactorStore(session))


async def get_calculator(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CarbonCalculator:
    return CarbonCalculator(SqlFactorStore(session))


async def enforce_rate_limit(
    request: Request,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> None:
    """Reject the request with 429 when the caller's bucket is exhausted."""
    middleware = RateLimitMiddleware(limiter, create_default_bucket_map())
    allowed, retry_after = middleware.check_rate_limit(request.url.path, ctx)
    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many trip generation requests, please try again later.",
            headers={"Retry-After": str(retry_after)},
        )
