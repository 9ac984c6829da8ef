"""Rate limiting utilities."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Protocol

import redis

from backend.app.config import get_settings
from backend.app.db.context import RequestContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryAfter:
    """Rate limit retry-after information."""

    seconds: int


class RateLimiter(Protocol):
    """Rate limiter interface."""

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available.

        Args:
            key: Rate limit key
            now: Current timestamp

        Returns:
            RetryAfter if over quota, None if allowed
        """
        ...


def make_rate_limit_key(ctx: RequestContext, bucket: str) -> str:
    """Create rate limit key from context and bucket.

    Args:
        ctx: Request context
        bucket: Bucket name (e.g., "trip_generate")

    Returns:
        Rate limit key
    """
    return f"{ctx.user_id}:{bucket}"


class RedisRateLimiter:
    """Redis-based rate limiter using INCR + EXPIRE pattern."""

    def __init__(self, redis_client: redis.Redis, max_requests: int, window_seconds: int = 60) -> None:
        """Initialize rate limiter.

        Args:
            redis_client: Redis client
            max_requests: Maximum requests per window
            window_seconds: Window size in seconds (default 60)
        """
        self._redis = redis_client
        self._max_requests = max_requests
        self._window_seconds = window_seconds

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available.

        Uses Redis INCR + EXPIRE for atomic counting.
        """
        # Use a window-aligned key
        window_start = int(now.timestamp() / self._window_seconds) * self._window_seconds
        redis_key = f"ratelimit:{key}:{window_start}"

        count = self._redis.incr(redis_key)

        # Set expiry on first request
        if count == 1:
            self._redis.expire(redis_key, self._window_seconds)

        if count > self._max_requests:
            ttl = self._redis.ttl(redis_key)
            return RetryAfter(seconds=max(1, ttl))

        return None


class InMemoryRateLimiter:
    """In-process fixed window rate limiter, used when Redis is not configured."""

    def __init__(self, max_requests: int, window_seconds: int = 60) -> None:
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._windows: dict[str, tuple[datetime, int]] = {}

    def _evict_expired(self, now: datetime) -> None:
        window = timedelta(seconds=self._window_seconds)
        expired = [key for key, (start, _) in self._windows.items() if now >= start + window]
        for key in expired:
            del self._windows[key]

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available."""
        self._evict_expired(now)

        if key not in self._windows:
            self._windows[key] = (now, 1)
            return None

        window_start, count = self._windows[key]
        window_end = window_start + timedelta(seconds=self._window_seconds)

        if count >= self._max_requests:
            return RetryAfter(seconds=max(1, int((window_end - now).total_seconds())))

        self._windows[key] = (window_start, count + 1)
        return None


@lru_cache
def get_rate_limiter() -> RateLimiter:
    """Get the process-wide trip generation limiter."""
    settings = get_settings()
    if settings.redis_url:
        client = redis.from_url(settings.redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
        return RedisRateLimiter(
            client, settings.trip_generations_per_window, settings.rate_limit_window_seconds
        )

    logger.info("REDIS_URL not set, using in-memory rate limiter")
    return InMemoryRateLimiter(
        settings.trip_generations_per_window, settings.rate_limit_window_seconds
    )
