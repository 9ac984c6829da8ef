"""Tests for rate limiting."""

import uuid
from datetime import datetime, timedelta
from unittest.mock import MagicMock

from backend.app.db.context import RequestContext
from backend.app.middleware.ratelimit import RateLimitMiddleware, create_default_bucket_map
from backend.app.ratelimit import InMemoryRateLimiter, RedisRateLimiter, make_rate_limit_key


def test_rate_limiter_allows_under_quota() -> None:
    """Test rate limiter allows requests under quota."""
    limiter = InMemoryRateLimiter(max_requests=5, window_seconds=60)
    now = datetime.now()

    key = "test:key:bucket"

    # First 5 requests should succeed
    for i in range(5):
        retry_after = limiter.check_quota(key, now + timedelta(seconds=i))
        assert retry_after is None


def test_rate_limiter_blocks_over_quota() -> None:
    """Test rate limiter blocks requests over quota."""
    limiter = InMemoryRateLimiter(max_requests=3, window_seconds=60)
    now = datetime.now()

    key = "test:key:bucket"

    for _ in range(3):
        assert limiter.check_quota(key, now) is None

    # 4th request should be blocked
    retry_after = limiter.check_quota(key, now)
    assert retry_after is not None
    assert retry_after.seconds == 60


def test_rate_limiter_resets_after_window() -> None:
    """Test rate limiter resets quota after window expires."""
    limiter = InMemoryRateLimiter(max_requests=2, window_seconds=60)
    now = datetime.now()

    key = "test:key:bucket"

    limiter.check_quota(key, now)
    limiter.check_quota(key, now)
    assert limiter.check_quota(key, now) is not None

    future = now + timedelta(seconds=61)
    assert limiter.check_quota(key, future) is None


def test_rate_limiter_separate_keys() -> None:
    """Test rate limiter tracks separate keys independently."""
    limiter = InMemoryRateLimiter(max_requests=2, window_seconds=60)
    now = datetime.now()

    limiter.check_quota("user1:trip_generate", now)
    limiter.check_quota("user1:trip_generate", now)

    assert limiter.check_quota("user1:trip_generate", now) is not None
    assert limiter.check_quota("user2:trip_generate", now) is None


def test_rate_limiter_evicts_expired_windows() -> None:
    """Expired windows of idle users are dropped on the next check."""
    limiter = InMemoryRateLimiter(max_requests=2, window_seconds=60)
    now = datetime.now()

    for i in range(100):
        limiter.check_quota(f"user{i}:trip_generate", now)
    assert len(limiter._windows) == 100

    limiter.check_quota("late:trip_generate", now + timedelta(seconds=61))

    assert list(limiter._windows) == ["late:trip_generate"]


def test_redis_rate_limiter_counts_per_window() -> None:
    """Test the Redis limiter uses INCR + EXPIRE and reports the key TTL."""
    redis_client = MagicMock()
    redis_client.incr.side_effect = [1, 2, 3]
    redis_client.ttl.return_value = 42
    limiter = RedisRateLimiter(redis_client, max_requests=2, window_seconds=3600)
    now = datetime(2026, 6, 1, 12, 30)

    assert limiter.check_quota("user:trip_generate", now) is None
    assert limiter.check_quota("user:trip_generate", now) is None
    retry_after = limiter.check_quota("user:trip_generate", now)

    assert retry_after is not None
    assert retry_after.seconds == 42
    redis_client.expire.assert_called_once()
    redis_key = redis_client.incr.call_args.args[0]
    assert redis_key.startswith("ratelimit:user:trip_generate:")


def test_make_rate_limit_key() -> None:
    """Test rate limit key generation."""
    user_id = uuid.uuid4()
    ctx = RequestContext(user_id=user_id)

    key = make_rate_limit_key(ctx, "trip_generate")

    assert str(user_id) in key
    assert "trip_generate" in key


def test_rate_limit_middleware_allows() -> None:
    """Test rate limit middleware allows requests under quota."""
    limiter = InMemoryRateLimiter(max_requests=5, window_seconds=60)
    middleware = RateLimitMiddleware(limiter, create_default_bucket_map())

    ctx = RequestContext(user_id=uuid.uuid4())
    now = datetime.now()

    for _ in range(5):
        allowed, retry_after = middleware.check_rate_limit("/trips/generate", ctx, now)
        assert allowed is True
        assert retry_after == 0


def test_rate_limit_middleware_blocks() -> None:
    """Test rate limit middleware blocks requests over quota."""
    limiter = InMemoryRateLimiter(max_requests=2, window_seconds=60)
    middleware = RateLimitMiddleware(limiter, create_default_bucket_map())

    ctx = RequestContext(user_id=uuid.uuid4())
    now = datetime.now()

    middleware.check_rate_limit("/trips/generate", ctx, now)
    middleware.check_rate_limit("/trips/generate", ctx, now)

    allowed, retry_after = middleware.check_rate_limit("/trips/generate", ctx, now)
    assert allowed is False
    assert retry_after > 0


def test_rate_limit_middleware_no_limit_for_unmapped_path() -> None:
    """Test rate limit middleware allows unmapped paths."""
    limiter = InMemoryRateLimiter(max_requests=1, window_seconds=60)
    middleware = RateLimitMiddleware(limiter, create_default_bucket_map())

    ctx = RequestContext(user_id=uuid.uuid4())
    now = datetime.now()

    for _ in range(3):
        allowed, retry_after = middleware.check_rate_limit("/trips", ctx, now)
        assert allowed is True
        assert retry_after == 0


def test_create_default_bucket_map() -> None:
    """Only trip generation is limited."""
    assert create_default_bucket_map() == {"/trips/generate": "trip_generate"}
