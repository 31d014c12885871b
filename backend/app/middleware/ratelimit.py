"""Rate limiting for generation and share endpoints."""

from collections.abc import Callable
from datetime import datetime
from functools import lru_cache
from typing import Annotated

import redis
from fastapi import Depends, HTTPException, Request, status

from backend.app.config import get_settings
from backend.app.ratelimit import (
    InMemoryRateLimiter,
    RateLimiter,
    RedisRateLimiter,
    get_client_id,
    make_rate_limit_key,
)
from backend.app.utils.metrics import metrics

RATE_LIMITED_MESSAGE = "요청이 너무 많습니다. 잠시 후 다시 시도해 주세요."


class RateLimitMiddleware:
    """Enforces per-bucket quotas.

    Each bucket has its own limiter so quotas differ per endpoint.
    """

    def __init__(self, limiters: dict[str, RateLimiter]) -> None:
        """Initialize rate limit middleware.

        Args:
            limiters: Mapping from bucket name to its limiter
        """
        self._limiters = limiters

    def check_rate_limit(
        self, bucket: str, client_id: str, now: datetime | None = None
    ) -> tuple[bool, int]:
        """Check if request is allowed under rate limit.

        Args:
            bucket: Bucket name
            client_id: Caller identifier
            now: Current time (for testing)

        Returns:
            Tuple of (allowed, retry_after_seconds)
        """
        if now is None:
            now = datetime.now()

        limiter = self._limiters.get(bucket)
        if limiter is None:
            # No rate limit for this bucket
            return (True, 0)

        retry_after = limiter.check_quota(make_rate_limit_key(bucket, client_id), now)
        if retry_after is None:
            return (True, 0)

        return (False, retry_after.seconds)


def create_limiters(
    limits: dict[str, int], window_seconds: int = 60, redis_url: str | None = None
) -> dict[str, RateLimiter]:
    """Create one limiter per bucket, Redis-backed when a URL is given."""
    if redis_url:
        client = redis.from_url(redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
        return {
            bucket: RedisRateLimiter(client, max_requests, window_seconds)
            for bucket, max_requests in limits.items()
        }
    return {
        bucket: InMemoryRateLimiter(max_requests, window_seconds)
        for bucket, max_requests in limits.items()
    }


@lru_cache
def get_rate_limit_middleware() -> RateLimitMiddleware:
    """Process-wide rate limiter built from settings."""
    settings = get_settings()
    return RateLimitMiddleware(
        create_limiters(
            settings.rate_limits(),
            window_seconds=settings.rate_limit_window_seconds,
            redis_url=settings.redis_url,
        )
    )


def rate_limit(bucket: str) -> Callable[..., None]:
    """FastAPI dependency enforcing the quota of one bucket.

    Raises:
        HTTPException: 429 with a Retry-After header when over quota
    """

    def dependency(
        request: Request,
        middleware: Annotated[RateLimitMiddleware, Depends(get_rate_limit_middleware)],
    ) -> None:
        allowed, retry_after = middleware.check_rate_limit(bucket, get_client_id(request.headers))
        if not allowed:
            metrics.inc_rate_limited(bucket)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=RATE_LIMITED_MESSAGE,
                headers={"Retry-After": str(retry_after)},
            )

    return dependency
