"""Rate limiting utilities."""

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

import redis

UNKNOWN_CLIENT = "unknown"


@dataclass
class RetryAfter:
    """Rate limit retry information."""

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


def get_client_id(headers: Mapping[str, str]) -> str:
    """Identify the caller from proxy headers.

    Uses the first `x-forwarded-for` entry when the header is present,
    otherwise `x-real-ip`.
    """
    forwarded = headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip() or UNKNOWN_CLIENT
    real_ip = headers.get("x-real-ip", "").strip()
    return real_ip or UNKNOWN_CLIENT


def make_rate_limit_key(bucket: str, client_id: str) -> str:
    """Create rate limit key from bucket and client.

    Args:
        bucket: Bucket name (e.g., "generate", "share-get")
        client_id: Caller identifier

    Returns:
        Rate limit key
    """
    return f"{bucket}:{client_id}"


class InMemoryRateLimiter:
    """In-memory fixed window rate limiter (count, then reset)."""

    def __init__(self, max_requests: int, window_seconds: int = 60) -> None:
        """Initialize rate limiter.

        Args:
            max_requests: Maximum requests per window
            window_seconds: Window size in seconds (default 60)
        """
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._windows: dict[str, tuple[datetime, int]] = {}
        self._lock = threading.Lock()

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available."""
        window = timedelta(seconds=self._window_seconds)
        with self._lock:
            current = self._windows.get(key)
            if current is None or now >= current[0] + window:
                self._windows[key] = (now, 1)
                return None

            window_start, count = current
            if count >= self._max_requests:
                seconds_remaining = int((window_start + window - now).total_seconds())
                return RetryAfter(seconds=max(1, seconds_remaining))

            self._windows[key] = (window_start, count + 1)
            return None


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
