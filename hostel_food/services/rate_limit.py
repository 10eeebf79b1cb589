"""Per-client attempt limiting for the authentication endpoints.

A limiter is chosen once at startup (``build_rate_limiter``) and kept on
``app.state``; route dependencies look it up from the request's app.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from fastapi import HTTPException, Request, status

from hostel_food.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitRule:
    name: str
    max_attempts: int
    window_seconds: int
    block_seconds: int


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    retry_after: int = 0

    @property
    def message(self) -> str:
        return f"Too many attempts. Please try again in {self.retry_after} seconds."


LOGIN_RULE = RateLimitRule("login", max_attempts=5, window_seconds=15 * 60, block_seconds=15 * 60)
FORGOT_PASSWORD_RULE = RateLimitRule("forgot-password", max_attempts=3, window_seconds=60 * 60, block_seconds=60 * 60)
REGISTER_RULE = RateLimitRule("register", max_attempts=3, window_seconds=60 * 60, block_seconds=60 * 60)

PRUNE_INTERVAL_SECONDS = 60


class RateLimiter(Protocol):
    def hit(self, key: str, rule: RateLimitRule) -> RateLimitResult:
        """Record one attempt for ``key`` and report whether it is allowed."""


class InMemoryRateLimiter:
    """Process-local counters; the window restarts once a key has been idle for a full window.

    Stale keys are swept at most once every ``prune_interval`` seconds.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, prune_interval: float = PRUNE_INTERVAL_SECONDS) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._attempts: dict[str, tuple[int, float, int]] = {}
        self._prune_interval = prune_interval
        self._last_prune = clock()

    def hit(self, key: str, rule: RateLimitRule) -> RateLimitResult:
        now = self._clock()
        with self._lock:
            if now - self._last_prune >= self._prune_interval:
                self._prune(now)
            record = self._attempts.get(key)
            if record is None or now - record[1] > rule.window_seconds:
                self._attempts[key] = (1, now, rule.window_seconds)
                return RateLimitResult(allowed=True)

            count = record[0] + 1
            self._attempts[key] = (count, now, rule.window_seconds)

        if count > rule.max_attempts:
            return RateLimitResult(allowed=False, retry_after=rule.block_seconds)
        return RateLimitResult(allowed=True)

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._attempts)

    def _prune(self, now: float) -> None:
        stale = [key for key, (_, last, window) in self._attempts.items() if now - last > window]
        for key in stale:
            del self._attempts[key]
        self._last_prune = now


class RedisRateLimiter:
    """Counters shared between workers through Redis keys that expire one window after the last attempt."""

    def __init__(self, client, prefix: str = "hostel_food:rl") -> None:
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, redis_url: str, prefix: str = "hostel_food:rl") -> RedisRateLimiter:
        from redis import Redis

        return cls(Redis.from_url(redis_url, decode_responses=True), prefix=prefix)

    def hit(self, key: str, rule: RateLimitRule) -> RateLimitResult:
        redis_key = f"{self._prefix}:{rule.name}:{key}"
        pipe = self._client.pipeline()
        pipe.incr(redis_key)
        pipe.expire(redis_key, rule.window_seconds)
        count, _ = pipe.execute()
        if int(count) > rule.max_attempts:
            return RateLimitResult(allowed=False, retry_after=rule.block_seconds)
        return RateLimitResult(allowed=True)


def build_rate_limiter(settings: Settings) -> RateLimiter:
    """Pick the Redis-backed limiter when ``REDIS_URL`` is set, otherwise the in-memory one."""
    if settings.redis_url:
        logger.info("[RATE_LIMIT] Using Redis rate limiter")
        return RedisRateLimiter.from_url(settings.redis_url)
    logger.info("[RATE_LIMIT] Using in-memory rate limiter")
    return InMemoryRateLimiter()


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client is not None and request.client.host:
        return request.client.host
    return "unknown"


def rate_limited(rule: RateLimitRule) -> Callable[[Request], None]:
    """Build a route dependency enforcing ``rule`` per client IP and path."""

    def _dependency(request: Request) -> None:
        limiter: RateLimiter | None = getattr(request.app.state, "rate_limiter", None)
        if limiter is None:
            return
        key = f"{client_ip(request)}:{request.url.path}"
        result = limiter.hit(key, rule)
        if not result.allowed:
            logger.warning("[RATE_LIMIT] %s limit exceeded for %s", rule.name, key)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=result.message,
                headers={"Retry-After": str(math.ceil(result.retry_after))},
            )

    return _dependency
