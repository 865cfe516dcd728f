"""In-memory token-bucket rate limiter keyed by arbitrary strings.

Each key owns an independent bucket that starts full and refills lazily on
check at ``max_requests / window_seconds`` tokens per second. Only whole
tokens enter a bucket: fractional accrual is dropped and ``last_refill``
stays put until at least one token is added, so the limiter never
over-grants.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import ClassVar

from smskit.config import RateLimitConfig
from smskit.ratelimit.keys import provider_from_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Allowed:
    allowed: ClassVar[bool] = True


@dataclass(frozen=True)
class Limited:
    """Request rejected; ``retry_after`` is the wait until one token is back."""

    retry_after: timedelta
    allowed: ClassVar[bool] = False


RateLimitResult = Allowed | Limited


@dataclass(frozen=True)
class RateLimitStatus:
    remaining: int
    limit: int


@dataclass
class TokenBucket:
    tokens: int
    max_tokens: int
    window_seconds: int
    last_refill: float  # time.monotonic() seconds

    @classmethod
    def full(cls, max_tokens: int, window_seconds: int, now: float) -> TokenBucket:
        return cls(
            tokens=max_tokens,
            max_tokens=max_tokens,
            window_seconds=window_seconds,
            last_refill=now,
        )

    @property
    def refill_rate(self) -> float:
        """Tokens per second."""
        return self.max_tokens / self.window_seconds

    def pending(self, now: float) -> int:
        """Whole tokens accrued since ``last_refill``."""
        elapsed = now - self.last_refill
        if elapsed <= 0:
            return 0
        return math.floor(elapsed * self.max_tokens / self.window_seconds)

    def refill(self, now: float) -> int:
        added = self.pending(now)
        if added > 0:
            self.tokens = min(self.max_tokens, self.tokens + added)
            self.last_refill = now
        return added

    def try_consume(self, now: float) -> bool:
        self.refill(now)
        if self.tokens > 0:
            self.tokens -= 1
            return True
        return False

    def retry_after(self) -> timedelta:
        # ceil(1 / refill_rate) in integer arithmetic
        return timedelta(seconds=-(-self.window_seconds // self.max_tokens))


class RateLimiter:
    """Keyed token buckets behind a single lock.

    The bucket map is the only mutable shared state. Checks and sweeps
    take the same lock; limit selection happens before it is acquired.
    """

    def __init__(self, config: RateLimitConfig | None = None) -> None:
        self._config = config if config is not None else RateLimitConfig()
        self._buckets: dict[str, TokenBucket] = {}
        self._lock = threading.Lock()

    @property
    def config(self) -> RateLimitConfig:
        return self._config

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def check(self, key: str) -> RateLimitResult:
        """Consume one token for ``key`` if available."""
        if not self._config.enabled:
            return Allowed()

        max_requests, window_seconds = self._config.limit_for(provider_from_key(key))

        with self._lock:
            now = time.monotonic()
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = TokenBucket.full(max_requests, window_seconds, now)
                self._buckets[key] = bucket
            allowed = bucket.try_consume(now)
            remaining = bucket.tokens
            retry_after = None if allowed else bucket.retry_after()

        if retry_after is None:
            logger.debug("Rate limit OK for key %s, remaining tokens: %d", key, remaining)
            return Allowed()
        logger.warning("Rate limit exceeded for key %s", key)
        return Limited(retry_after=retry_after)

    def status(self, key: str) -> RateLimitStatus | None:
        """Report remaining tokens for ``key`` without consuming one."""
        with self._lock:
            bucket = self._buckets.get(key)
            if bucket is None:
                return None
            pending = bucket.pending(time.monotonic())
            return RateLimitStatus(
                remaining=min(bucket.max_tokens, bucket.tokens + pending),
                limit=bucket.max_tokens,
            )

    def sweep(self, now: float | None = None) -> int:
        """Drop buckets idle for longer than the configured timeout.

        Returns the number of buckets removed.
        """
        idle_timeout = self._config.idle_timeout_seconds
        with self._lock:
            current = time.monotonic() if now is None else now
            cutoff = current - idle_timeout
            expired = [
                key for key, bucket in self._buckets.items()
                if bucket.last_refill < cutoff
            ]
            for key in expired:
                del self._buckets[key]
        for key in expired:
            logger.debug("Cleaned up rate limit bucket for key %s", key)
        if expired:
            logger.info("Rate limit sweep removed %d idle buckets", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._buckets
