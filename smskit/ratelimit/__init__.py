"""Token-bucket rate limiting."""

from smskit.ratelimit.keys import KeyGenerator, provider_from_key
from smskit.ratelimit.limiter import (
    Allowed,
    Limited,
    RateLimiter,
    RateLimitResult,
    RateLimitStatus,
    TokenBucket,
)
from smskit.ratelimit.sweeper import BucketSweeper

__all__ = [
    "Allowed",
    "BucketSweeper",
    "KeyGenerator",
    "Limited",
    "RateLimitResult",
    "RateLimitStatus",
    "RateLimiter",
    "TokenBucket",
    "provider_from_key",
]
