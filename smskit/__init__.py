"""smskit: multi-provider SMS webhook normalization and rate limiting.

This package provides:
- Normalized message models shared by every provider
- An immutable provider registry and webhook dispatch pipeline
- A keyed token-bucket rate limiter with idle-bucket sweeping
"""

from smskit.config import (
    AppConfig,
    AwsSnsConfig,
    ConfigError,
    ProviderRateLimit,
    RateLimitConfig,
)
from smskit.errors import (
    ProviderNotFoundError,
    SmsAuthError,
    SmsError,
    SmsHttpError,
    SmsInvalidError,
    SmsProviderError,
    SmsUnexpectedError,
    VerificationFailedError,
    WebhookError,
    WebhookParseError,
    WebhookSmsError,
)
from smskit.models import (
    Headers,
    HttpStatus,
    InboundMessage,
    SendRequest,
    SendResponse,
    WebhookResponse,
    fallback_id,
    get_all_headers,
    get_header,
)
from smskit.ratelimit import (
    Allowed,
    BucketSweeper,
    KeyGenerator,
    Limited,
    RateLimiter,
    RateLimitResult,
)
from smskit.webhook import (
    InboundRegistry,
    InboundWebhook,
    RegistryBuilder,
    SmsClient,
    WebhookProcessor,
)

__all__ = [
    "Allowed",
    "AppConfig",
    "AwsSnsConfig",
    "BucketSweeper",
    "ConfigError",
    "Headers",
    "HttpStatus",
    "InboundMessage",
    "InboundRegistry",
    "InboundWebhook",
    "KeyGenerator",
    "Limited",
    "ProviderNotFoundError",
    "ProviderRateLimit",
    "RateLimitConfig",
    "RateLimitResult",
    "RateLimiter",
    "RegistryBuilder",
    "SendRequest",
    "SendResponse",
    "SmsAuthError",
    "SmsClient",
    "SmsError",
    "SmsHttpError",
    "SmsInvalidError",
    "SmsProviderError",
    "SmsUnexpectedError",
    "VerificationFailedError",
    "WebhookError",
    "WebhookParseError",
    "WebhookProcessor",
    "WebhookResponse",
    "WebhookSmsError",
    "fallback_id",
    "get_all_headers",
    "get_header",
]
