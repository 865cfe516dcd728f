"""Shared test fixtures for smskit."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest

from smskit.config import ProviderRateLimit, RateLimitConfig
from smskit.errors import SmsAuthError, SmsError
from smskit.models import Headers, InboundMessage, get_header
from smskit.webhook.handler import InboundWebhook

# --- Factory functions for test data ---


def make_inbound_message(**kwargs: Any) -> InboundMessage:
    """Factory for InboundMessage with sensible defaults."""
    defaults: dict[str, Any] = {
        "id": "msg-1",
        "from_": "+15550001111",
        "to": "+15550002222",
        "text": "hello",
        "timestamp": datetime(2024, 12, 30, 12, 34, 56, tzinfo=UTC),
        "provider": "stub",
        "raw": {"From": "+15550001111", "Text": "hello"},
    }
    defaults.update(kwargs)
    return InboundMessage(**defaults)


def make_rate_limit_config(**kwargs: Any) -> RateLimitConfig:
    defaults: dict[str, Any] = {
        "max_requests": 5,
        "window_seconds": 60,
        "enabled": True,
    }
    defaults.update(kwargs)
    return RateLimitConfig(**defaults)


def make_override(max_requests: int, window_seconds: int = 60) -> ProviderRateLimit:
    return ProviderRateLimit(max_requests=max_requests, window_seconds=window_seconds)


class StubWebhook(InboundWebhook):
    """Handler with scripted verify/parse outcomes."""

    def __init__(
        self,
        key: str = "stub",
        message: InboundMessage | None = None,
        verify_error: Exception | None = None,
        parse_error: Exception | None = None,
    ) -> None:
        self._key = key
        self._message = message or make_inbound_message(provider=key)
        self._verify_error = verify_error
        self._parse_error = parse_error
        self.calls: list[str] = []

    def provider(self) -> str:
        return self._key

    def verify(self, headers: Headers, body: bytes) -> None:
        self.calls.append("verify")
        if self._verify_error is not None:
            raise self._verify_error

    def parse_inbound(self, headers: Headers, body: bytes) -> InboundMessage:
        self.calls.append("parse")
        if self._parse_error is not None:
            raise self._parse_error
        return self._message


class SecretHeaderWebhook(InboundWebhook):
    """Handler that requires a shared secret header and echoes the body."""

    def __init__(self, secret: str = "s3cret") -> None:
        self._secret = secret

    def provider(self) -> str:
        return "secret"

    def verify(self, headers: Headers, body: bytes) -> None:
        if get_header(headers, "X-Webhook-Secret") != self._secret:
            raise SmsAuthError("bad secret")

    def parse_inbound(self, headers: Headers, body: bytes) -> InboundMessage:
        if not body:
            raise SmsError("empty body")
        return make_inbound_message(
            provider="secret", text=body.decode("utf-8", errors="replace"),
        )


@pytest.fixture
def stub_webhook() -> StubWebhook:
    return StubWebhook()


@pytest.fixture
def rate_limit_config() -> RateLimitConfig:
    return make_rate_limit_config()
