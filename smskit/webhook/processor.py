"""Webhook dispatch pipeline.

Pipeline stages, each short-circuiting to a WebhookError:
1. Resolve the handler for the provider key
2. Verify the signature (no-op unless the handler overrides it)
3. Parse the payload into a normalized InboundMessage

Every WebhookError renders as exactly one status/body pair.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence

from smskit.errors import (
    ProviderNotFoundError,
    SmsError,
    SmsUnexpectedError,
    VerificationFailedError,
    WebhookError,
    WebhookParseError,
    WebhookSmsError,
)
from smskit.models import Headers, InboundMessage, WebhookResponse
from smskit.webhook.handler import InboundWebhook
from smskit.webhook.registry import InboundRegistry

logger = logging.getLogger(__name__)


class WebhookProcessor:
    """Framework-agnostic webhook processor.

    Readers take no lock: each call reads the current registry snapshot
    once. Writers serialize on ``_write_lock`` and publish a new snapshot
    with a single attribute assignment.
    """

    def __init__(self, registry: InboundRegistry | None = None) -> None:
        self._registry = registry if registry is not None else InboundRegistry()
        self._write_lock = threading.Lock()

    @property
    def registry(self) -> InboundRegistry:
        return self._registry

    def publish(self, registry: InboundRegistry) -> None:
        """Replace the active registry snapshot."""
        with self._write_lock:
            self._registry = registry
        logger.info("Published provider registry: %s", registry.providers())

    def register(self, handler: InboundWebhook) -> InboundRegistry:
        """Copy-on-write insert of ``handler``; returns the new snapshot."""
        with self._write_lock:
            registry = self._registry.with_handler(handler)
            self._registry = registry
        logger.info("Registered provider %s", handler.provider())
        return registry

    def process_webhook(
        self,
        provider: str,
        headers: Sequence[tuple[str, str]],
        body: bytes,
    ) -> WebhookResponse:
        """Process an inbound webhook and return a framework-agnostic response."""
        try:
            return self._process(provider, list(headers), body)
        except WebhookError as exc:
            return self.error_to_response(exc)

    def _process(
        self, provider: str, headers: Headers, body: bytes,
    ) -> WebhookResponse:
        hook = self._registry.get(provider)
        if hook is None:
            logger.debug("No handler registered for provider %r", provider)
            raise ProviderNotFoundError(provider)

        try:
            hook.verify(headers, body)
        except SmsError as exc:
            logger.warning("Webhook verification failed for %s: %s", provider, exc)
            raise VerificationFailedError(str(exc)) from exc
        except Exception as exc:
            raise self._unexpected(provider, "verify", exc) from exc

        try:
            message = hook.parse_inbound(headers, body)
        except SmsError as exc:
            logger.info("Webhook payload rejected for %s: %s", provider, exc)
            raise WebhookParseError(str(exc)) from exc
        except Exception as exc:
            raise self._unexpected(provider, "parse", exc) from exc

        if not isinstance(message, InboundMessage):
            raise self._unexpected(provider, "parse", TypeError(
                f"handler returned {type(message).__name__}, expected InboundMessage",
            ))

        try:
            return WebhookResponse.success(message)
        except (TypeError, ValueError) as exc:
            # PydanticSerializationError is a ValueError
            raise self._unexpected(provider, "serialize", exc) from exc

    @staticmethod
    def _unexpected(provider: str, stage: str, exc: Exception) -> WebhookSmsError:
        logger.error("Handler for %s failed during %s", provider, stage, exc_info=exc)
        return WebhookSmsError(SmsUnexpectedError(str(exc) or type(exc).__name__))

    @staticmethod
    def error_to_response(error: WebhookError) -> WebhookResponse:
        return WebhookResponse.error(error.status, error.detail)
