"""Bundled SMS provider integrations."""

from __future__ import annotations

from smskit.config import AppConfig
from smskit.providers.aws_sns import AwsSnsWebhook
from smskit.providers.plivo import PlivoClient
from smskit.webhook.registry import InboundRegistry, RegistryBuilder


def build_registry(config: AppConfig) -> InboundRegistry:
    """Build a registry snapshot with every configured provider."""
    builder = RegistryBuilder()
    if config.plivo is not None:
        builder.register(
            PlivoClient(
                auth_id=config.plivo.auth_id,
                auth_token=config.plivo.auth_token,
                base_url=config.plivo.base_url,
            ),
        )
    if config.aws_sns.enabled:
        builder.register(AwsSnsWebhook())
    return builder.build()


__all__ = ["AwsSnsWebhook", "PlivoClient", "build_registry"]
