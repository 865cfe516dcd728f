"""Webhook dispatch for smskit.

This module provides:
- Provider handler contracts
- Immutable provider registry snapshots
- The resolve / verify / parse dispatch pipeline
"""

from smskit.webhook.handler import InboundWebhook, SmsClient
from smskit.webhook.processor import WebhookProcessor
from smskit.webhook.registry import InboundRegistry, RegistryBuilder

__all__ = [
    "InboundRegistry",
    "InboundWebhook",
    "RegistryBuilder",
    "SmsClient",
    "WebhookProcessor",
]
