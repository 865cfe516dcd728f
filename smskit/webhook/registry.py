"""Immutable provider registry snapshots.

A registry maps a provider key to its InboundWebhook handler. Snapshots are
never mutated: ``with_handler`` and ``RegistryBuilder.build`` always return a
new registry, so readers holding an older snapshot keep a consistent view.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from smskit.webhook.handler import InboundWebhook


class InboundRegistry:
    """Read-only mapping from provider key to handler."""

    __slots__ = ("_handlers",)

    def __init__(self, handlers: Mapping[str, InboundWebhook] | None = None) -> None:
        self._handlers: Mapping[str, InboundWebhook] = MappingProxyType(
            dict(handlers or {}),
        )

    def with_handler(self, handler: InboundWebhook) -> InboundRegistry:
        """Return a new registry with ``handler`` added or replacing its key."""
        handlers = dict(self._handlers)
        handlers[handler.provider()] = handler
        return InboundRegistry(handlers)

    def get(self, provider: str) -> InboundWebhook | None:
        return self._handlers.get(provider)

    def providers(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, provider: object) -> bool:
        return provider in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[str]:
        return iter(self.providers())

    def __repr__(self) -> str:
        return f"InboundRegistry(providers={self.providers()!r})"


class RegistryBuilder:
    """Collects handlers and produces one immutable snapshot.

    Usage::

        registry = RegistryBuilder().register(plivo).register(other).build()
    """

    def __init__(self, base: InboundRegistry | None = None) -> None:
        self._handlers: dict[str, InboundWebhook] = {}
        if base is not None:
            for key in base.providers():
                handler = base.get(key)
                if handler is not None:
                    self._handlers[key] = handler

    def register(self, handler: InboundWebhook) -> RegistryBuilder:
        self._handlers[handler.provider()] = handler
        return self

    def build(self) -> InboundRegistry:
        return InboundRegistry(self._handlers)
