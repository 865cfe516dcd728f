"""Provider contracts implemented by each SMS vendor integration."""

from __future__ import annotations

from abc import ABC, abstractmethod

from smskit.models import Headers, InboundMessage, SendRequest, SendResponse


class InboundWebhook(ABC):
    """Provider-agnostic inbound webhook interface.

    Implementations must be immutable once registered; the same instance
    serves concurrent requests.
    """

    @abstractmethod
    def provider(self) -> str:
        """Stable lowercase provider key, e.g. "plivo"."""
        ...

    def verify(self, headers: Headers, body: bytes) -> None:
        """Verify the webhook signature; raise SmsError on failure.

        Accepts everything by default, for providers without signatures.
        """
        return None

    @abstractmethod
    def parse_inbound(self, headers: Headers, body: bytes) -> InboundMessage:
        """Parse headers + raw body into an InboundMessage or raise SmsError."""
        ...


class SmsClient(ABC):
    """Outbound sending interface."""

    @abstractmethod
    async def send(self, request: SendRequest) -> SendResponse:
        ...
