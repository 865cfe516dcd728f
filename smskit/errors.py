"""Error taxonomy for SMS operations and webhook dispatch."""

from __future__ import annotations

from abc import ABC, abstractmethod

from smskit.models import HttpStatus

# --- Provider-level errors ---


class SmsError(Exception):
    """Base class for errors raised by SMS providers and handlers."""

    prefix = "sms error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"{self.prefix}: {message}")


class SmsHttpError(SmsError):
    """HTTP communication with the provider failed."""

    prefix = "http error"


class SmsAuthError(SmsError):
    prefix = "authentication error"


class SmsInvalidError(SmsError):
    """Invalid request parameters or malformed payload."""

    prefix = "invalid request"


class SmsProviderError(SmsError):
    prefix = "provider error"


class SmsUnexpectedError(SmsError):
    prefix = "unexpected"


# --- Dispatch-level errors ---


class WebhookError(Exception, ABC):
    """Base class for webhook dispatch failures.

    Every subclass declares the status and public message it renders as,
    so the error -> response mapping is total.
    """

    status: HttpStatus

    @property
    @abstractmethod
    def detail(self) -> str:
        """Public message rendered into the error body."""
        raise NotImplementedError


class ProviderNotFoundError(WebhookError):
    status = HttpStatus.NOT_FOUND

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"provider not found: {provider}")

    @property
    def detail(self) -> str:
        return "unknown provider"


class VerificationFailedError(WebhookError):
    status = HttpStatus.UNAUTHORIZED

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"signature verification failed: {message}")

    @property
    def detail(self) -> str:
        return f"verification failed: {self.message}"


class WebhookParseError(WebhookError):
    status = HttpStatus.BAD_REQUEST

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"parsing failed: {message}")

    @property
    def detail(self) -> str:
        return f"parse error: {self.message}"


class WebhookSmsError(WebhookError):
    """Unexpected provider fault surfaced through dispatch."""

    status = HttpStatus.INTERNAL_SERVER_ERROR

    def __init__(self, error: SmsError) -> None:
        self.error = error
        super().__init__(f"SMS processing error: {error}")

    @property
    def detail(self) -> str:
        return f"SMS error: {self.error}"
