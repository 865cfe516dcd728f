"""AWS SNS inbound handler for SMS delivery status notifications.

SNS posts a JSON envelope. ``Notification`` envelopes carry an SMS
delivery report as a JSON string in ``Message``; ``SubscriptionConfirmation``
envelopes are surfaced as a system message so the operator can confirm the
subscription. Any other envelope type is rejected.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from smskit.errors import SmsProviderError
from smskit.models import Headers, InboundMessage, get_header
from smskit.webhook.handler import InboundWebhook

logger = logging.getLogger(__name__)

PROVIDER = "aws-sns"
SNS_SENDER = "AWS-SNS"


class SnsNotification(BaseModel):
    """SNS HTTP(S) endpoint envelope."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str = Field(alias="Type")
    message_id: str = Field(alias="MessageId")
    topic_arn: str = Field(alias="TopicArn")
    message: str = Field(alias="Message")
    timestamp: str = Field(alias="Timestamp")
    signature_version: str = Field(alias="SignatureVersion")
    signature: str = Field(alias="Signature")
    signing_cert_url: str = Field(alias="SigningCertURL")


class SmsNotificationData(BaseModel):
    message_id: str = Field(alias="messageId")
    timestamp: str


class SmsDeliveryData(BaseModel):
    destination: str
    price_in_usd: float | None = Field(default=None, alias="priceInUSD")
    sms_type: str = Field(alias="smsType")
    dwell_time_ms: int | None = Field(default=None, alias="dwellTimeMs")
    dwell_time_ms_until_device_ack: int | None = Field(
        default=None, alias="dwellTimeMsUntilDeviceAck",
    )


class SmsDeliveryReport(BaseModel):
    """Delivery report carried in a Notification's ``Message``."""

    notification: SmsNotificationData
    delivery: SmsDeliveryData
    status: str
    message_id: str = Field(alias="messageId")
    destination_phone_number: str = Field(alias="destinationPhoneNumber")


def parse_rfc3339(value: str) -> datetime | None:
    """Parse an RFC 3339 timestamp; values without an offset are rejected."""
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return parsed if parsed.tzinfo is not None else None


class AwsSnsWebhook(InboundWebhook):
    """Inbound-only SNS handler. Signatures are not checked."""

    def provider(self) -> str:
        return PROVIDER

    def parse_inbound(self, headers: Headers, body: bytes) -> InboundMessage:
        try:
            payload_text = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SmsProviderError(f"Invalid UTF-8: {exc}") from exc

        message_type = get_header(headers, "x-amz-sns-message-type")
        if message_type is not None:
            logger.debug("SNS message type header: %s", message_type)

        try:
            payload = json.loads(payload_text)
            notification = SnsNotification.model_validate(payload)
        except (json.JSONDecodeError, ValidationError) as exc:
            raise SmsProviderError(f"Invalid notification format: {exc}") from exc

        timestamp = parse_rfc3339(notification.timestamp)

        if notification.type == "Notification":
            report = _delivery_report(notification.message)
            if report is not None:
                logger.info("Received SMS delivery report for message %s", report.message_id)
                return InboundMessage(
                    id=report.message_id,
                    from_=SNS_SENDER,
                    to=report.destination_phone_number,
                    text=f"Delivery Status: {report.status}",
                    timestamp=timestamp,
                    provider=PROVIDER,
                    raw=payload,
                )

        if notification.type == "SubscriptionConfirmation":
            logger.warning("Received SNS subscription confirmation; confirm it manually")
            return InboundMessage(
                id=notification.message_id,
                from_=SNS_SENDER,
                to="SYSTEM",
                text="Subscription confirmation required",
                timestamp=timestamp,
                provider=PROVIDER,
                raw=payload,
            )

        raise SmsProviderError(f"Unsupported notification type: {notification.type}")


def _delivery_report(message: str) -> SmsDeliveryReport | None:
    try:
        return SmsDeliveryReport.model_validate_json(message)
    except ValidationError:
        return None
