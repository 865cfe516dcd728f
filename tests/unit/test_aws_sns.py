"""Tests for the AWS SNS delivery-notification handler."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import pytest

from smskit.config import AppConfig, AwsSnsConfig
from smskit.errors import SmsProviderError
from smskit.models import HttpStatus
from smskit.providers import build_registry
from smskit.providers.aws_sns import AwsSnsWebhook, parse_rfc3339
from smskit.webhook.processor import WebhookProcessor

_JSON = [("content-type", "text/plain; charset=UTF-8")]


def _delivery_report(**kwargs: Any) -> dict[str, Any]:
    defaults: dict[str, Any] = {
        "notification": {"messageId": "sms-1", "timestamp": "2024-12-30 12:34:56.000"},
        "delivery": {
            "destination": "+15550002222",
            "priceInUSD": 0.00645,
            "smsType": "Transactional",
            "dwellTimeMs": 300,
        },
        "status": "SUCCESS",
        "messageId": "sms-1",
        "destinationPhoneNumber": "+15550002222",
    }
    defaults.update(kwargs)
    return defaults


def _envelope(**kwargs: Any) -> dict[str, Any]:
    defaults: dict[str, Any] = {
        "Type": "Notification",
        "MessageId": "env-1",
        "TopicArn": "arn:aws:sns:us-east-1:123456789012:sms-status",
        "Message": json.dumps(_delivery_report()),
        "Timestamp": "2024-12-30T12:34:56.789Z",
        "SignatureVersion": "1",
        "Signature": "c2lnbmF0dXJl",
        "SigningCertURL": "https://sns.us-east-1.amazonaws.com/cert.pem",
    }
    defaults.update(kwargs)
    return defaults


def _body(**kwargs: Any) -> bytes:
    return json.dumps(_envelope(**kwargs)).encode()


class TestDeliveryNotification:
    def test_provider_key(self) -> None:
        assert AwsSnsWebhook().provider() == "aws-sns"

    def test_delivery_report_normalized(self) -> None:
        msg = AwsSnsWebhook().parse_inbound(_JSON, _body())
        assert msg.id == "sms-1"
        assert msg.from_ == "AWS-SNS"
        assert msg.to == "+15550002222"
        assert msg.text == "Delivery Status: SUCCESS"
        assert msg.provider == "aws-sns"
        assert msg.timestamp == datetime(2024, 12, 30, 12, 34, 56, 789000, tzinfo=UTC)
        assert msg.raw["TopicArn"].endswith(":sms-status")

    def test_failure_status_in_text(self) -> None:
        body = _body(Message=json.dumps(_delivery_report(status="FAILURE")))
        assert AwsSnsWebhook().parse_inbound(_JSON, body).text == "Delivery Status: FAILURE"

    def test_notification_without_delivery_report_rejected(self) -> None:
        with pytest.raises(SmsProviderError, match="Unsupported notification type: Notification"):
            AwsSnsWebhook().parse_inbound(_JSON, _body(Message="plain text"))

    def test_unparseable_timestamp_is_none(self) -> None:
        msg = AwsSnsWebhook().parse_inbound(_JSON, _body(Timestamp="yesterday"))
        assert msg.timestamp is None


class TestSubscriptionConfirmation:
    def test_surfaces_system_message(self) -> None:
        body = _body(
            Type="SubscriptionConfirmation",
            Message="You have chosen to subscribe to the topic",
            SubscribeURL="https://sns.us-east-1.amazonaws.com/?Action=ConfirmSubscription",
        )
        msg = AwsSnsWebhook().parse_inbound([], body)
        assert msg.id == "env-1"
        assert msg.from_ == "AWS-SNS"
        assert msg.to == "SYSTEM"
        assert msg.text == "Subscription confirmation required"
        assert msg.raw["SubscribeURL"].startswith("https://")


class TestRejectedPayloads:
    def test_unknown_type(self) -> None:
        with pytest.raises(SmsProviderError, match="UnsubscribeConfirmation"):
            AwsSnsWebhook().parse_inbound([], _body(Type="UnsubscribeConfirmation"))

    def test_missing_envelope_field(self) -> None:
        envelope = _envelope()
        del envelope["Signature"]
        with pytest.raises(SmsProviderError, match="Invalid notification format"):
            AwsSnsWebhook().parse_inbound([], json.dumps(envelope).encode())

    def test_malformed_json(self) -> None:
        with pytest.raises(SmsProviderError, match="Invalid notification format"):
            AwsSnsWebhook().parse_inbound([], b"{not json")

    def test_non_utf8_body(self) -> None:
        with pytest.raises(SmsProviderError, match="Invalid UTF-8"):
            AwsSnsWebhook().parse_inbound([], b"\xff\xfe")


class TestRfc3339:
    def test_offset_required(self) -> None:
        assert parse_rfc3339("2024-12-30T12:34:56") is None
        assert parse_rfc3339("2024-12-30T12:34:56+02:00") is not None


class TestThroughPipeline:
    def _processor(self) -> WebhookProcessor:
        return WebhookProcessor(build_registry(AppConfig(aws_sns=AwsSnsConfig(enabled=True))))

    def test_delivery_report_200(self) -> None:
        resp = self._processor().process_webhook("aws-sns", _JSON, _body())
        assert resp.status == HttpStatus.OK
        assert json.loads(resp.body)["from"] == "AWS-SNS"

    def test_unsupported_type_400(self) -> None:
        resp = self._processor().process_webhook("aws-sns", [], _body(Type="Other"))
        assert resp.status == HttpStatus.BAD_REQUEST
        assert json.loads(resp.body) == {
            "error": "parse error: provider error: Unsupported notification type: Other",
        }

    def test_disabled_by_default(self) -> None:
        assert "aws-sns" not in build_registry(AppConfig())
