"""Plivo SMS provider: inbound webhook parsing and outbound send.

Plivo posts inbound SMS as ``application/x-www-form-urlencoded`` by default
(JSON when configured). Outbound messages go through the Message REST API
with HTTP basic auth. No retries: failures surface as typed SmsErrors.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any
from urllib.parse import parse_qsl

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from smskit.errors import (
    SmsAuthError,
    SmsHttpError,
    SmsInvalidError,
    SmsProviderError,
)
from smskit.models import (
    Headers,
    InboundMessage,
    SendRequest,
    SendResponse,
    fallback_id,
    get_header,
)
from smskit.webhook.handler import InboundWebhook, SmsClient

logger = logging.getLogger(__name__)

PROVIDER = "plivo"
_PLIVO_API_BASE = "https://api.plivo.com"


class PlivoInbound(BaseModel):
    """Fields of a Plivo inbound SMS webhook."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    from_: str = Field(alias="From")
    to: str = Field(alias="To")
    text: str = Field(alias="Text")
    type: str | None = Field(default=None, alias="Type")
    message_uuid: str | None = Field(default=None, alias="MessageUUID")
    time: str | None = Field(default=None, alias="Time")


def parse_plivo_time(value: str | None) -> datetime | None:
    """Best-effort ISO 8601 parse; naive times are taken as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        logger.debug("Unparseable Plivo timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class PlivoClient(SmsClient, InboundWebhook):
    """Plivo REST client and inbound webhook handler."""

    def __init__(
        self,
        auth_id: str,
        auth_token: str,
        base_url: str = _PLIVO_API_BASE,
        timeout: float = 30.0,
    ) -> None:
        self.auth_id = auth_id
        self._auth_token = auth_token
        self.base_url = base_url
        self._timeout = timeout

    def provider(self) -> str:
        return PROVIDER

    # --- Inbound ---

    def parse_inbound(self, headers: Headers, body: bytes) -> InboundMessage:
        fields = self._decode_fields(headers, body)
        try:
            inbound = PlivoInbound.model_validate(fields)
        except ValidationError as exc:
            raise SmsInvalidError(f"form decode: {_describe(exc)}") from exc

        return InboundMessage(
            id=inbound.message_uuid,
            from_=inbound.from_,
            to=inbound.to,
            text=inbound.text,
            timestamp=parse_plivo_time(inbound.time),
            provider=PROVIDER,
            raw=fields,
        )

    @staticmethod
    def _decode_fields(headers: Headers, body: bytes) -> dict[str, Any]:
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SmsInvalidError(f"body is not valid UTF-8: {exc}") from exc

        content_type = (get_header(headers, "content-type") or "").lower()
        if content_type.startswith("application/json"):
            try:
                payload = json.loads(text)
            except json.JSONDecodeError as exc:
                raise SmsInvalidError(f"json decode: {exc}") from exc
            if not isinstance(payload, dict):
                raise SmsInvalidError("json decode: expected an object")
            return payload

        fields: dict[str, Any] = {}
        for key, value in parse_qsl(text, keep_blank_values=True):
            # Plivo never repeats a field; keep the first if one does
            fields.setdefault(key, value)
        return fields

    # --- Outbound ---

    async def send(self, request: SendRequest) -> SendResponse:
        """Send a single text SMS through the Plivo Message API."""
        url = f"{self.base_url.rstrip('/')}/v1/Account/{self.auth_id}/Message/"
        payload = {"src": request.from_, "dst": request.to, "text": request.text}

        try:
            async with httpx.AsyncClient(verify=True) as client:
                resp = await client.post(
                    url,
                    json=payload,
                    auth=(self.auth_id, self._auth_token),
                    timeout=self._timeout,
                )
        except httpx.HTTPError as exc:
            raise SmsHttpError(str(exc) or type(exc).__name__) from exc

        if resp.status_code in (401, 403):
            raise SmsAuthError(f"HTTP {resp.status_code}: {resp.text}")
        if resp.status_code >= 400:
            raise SmsProviderError(f"HTTP {resp.status_code}: {resp.text}")

        try:
            raw = resp.json()
        except ValueError:
            raw = {"raw": resp.text}

        message_id = _first_message_uuid(raw) or fallback_id()
        logger.info("Plivo accepted message %s", message_id)
        return SendResponse(id=message_id, provider=PROVIDER, raw=raw)


def _first_message_uuid(raw: Any) -> str | None:
    if not isinstance(raw, dict):
        return None
    uuids = raw.get("message_uuid")
    if isinstance(uuids, list) and uuids and isinstance(uuids[0], str):
        return uuids[0]
    return None


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error["loc"])
        parts.append(f"{loc}: {error['msg']}" if loc else error["msg"])
    return "; ".join(parts)
