"""Shared data models for smskit, free of framework or vendor dependencies."""

from __future__ import annotations

import json
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Ordered (name, value) pairs; duplicates kept as received.
Headers = list[tuple[str, str]]

JSON_CONTENT_TYPE = "application/json"


def get_header(headers: Sequence[tuple[str, str]], name: str) -> str | None:
    """Return the first value for ``name`` (case-insensitive), or None."""
    wanted = name.lower()
    for key, value in headers:
        if key.lower() == wanted:
            return value
    return None


def get_all_headers(headers: Sequence[tuple[str, str]], name: str) -> list[str]:
    wanted = name.lower()
    return [value for key, value in headers if key.lower() == wanted]


def fallback_id() -> str:
    """Pseudo message id for providers that do not return one."""
    return str(uuid.uuid4())


# --- Enums ---


class HttpStatus(IntEnum):
    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500


# --- Message Models ---


class SendRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    to: str
    from_: str = Field(alias="from")
    text: str


class SendResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    provider: str  # e.g. "plivo"
    raw: Any = None  # provider payload kept for audit


class InboundMessage(BaseModel):
    """Normalized inbound message (e.g. a reply)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str | None = None
    from_: str = Field(alias="from")
    to: str
    text: str
    timestamp: datetime | None = None
    provider: str
    raw: Any = None

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


# --- Webhook Response ---


@dataclass(frozen=True)
class WebhookResponse:
    """Framework-agnostic response that adapters render as-is."""

    status: HttpStatus
    body: str
    content_type: str = JSON_CONTENT_TYPE

    @classmethod
    def success(cls, message: InboundMessage) -> WebhookResponse:
        return cls(status=HttpStatus.OK, body=message.to_json())

    @classmethod
    def error(cls, status: HttpStatus, message: str) -> WebhookResponse:
        return cls(status=status, body=json.dumps({"error": message}))
