"""Configuration models, loaded from SMSKIT_* environment variables or JSON."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

ENV_PREFIX = "SMSKIT_"

_M = TypeVar("_M", bound=BaseModel)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when configuration values cannot be parsed or validated."""


class ProviderRateLimit(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_requests: int = Field(ge=1)
    window_seconds: int = Field(ge=1)


class RateLimitConfig(BaseModel):
    """Global token-bucket limits plus per-provider overrides."""

    model_config = ConfigDict(frozen=True)

    max_requests: int = Field(default=100, ge=1)
    window_seconds: int = Field(default=60, ge=1)
    enabled: bool = True
    per_provider: dict[str, ProviderRateLimit] = Field(default_factory=dict)
    idle_timeout_seconds: int = Field(default=3600, ge=1)
    cleanup_interval_seconds: int = Field(default=300, ge=1)

    def limit_for(self, provider: str | None) -> tuple[int, int]:
        """Return (max_requests, window_seconds) for a provider name."""
        override = self.per_provider.get(provider) if provider is not None else None
        if override is not None:
            return override.max_requests, override.window_seconds
        return self.max_requests, self.window_seconds

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RateLimitConfig:
        env = os.environ if environ is None else environ
        prefix = f"{ENV_PREFIX}RATE_LIMIT_"
        data: dict[str, object] = {}
        if f"{prefix}ENABLED" in env:
            data["enabled"] = _parse_bool(f"{prefix}ENABLED", env[f"{prefix}ENABLED"])
        for field in (
            "max_requests",
            "window_seconds",
            "idle_timeout_seconds",
            "cleanup_interval_seconds",
        ):
            name = f"{prefix}{field.upper()}"
            if name in env:
                data[field] = env[name]
        per_provider = env.get(f"{prefix}PER_PROVIDER")
        if per_provider:
            try:
                data["per_provider"] = json.loads(per_provider)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"{prefix}PER_PROVIDER is not valid JSON: {exc}") from exc
        return _validate(cls, data)


class PlivoConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    auth_id: str = Field(min_length=1)
    auth_token: str = Field(min_length=1)
    base_url: str = "https://api.plivo.com"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PlivoConfig | None:
        """Return Plivo settings, or None when no credentials are set."""
        env = os.environ if environ is None else environ
        auth_id = env.get(f"{ENV_PREFIX}PLIVO_AUTH_ID")
        auth_token = env.get(f"{ENV_PREFIX}PLIVO_AUTH_TOKEN")
        if not auth_id and not auth_token:
            return None
        data: dict[str, object] = {"auth_id": auth_id or "", "auth_token": auth_token or ""}
        base_url = env.get(f"{ENV_PREFIX}PLIVO_BASE_URL")
        if base_url:
            data["base_url"] = base_url
        return _validate(cls, data)


class AwsSnsConfig(BaseModel):
    """Inbound SNS delivery notifications. No credentials: nothing is sent."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AwsSnsConfig:
        env = os.environ if environ is None else environ
        name = f"{ENV_PREFIX}AWS_SNS_ENABLED"
        if name not in env:
            return cls()
        return cls(enabled=_parse_bool(name, env[name]))


LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    log_level: LogLevel = "INFO"
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    plivo: PlivoConfig | None = None
    aws_sns: AwsSnsConfig = Field(default_factory=AwsSnsConfig)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppConfig:
        env = os.environ if environ is None else environ
        return _validate(cls, {
            "log_level": env.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO"),
            "rate_limit": RateLimitConfig.from_env(env),
            "plivo": PlivoConfig.from_env(env),
            "aws_sns": AwsSnsConfig.from_env(env),
        })

    @classmethod
    def from_file(cls, path: str | Path) -> AppConfig:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        try:
            raw = json.loads(config_path.read_text())
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{config_path} is not valid JSON: {exc}") from exc
        return _validate(cls, raw)


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def _validate(model: type[_M], data: object) -> _M:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid {model.__name__}: {exc}") from exc
