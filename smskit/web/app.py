"""FastAPI adapter for the webhook processor and rate limiter."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from smskit.config import AppConfig
from smskit.models import Headers, WebhookResponse
from smskit.providers import build_registry
from smskit.ratelimit.keys import KeyGenerator
from smskit.ratelimit.limiter import Limited, RateLimiter
from smskit.ratelimit.sweeper import BucketSweeper
from smskit.webhook.processor import WebhookProcessor


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from SMSKIT_* variables."""
    config = AppConfig.from_env()
    logging.basicConfig(level=config.log_level)
    processor = WebhookProcessor(build_registry(config))
    rate_limiter = RateLimiter(config.rate_limit)
    return create_app(processor, rate_limiter)


def create_app(
    processor: WebhookProcessor,
    rate_limiter: RateLimiter | None = None,
    key_generator: KeyGenerator | None = None,
) -> FastAPI:
    """Create the webhook FastAPI app.

    When a rate limiter is given, the app lifespan runs its idle-bucket
    sweeper.
    """
    keys = key_generator or KeyGenerator()
    sweeper = (
        BucketSweeper(rate_limiter)
        if rate_limiter is not None and rate_limiter.enabled
        else None
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if sweeper is not None:
            sweeper.start()
        try:
            yield
        finally:
            if sweeper is not None:
                sweeper.stop()

    app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/webhooks/{provider}")
    async def webhook(provider: str, request: Request) -> Response:
        headers = to_generic_headers(request)

        if rate_limiter is not None:
            client_ip = (
                keys.extract_client_ip(headers)
                or (request.client.host if request.client else None)
                or "unknown"
            )
            result = rate_limiter.check(keys.generate_key(provider, client_ip))
            if isinstance(result, Limited):
                retry_after = int(result.retry_after.total_seconds())
                return JSONResponse(
                    {"error": "rate limit exceeded"},
                    status_code=429,
                    headers={"Retry-After": str(retry_after)},
                )

        body = await request.body()
        return from_webhook_response(
            processor.process_webhook(provider, headers, body),
        )

    return app


def to_generic_headers(request: Request) -> Headers:
    """Raw header pairs in received order, duplicates included."""
    return [
        (name.decode("latin-1"), value.decode("latin-1"))
        for name, value in request.headers.raw
    ]


def from_webhook_response(response: WebhookResponse) -> Response:
    return Response(
        content=response.body,
        status_code=int(response.status),
        media_type=response.content_type,
    )
