"""Click CLI for running webhook payloads and sending SMS."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click

from smskit.config import AppConfig, ConfigError
from smskit.errors import SmsError
from smskit.models import HttpStatus, SendRequest
from smskit.providers import build_registry
from smskit.providers.plivo import PlivoClient
from smskit.webhook.processor import WebhookProcessor


def _parse_header(value: str) -> tuple[str, str]:
    name, sep, header_value = value.partition(":")
    if not sep or not name.strip():
        raise click.BadParameter(f"expected 'Name: value', got {value!r}", param_hint="--header")
    return name.strip(), header_value.strip()


@click.group()
@click.option(
    "--config", "config_path", default=None,
    help="JSON config file. Defaults to SMSKIT_* environment variables.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """smskit webhook and SMS tooling."""
    ctx.ensure_object(dict)
    try:
        config = AppConfig.from_file(config_path) if config_path else AppConfig.from_env()
    except (ConfigError, FileNotFoundError) as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj["config"] = config


@cli.command()
@click.argument("provider")
@click.argument("payload", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--header", "-H", "header_values", multiple=True,
    help="Request header as 'Name: value'. Repeatable.",
)
@click.pass_context
def process(
    ctx: click.Context, provider: str, payload: str, header_values: tuple[str, ...],
) -> None:
    """Run a webhook PAYLOAD file through the PROVIDER handler."""
    config: AppConfig = ctx.obj["config"]
    headers = [_parse_header(h) for h in header_values]
    processor = WebhookProcessor(build_registry(config))
    response = processor.process_webhook(provider, headers, Path(payload).read_bytes())
    click.echo(json.dumps({
        "status": int(response.status),
        "content_type": response.content_type,
        "body": response.body,
    }, indent=2))
    if response.status != HttpStatus.OK:
        ctx.exit(1)


@cli.command()
@click.option("--to", required=True, help="Destination number.")
@click.option("--from", "from_", required=True, help="Sender number.")
@click.option("--text", required=True, help="Message text.")
@click.pass_context
def send(ctx: click.Context, to: str, from_: str, text: str) -> None:
    """Send one SMS through Plivo."""
    config: AppConfig = ctx.obj["config"]
    if config.plivo is None:
        raise click.UsageError(
            "Plivo is not configured (set SMSKIT_PLIVO_AUTH_ID and SMSKIT_PLIVO_AUTH_TOKEN)",
        )
    client = PlivoClient(
        auth_id=config.plivo.auth_id,
        auth_token=config.plivo.auth_token,
        base_url=config.plivo.base_url,
    )
    request = SendRequest(to=to, from_=from_, text=text)
    try:
        response = asyncio.run(client.send(request))
    except SmsError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(response.model_dump_json(indent=2))
