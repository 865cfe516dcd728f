"""Tests for the smskit CLI."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch
from urllib.parse import urlencode

import pytest
from click.testing import CliRunner

from smskit.cli import cli
from smskit.errors import SmsProviderError
from smskit.models import SendResponse


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SMSKIT_PLIVO_AUTH_ID", "SMSKIT_PLIVO_AUTH_TOKEN", "SMSKIT_PLIVO_BASE_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def plivo_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SMSKIT_PLIVO_AUTH_ID", "id")
    monkeypatch.setenv("SMSKIT_PLIVO_AUTH_TOKEN", "token")


def _write_payload(tmp_path: Path, body: bytes) -> str:
    p = tmp_path / "payload.txt"
    p.write_bytes(body)
    return str(p)


def test_process_plivo_payload(tmp_path: Path, plivo_env: None) -> None:
    payload = _write_payload(
        tmp_path, urlencode({"From": "+1", "To": "+2", "Text": "hi"}).encode(),
    )
    result = CliRunner().invoke(cli, [
        "process", "plivo", payload,
        "--header", "Content-Type: application/x-www-form-urlencoded",
    ])
    assert result.exit_code == 0
    output = json.loads(result.output)
    assert output["status"] == 200
    assert output["content_type"] == "application/json"
    assert json.loads(output["body"])["text"] == "hi"


def test_process_unknown_provider_exits_1(tmp_path: Path) -> None:
    payload = _write_payload(tmp_path, b"anything")
    result = CliRunner().invoke(cli, ["process", "nobody", payload])
    assert result.exit_code == 1
    output = json.loads(result.output)
    assert output["status"] == 404
    assert json.loads(output["body"]) == {"error": "unknown provider"}


def test_process_rejects_malformed_header(tmp_path: Path) -> None:
    payload = _write_payload(tmp_path, b"x")
    result = CliRunner().invoke(cli, ["process", "plivo", payload, "-H", "no-colon"])
    assert result.exit_code == 2
    assert "Name: value" in result.output


def test_config_file_option(tmp_path: Path) -> None:
    config = tmp_path / "smskit.json"
    config.write_text(json.dumps({"plivo": {"auth_id": "id", "auth_token": "token"}}))
    payload = _write_payload(
        tmp_path, urlencode({"From": "+1", "To": "+2", "Text": "hi"}).encode(),
    )
    result = CliRunner().invoke(cli, ["--config", str(config), "process", "plivo", payload])
    assert result.exit_code == 0


def test_invalid_config_file(tmp_path: Path) -> None:
    config = tmp_path / "smskit.json"
    config.write_text("{")
    payload = _write_payload(tmp_path, b"x")
    result = CliRunner().invoke(cli, ["--config", str(config), "process", "plivo", payload])
    assert result.exit_code == 1
    assert "not valid JSON" in result.output


def test_send_requires_plivo_config() -> None:
    result = CliRunner().invoke(cli, ["send", "--to", "+2", "--from", "+1", "--text", "hi"])
    assert result.exit_code == 2
    assert "Plivo is not configured" in result.output


def test_send_outputs_response(plivo_env: None) -> None:
    response = SendResponse(id="abc-123", provider="plivo", raw={"api_id": "x"})
    with patch(
        "smskit.cli.PlivoClient.send", new_callable=AsyncMock, return_value=response,
    ) as mock_send:
        result = CliRunner().invoke(cli, ["send", "--to", "+2", "--from", "+1", "--text", "hi"])
    assert result.exit_code == 0
    assert json.loads(result.output)["id"] == "abc-123"
    request = mock_send.call_args[0][0]
    assert request.to == "+2"
    assert request.from_ == "+1"


def test_send_reports_provider_error(plivo_env: None) -> None:
    with patch(
        "smskit.cli.PlivoClient.send",
        new_callable=AsyncMock,
        side_effect=SmsProviderError("HTTP 500: boom"),
    ):
        result = CliRunner().invoke(cli, ["send", "--to", "+2", "--from", "+1", "--text", "hi"])
    assert result.exit_code == 1
    assert "provider error: HTTP 500: boom" in result.output
