from __future__ import annotations

import json
from typing import Any, Dict, List

import httpx
import pytest
from typer.testing import CliRunner

from cli.app import app
from cli.client import ApiClient
from cli.config import CLIConfig, load_config


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.reading: Dict[str, Any] = {
            "temperature": 22.3,
            "humidity": 48.0,
            "sound": 30.5,
            "lastSync": "2024-01-01T00:00:00.000Z",
            "connectionStatus": "connected",
        }
        self.submitted: List[Dict[str, Any]] = []
        self.read_calls = 0
        self.closed = False

    def get_readings(self) -> Dict[str, Any]:
        self.read_calls += 1
        return self.reading

    def submit_readings(self, values: Dict[str, Any]) -> Dict[str, Any]:
        self.submitted.append(values)
        data = dict(self.reading)
        data.update(values)
        return {
            "success": True,
            "data": data,
            "message": "Data received and processed successfully",
        }

    def probe(self) -> Dict[str, Any]:
        return {
            "status": "online",
            "message": "Baby Monitor IoT server is running",
            "timestamp": "2024-01-01T00:00:00.000Z",
            "serverInfo": {"apiKey": "abc...xyz", "deviceId": "dev-1"},
        }

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _install_stub(monkeypatch) -> StubClient:
    stub = StubClient(config=None)

    def factory(config):
        stub.config = config
        return stub

    monkeypatch.setattr("cli.app.ApiClient", factory)
    return stub


def test_readings_command(monkeypatch, runner: CliRunner) -> None:
    stub = _install_stub(monkeypatch)

    result = runner.invoke(app, ["readings"])

    assert result.exit_code == 0
    assert "Current Reading" in result.stdout
    assert "temperature: 22.3" in result.stdout
    assert stub.closed is True


def test_submit_command_sends_only_given_values(monkeypatch, runner: CliRunner) -> None:
    stub = _install_stub(monkeypatch)

    result = runner.invoke(
        app,
        ["--api-key", "K", "submit", "--temperature", "23.4", "--sound", "12"],
    )

    assert result.exit_code == 0
    assert stub.submitted == [{"temperature": 23.4, "sound": 12.0}]
    assert stub.config.api_key == "K"
    assert "Data received and processed successfully" in result.stdout
    assert stub.closed is True


def test_probe_command(monkeypatch, runner: CliRunner) -> None:
    _install_stub(monkeypatch)

    result = runner.invoke(app, ["probe"])

    assert result.exit_code == 0
    assert "status: online" in result.stdout
    assert "apiKey: abc...xyz" in result.stdout
    assert "deviceId: dev-1" in result.stdout


def test_watch_command_stops_after_count(monkeypatch, runner: CliRunner) -> None:
    stub = _install_stub(monkeypatch)
    monkeypatch.setattr("cli.app.time.sleep", lambda _seconds: None)

    result = runner.invoke(app, ["watch", "--count", "3", "--interval", "0.1"])

    assert result.exit_code == 0
    assert stub.read_calls == 3
    assert result.stdout.count("temperature=22.3") == 3


def test_load_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("RELAY_BASE_URL", "http://relay.test:5000/")
    monkeypatch.setenv("API_KEY", "env-key")
    monkeypatch.setenv("DEVICE_ID", "env-device")
    monkeypatch.setenv("CLI_WATCH_INTERVAL", "bogus")

    config = load_config()

    assert config == CLIConfig(
        base_url="http://relay.test:5000",
        api_key="env-key",
        device_id="env-device",
        watch_interval=5.0,
    )


def _client_with_transport(config: CLIConfig, handler) -> ApiClient:
    client = ApiClient(config)
    client._client = httpx.Client(  # type: ignore[attr-defined]
        base_url=config.base_url,
        transport=httpx.MockTransport(handler),
    )
    return client


def test_api_client_sends_credentials_and_device() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True, "data": {}, "message": "ok"})

    config = CLIConfig(base_url="http://relay.test", api_key="K", device_id="dev-1")
    client = _client_with_transport(config, handler)

    client.submit_readings({"temperature": 20.0})

    assert seen[0].url.path == "/update-readings"
    assert json.loads(seen[0].content) == {"apiKey": "K", "deviceId": "dev-1", "temperature": 20.0}


def test_api_client_passes_device_id_on_reads() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"temperature": 1.0})

    client = _client_with_transport(CLIConfig(device_id="dev-1"), handler)

    assert client.get_readings() == {"temperature": 1.0}
    assert seen[0].url.params["deviceId"] == "dev-1"


def test_unauthorized_response_exits_with_server_error(monkeypatch, runner: CliRunner) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "Invalid API key"})

    def factory(config):
        return _client_with_transport(config, handler)

    monkeypatch.setattr("cli.app.ApiClient", factory)

    result = runner.invoke(app, ["--api-key", "wrong", "submit", "-t", "1"])

    assert result.exit_code == 1
    assert "Request failed with status 401: Invalid API key" in result.output


def test_submit_without_api_key_is_rejected_locally(monkeypatch, runner: CliRunner) -> None:
    monkeypatch.delenv("API_KEY", raising=False)

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    monkeypatch.setattr("cli.app.ApiClient", lambda config: _client_with_transport(config, handler))

    result = runner.invoke(app, ["submit", "-t", "1"])

    assert result.exit_code != 0


def test_watch_command_rejects_negative_interval(monkeypatch, runner: CliRunner) -> None:
    stub = _install_stub(monkeypatch)

    result = runner.invoke(app, ["watch", "--interval", "-1", "--count", "2"])

    assert result.exit_code == 2
    assert stub.read_calls == 0
