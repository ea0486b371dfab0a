from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the sensor relay."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=10.0)

    def close(self) -> None:
        self._client.close()

    def get_readings(self) -> Dict[str, Any]:
        params = {"deviceId": self._config.device_id} if self._config.device_id else None
        return self._request("GET", "/readings", params=params)

    def submit_readings(self, values: Dict[str, Any]) -> Dict[str, Any]:
        if not self._config.api_key:
            raise typer.BadParameter("An API key is required to submit readings (--api-key or API_KEY).")
        body: Dict[str, Any] = {"apiKey": self._config.api_key}
        if self._config.device_id:
            body["deviceId"] = self._config.device_id
        body.update(values)
        return self._request("POST", "/update-readings", json=body)

    def probe(self) -> Dict[str, Any]:
        return self._request("GET", "/test")

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, params=params, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("error") or data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
