from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the telemetry service."""

    def __init__(self, config: CLIConfig, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._config = config
        self._client = httpx.Client(
            base_url=config.base_url, timeout=config.timeout, transport=transport
        )

    def close(self) -> None:
        self._client.close()

    def get_current(self) -> Tuple[bool, Dict[str, Any]]:
        """Return ``(online, payload)``; a 503 carries the offline placeholder."""
        response = self._request("GET", "/api/data", allowed={503})
        return response.status_code == 200, response.json()

    def get_history(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"limit": limit} if limit is not None else None
        return self._request("GET", "/api/history", params=params).json()

    def get_stats(self) -> Dict[str, Any]:
        return self._request("GET", "/api/stats").json()

    def clear_history(self) -> str:
        payload = self._request("DELETE", "/api/history").json()
        return str(payload.get("message", ""))

    def export_csv(self) -> Optional[str]:
        """Return the CSV body, or ``None`` when the service has nothing recorded."""
        response = self._request("GET", "/api/export", allowed={404})
        if response.status_code == 404:
            return None
        return response.text

    def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        allowed: frozenset[int] | set[int] = frozenset(),
    ) -> httpx.Response:
        try:
            response = self._client.request(method, url, params=params)
            if response.status_code not in allowed:
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc
        return response

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
