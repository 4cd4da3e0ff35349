from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the report service."""

    def __init__(self, config: CLIConfig, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._config = config
        self._client = httpx.Client(
            base_url=config.base_url, timeout=config.timeout, transport=transport
        )

    def close(self) -> None:
        self._client.close()

    def get_readings(
        self,
        email: str,
        password: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Dict[str, Any]:
        response = self._post("/readings", _request_body(email, password, start, end))
        return response.json()

    def download_report(
        self,
        email: str,
        password: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> bytes:
        response = self._post("/reports", _request_body(email, password, start, end))
        if response.headers.get("content-type", "").split(";")[0] != "application/pdf":
            raise typer.BadParameter("Unexpected response payload when downloading report.")
        return response.content

    def _post(self, path: str, body: Dict[str, Any]) -> httpx.Response:
        try:
            response = self._client.post(path, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(f"Could not reach {self._config.base_url}: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc
        return response

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: Any = None
        try:
            detail = exc.response.json().get("detail")
        except ValueError:
            detail = exc.response.text.strip()
        if isinstance(detail, dict):
            service_error = detail.get("service_error")
            if service_error:
                detail = (
                    f"{detail.get('message')} status={service_error.get('status')} "
                    f"code={service_error.get('code')} message={service_error.get('message')}"
                )
            else:
                detail = detail.get("message")
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _request_body(
    email: str, password: str, start: Optional[date], end: Optional[date]
) -> Dict[str, Any]:
    return {
        "email": email,
        "password": password,
        "start_date": start.isoformat() if start else None,
        "end_date": end.isoformat() if end else None,
    }
