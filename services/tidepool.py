"""HTTP client for the Tidepool login and data endpoints."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from models.records import Credentials, DateRange, TidepoolSession
from services.errors import AuthError, FetchError, UpstreamUnavailable

logger = logging.getLogger(__name__)

SESSION_TOKEN_HEADER = "x-tidepool-session-token"
DATE_SUFFIX = "T01:00:00.000Z"


def build_date_query(date_range: Optional[DateRange]) -> str:
    """Render the optional ``startDate``/``endDate`` query fragment.

    Each present bound becomes ``&<name>=<YYYY-MM-DD>T01:00:00.000Z``; start
    always precedes end.
    """
    if date_range is None or date_range.is_open:
        return ""
    query = ""
    if date_range.start is not None:
        query += f"&startDate={date_range.start.isoformat()}{DATE_SUFFIX}"
    if date_range.end is not None:
        query += f"&endDate={date_range.end.isoformat()}{DATE_SUFFIX}"
    return query


class TidepoolClient:
    """One-shot client; create it per request and close it afterwards."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "TidepoolClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def login(self, credentials: Credentials) -> TidepoolSession:
        try:
            response = self._client.post(
                "/auth/login",
                auth=(credentials.identifier, credentials.secret),
            )
        except httpx.TransportError as exc:
            raise UpstreamUnavailable(f"login: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            logger.info("Tidepool login rejected", extra={"status": response.status_code})
            raise AuthError(response.status_code, response.reason_phrase)

        token = response.headers.get(SESSION_TOKEN_HEADER)
        if not token:
            raise AuthError(response.status_code, "Login response carried no session token")

        account_id = self._read_account_id(response)
        logger.info("Tidepool login succeeded", extra={"account_id": account_id})
        return TidepoolSession(token=token, account_id=account_id)

    def fetch_measurements(
        self,
        session: TidepoolSession,
        subtype: str,
        date_range: Optional[DateRange] = None,
    ) -> bytes:
        url = f"/data/{session.account_id}?type={subtype}{build_date_query(date_range)}"
        headers = {
            SESSION_TOKEN_HEADER: session.token,
            "content-type": "application/json",
        }
        try:
            response = self._client.get(url, headers=headers)
        except httpx.TransportError as exc:
            raise UpstreamUnavailable(f"data request: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            logger.info(
                "Tidepool data request failed",
                extra={"status": response.status_code, "account_id": session.account_id},
            )
            raise FetchError(response.status_code, response.reason_phrase)

        return response.content

    @staticmethod
    def _read_account_id(response: httpx.Response) -> str:
        try:
            body: Any = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise AuthError(response.status_code, "Login response body is not JSON") from exc

        if not isinstance(body, dict):
            raise AuthError(response.status_code, "Login response body is not an object")

        userid = body.get("userid")
        if userid is None or isinstance(userid, (bool, dict, list)):
            raise AuthError(response.status_code, "Login response carried no usable userid")

        account_id = str(userid).strip()
        if not account_id:
            raise AuthError(response.status_code, "Login response carried an empty userid")
        return account_id
