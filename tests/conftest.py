from __future__ import annotations

import base64
import io
import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

import httpx
import pytest
from pypdf import PdfReader

from services.tidepool import SESSION_TOKEN_HEADER

BASE_URL = "https://tidepool.test"


@dataclass
class FakeAccount:
    password: str
    userid: Any
    payload: bytes


class FakeTidepool:
    """In-memory stand-in for the Tidepool login and data endpoints."""

    base_url = BASE_URL

    def __init__(self) -> None:
        self.accounts: Dict[str, FakeAccount] = {}
        self.requests: List[httpx.Request] = []
        self.data_status = 200

    def add_account(self, email: str, password: str, userid: Any, payload: Any) -> None:
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
        self.accounts[email] = FakeAccount(password=password, userid=userid, payload=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST" and request.url.path == "/auth/login":
            return self._login(request)
        if request.method == "GET" and request.url.path.startswith("/data/"):
            return self._data(request)
        return httpx.Response(404)

    def _login(self, request: httpx.Request) -> httpx.Response:
        header = request.headers.get("authorization", "")
        if not header.startswith("Basic "):
            return httpx.Response(401)
        email, _, password = base64.b64decode(header[6:]).decode("utf-8").partition(":")
        account = self.accounts.get(email)
        if account is None or account.password != password:
            return httpx.Response(401, json={"code": 401, "reason": "Wrong password"})
        return httpx.Response(
            200,
            headers={SESSION_TOKEN_HEADER: f"token-{account.userid}"},
            json={"userid": account.userid, "username": email},
        )

    def _data(self, request: httpx.Request) -> httpx.Response:
        if self.data_status != 200:
            return httpx.Response(self.data_status)
        account_id = request.url.path.rsplit("/", 1)[-1]
        for account in self.accounts.values():
            if str(account.userid) == account_id:
                if request.headers.get(SESSION_TOKEN_HEADER) != f"token-{account.userid}":
                    break
                return httpx.Response(200, content=account.payload)
        return httpx.Response(
            200,
            json={"status": 403, "id": "req-1", "code": "unauthorized", "message": "bad token"},
        )


@pytest.fixture()
def tidepool() -> FakeTidepool:
    return FakeTidepool()


def _page_texts(document: bytes) -> List[str]:
    reader = PdfReader(io.BytesIO(document))
    return [" ".join(page.extract_text().split()) for page in reader.pages]


@pytest.fixture()
def pdf_pages() -> Callable[[bytes], List[str]]:
    """Text of each page of a rendered PDF, whitespace collapsed to single spaces."""
    return _page_texts
