"""Shared fixtures: settings, an in-memory credential slot and a recording HTTP session."""

from __future__ import annotations

import json
from typing import Any

import pytest
import requests

from shopfront_client.apis import AuthApi, ProductsApi
from shopfront_client.config import AppSettings
from shopfront_client.credential_store import InMemoryCredentialStore
from shopfront_client.http import HttpClient
from shopfront_client.session import SessionStateMachine

BASE_URL = "https://shop.example.test"


def make_response(status_code: int, body: Any = None, raw: bytes | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = BASE_URL
    if raw is not None:
        response._content = raw
    elif body is None:
        response._content = b""
    else:
        response._content = json.dumps(body).encode("utf-8")
    return response


class FakeSession(requests.Session):
    """requests.Session that records calls and replays queued responses or errors."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[dict[str, Any]] = []
        self._queue: list[requests.Response | Exception] = []

    def queue(self, item: requests.Response | Exception) -> None:
        self._queue.append(item)

    def request(self, method, url, **kwargs):  # type: ignore[override]
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self._queue:
            raise AssertionError(f"Unexpected {method} {url}")
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(base_url=BASE_URL, persist_credential=False)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def http_client(settings: AppSettings, fake_session: FakeSession) -> HttpClient:
    return HttpClient(settings, session=fake_session)


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def auth_api(settings: AppSettings, http_client: HttpClient) -> AuthApi:
    return AuthApi(settings, http_client)


@pytest.fixture
def products_api(settings: AppSettings, http_client: HttpClient, store: InMemoryCredentialStore) -> ProductsApi:
    return ProductsApi(settings, http_client, store)


@pytest.fixture
def session(auth_api: AuthApi, store: InMemoryCredentialStore) -> SessionStateMachine:
    return SessionStateMachine(auth_api, store)
