from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from solus_sdk import SolusClient, StaticToken
from solus_sdk.context import Context

BASE_URL = "https://api.example.com/api/v1"


def json_response(status_code: int, payload: object, request: httpx.Request) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode(), request=request)


class RecordingContext(Context):
    """Context whose sleeps return immediately and are recorded."""

    def __init__(self) -> None:
        super().__init__()
        self.sleeps: list[float] = []

    def sleep(self, seconds: float) -> None:
        self.raise_if_done()
        self.sleeps.append(seconds)


@pytest.fixture(autouse=True)
def _clear_solus_env(monkeypatch) -> None:
    for name in ("SOLUS_API_URL", "SOLUS_API_TOKEN", "SOLUS_API_EMAIL", "SOLUS_API_PASSWORD"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_client() -> Callable[..., SolusClient]:
    clients: list[SolusClient] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> SolusClient:
        kwargs.setdefault("authenticator", StaticToken("secret-token"))
        kwargs.setdefault("retry_after", 0)
        transport = httpx.MockTransport(handler)
        client = SolusClient(
            base_url=BASE_URL,
            httpx_client=httpx.Client(base_url=BASE_URL + "/", transport=transport),
            **kwargs,
        )
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
