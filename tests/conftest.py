import json
import os
import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_JSON", "false")

from seal_bridge.config import Settings  # noqa: E402
from seal_bridge.integrations.seal import SealClient  # noqa: E402
from seal_bridge.main import create_bridge_app, create_proxy_app  # noqa: E402

SEAL_PATH_PREFIX = "/shopify/merchant/api"
BEARER = "proxy-secret"


class FakeSeal:
    """In-memory Seal API behind an ``httpx.MockTransport``.

    Register answers with ``on(method, path, ...)``; every request is kept in
    ``requests`` so tests can assert what was (or was not) sent.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.transport = httpx.MockTransport(self._handle)

    def on(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json_body: Any = None,
        text: str | None = None,
        error: type[httpx.HTTPError] | None = None,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if error is not None:
                raise error("seal unreachable", request=request)
            if text is not None:
                return httpx.Response(status, text=text, headers={"content-type": "text/html"})
            return httpx.Response(status, json=json_body if json_body is not None else {})

        self._routes[(method.upper(), path)] = respond

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(SEAL_PATH_PREFIX)
        respond = self._routes.get((request.method, path))
        if respond is None:
            return httpx.Response(404, json={"error": f"no fake route for {request.method} {path}"})
        return respond(request)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method.upper() and r.url.path.removeprefix(SEAL_PATH_PREFIX) == path
        ]

    @staticmethod
    def json_of(request: httpx.Request) -> Any:
        return json.loads(request.content)


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "seal_merchant_token": "test-token",
        "bridge_bearer": BEARER,
        "app_env": "test",
        "log_json": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def fake_seal() -> FakeSeal:
    return FakeSeal()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def seal_client(settings: Settings, fake_seal: FakeSeal) -> SealClient:
    return SealClient(settings, transport=fake_seal.transport)


@pytest.fixture
def bridge_client(settings: Settings, seal_client: SealClient):
    with TestClient(create_bridge_app(settings, seal_client)) as client:
        yield client


@pytest.fixture
def proxy_client(settings: Settings, seal_client: SealClient):
    with TestClient(create_proxy_app(settings, seal_client)) as client:
        yield client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {BEARER}"}
