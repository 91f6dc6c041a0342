from __future__ import annotations

import json
import threading
from typing import Any, Mapping

import pytest
from fastapi import FastAPI

from functions.app.composition import build_client_registry
from functions.app.config.settings import Settings
from functions.app.domain.models import ClientConfig
from functions.app.domain.request_dispatcher import RequestDispatcher
from functions.app.routers.health import health_router
from functions.app.routers.http_trigger import http_trigger_router


class FakeResponse:
    """Implements HttpResponse; body is handed out by read()."""

    def __init__(
        self,
        url: str,
        *,
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
        raise_on_read: Exception | None = None,
    ) -> None:
        self._url = url
        self._status_code = status_code
        self._headers = dict(headers or {})
        self._body = body
        self._raise_on_read = raise_on_read
        self.closed = False

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def url(self) -> str:
        return self._url

    async def read(self) -> bytes:
        self.closed = True
        if self._raise_on_read is not None:
            raise self._raise_on_read
        return self._body

    async def aclose(self) -> None:
        self.closed = True


class FakePool:
    """Implements AbstractHttpClient for tests; records every outgoing request."""

    def __init__(
        self,
        *,
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
        raise_on_get: Exception | None = None,
        raise_on_read: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.headers = dict(headers or {})
        self.body = body
        self.raise_on_get = raise_on_get
        self.raise_on_read = raise_on_read
        self.requests: list[tuple[str, dict[str, str]]] = []
        self.close_calls = 0

    async def get(self, url: str, *, headers: Mapping[str, str] | None = None) -> FakeResponse:
        self.requests.append((url, dict(headers or {})))
        if self.raise_on_get is not None:
            raise self.raise_on_get
        return FakeResponse(
            url,
            status_code=self.status_code,
            headers=self.headers,
            body=self.body,
            raise_on_read=self.raise_on_read,
        )

    async def close(self) -> None:
        self.close_calls += 1


class CountingPoolFactory:
    """Pool factory that counts constructions per config. Thread-safe counter."""

    def __init__(self, **pool_kwargs: Any) -> None:
        self._pool_kwargs = pool_kwargs
        self._lock = threading.Lock()
        self.calls: list[ClientConfig] = []
        self.pools: list[FakePool] = []

    def __call__(self, config: ClientConfig) -> FakePool:
        pool = FakePool(**self._pool_kwargs)
        with self._lock:
            self.calls.append(config)
            self.pools.append(pool)
        return pool


class FakeMessage:
    """Implements IncomingMessage (and the aio_pika bits the handler touches)."""

    def __init__(self, body: bytes | str | dict[str, Any]) -> None:
        if isinstance(body, dict):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode()
        self.body = body
        self.acked = False
        self.rejected = False
        self.reject_requeue: bool | None = None

    @property
    def processed(self) -> bool:
        return self.acked or self.rejected

    async def ack(self) -> None:
        self.acked = True

    async def reject(self, *, requeue: bool = False) -> None:
        self.rejected = True
        self.reject_requeue = requeue


def fixed_clock(*values: float):
    """Clock returning the given readings in order, then repeating the last one."""
    readings = list(values)

    def clock() -> float:
        if len(readings) > 1:
            return readings.pop(0)
        return readings[0]

    return clock


@pytest.fixture()
def settings() -> Settings:
    return Settings()


@pytest.fixture()
def pool_factory() -> CountingPoolFactory:
    return CountingPoolFactory(headers={"content-type": "text/html"}, body=b"<html/>")


@pytest.fixture()
def test_app(settings: Settings, pool_factory: CountingPoolFactory) -> FastAPI:
    app = FastAPI()
    app.state.settings = settings
    app.state.client_registry = build_client_registry(settings, pool_factory)
    app.state.dispatcher = RequestDispatcher(clock=fixed_clock(0.0))
    app.include_router(health_router)
    app.include_router(http_trigger_router)
    return app
