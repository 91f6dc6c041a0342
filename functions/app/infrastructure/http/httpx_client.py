"""Concrete HTTP client implementation using httpx (one AsyncClient = one connection pool)."""
from __future__ import annotations

from typing import Mapping

import httpx

from functions.app.ports.http_client import (
    AbstractHttpClient,
    HttpClientError,
    HttpClientTimeoutError,
    HttpResponse,
    RequestTimeout,
)


class _HttpxResponseAdapter:
    """Adapts a streamed httpx.Response to the HttpResponse protocol."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._response.headers)

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def url(self) -> str:
        return str(self._response.url)

    async def read(self) -> bytes:
        try:
            return await self._response.aread()
        except httpx.TimeoutException as exc:
            raise HttpClientTimeoutError(f"timeout while reading {self._response.url}") from exc
        except httpx.HTTPError as exc:
            raise HttpClientError(f"body read failed for {self._response.url}: {exc}") from exc
        finally:
            await self._response.aclose()

    async def aclose(self) -> None:
        await self._response.aclose()


class HttpxHttpClient(AbstractHttpClient):
    """AbstractHttpClient implementation using httpx.AsyncClient."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        timeout: RequestTimeout,
        follow_redirects: bool = True,
    ) -> None:
        self._client = client
        self._timeout = httpx.Timeout(
            connect=timeout.connect_seconds,
            read=timeout.read_seconds,
            write=timeout.read_seconds,
            pool=timeout.connect_seconds,
        )
        self._follow_redirects = follow_redirects

    async def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        if self._client.is_closed:
            raise HttpClientError(f"http pool is closed; cannot fetch {url}")
        try:
            request = self._client.build_request(
                "GET",
                url,
                headers=dict(headers or {}),
                timeout=self._timeout,
            )
        except httpx.InvalidURL as exc:
            raise ValueError(f"invalid url: {url}") from exc
        try:
            response = await self._client.send(
                request,
                stream=True,
                follow_redirects=self._follow_redirects,
            )
        except httpx.TimeoutException as exc:
            raise HttpClientTimeoutError(f"timeout while fetching {url}") from exc
        except httpx.HTTPError as exc:
            raise HttpClientError(f"http fetch failed for {url}: {exc}") from exc
        return _HttpxResponseAdapter(response)

    async def close(self) -> None:
        await self._client.aclose()
