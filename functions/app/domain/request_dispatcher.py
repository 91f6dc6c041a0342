"""Request dispatcher: issues a GET through a resolved client and times it.

Only transport failures are errors here; any HTTP status is a successful
dispatch and is reported in the result. There is no retry.
"""
from __future__ import annotations

import time
from typing import Any, Callable, Mapping

from loguru import logger

from functions.app.core import SERVICE_NAME
from functions.app.domain.client_registry import DEFAULT_CLIENT_LABEL, ResolvedClient
from functions.app.domain.errors import InvalidTargetError, TransportError
from functions.app.domain.models import RequestResult, is_absolute_http_url
from functions.app.ports.http_client import HttpClientError


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _content_type(headers: Mapping[str, str]) -> str | None:
    for key, value in headers.items():
        if key.lower() == "content-type":
            return value
    return None


class RequestDispatcher:
    def __init__(self, *, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock

    @staticmethod
    def build_target(client: ResolvedClient, path: str) -> str:
        """Absolute http(s) paths are used as-is; anything else is appended to the base address."""
        if is_absolute_http_url(path):
            return path
        if client.base_address is None:
            raise InvalidTargetError(
                f"path {path!r} is not an absolute URL and client "
                f"{client.name or DEFAULT_CLIENT_LABEL} has no base address"
            )
        return f"{client.base_address}{path}"

    @staticmethod
    def build_headers(client: ResolvedClient, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        """Per-request headers first, then the client's defaults, which win on a name clash."""
        defaults = client.headers
        taken = {key.lower() for key in defaults}
        merged = {key: value for key, value in (extra or {}).items() if key.lower() not in taken}
        merged.update(defaults)
        return merged

    async def get(
        self,
        client: ResolvedClient,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> RequestResult:
        target_url = self.build_target(client, path)
        outgoing = self.build_headers(client, headers)

        started = self._clock()
        try:
            response = await client.pool.get(target_url, headers=outgoing)
        except HttpClientError as exc:
            _log("request_failed", client=client.name or DEFAULT_CLIENT_LABEL, url=target_url, error=str(exc))
            raise TransportError(target_url, exc) from exc
        except ValueError as exc:
            raise InvalidTargetError(f"invalid target url: {target_url}") from exc
        elapsed_ms = max(0, int((self._clock() - started) * 1000))

        try:
            content = await response.read()
        except HttpClientError as exc:
            _log("request_failed", client=client.name or DEFAULT_CLIENT_LABEL, url=target_url, error=str(exc))
            raise TransportError(target_url, exc) from exc

        response_headers = dict(response.headers)
        result = RequestResult(
            target_url=target_url,
            status_code=int(response.status_code),
            elapsed_milliseconds=elapsed_ms,
            final_url=str(response.url),
            headers=response_headers,
            content=content,
            content_type=_content_type(response_headers),
        )
        _log(
            "request_dispatched",
            client=client.name or DEFAULT_CLIENT_LABEL,
            url=target_url,
            status_code=result.status_code,
            elapsed_ms=elapsed_ms,
        )
        return result
