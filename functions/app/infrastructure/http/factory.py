"""HTTP client factory: builds one AbstractHttpClient (connection pool) per client config."""
from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from functions.app.config.settings import Settings
from functions.app.core import SERVICE_NAME
from functions.app.domain.models import ClientConfig
from functions.app.infrastructure.http.httpx_client import HttpxHttpClient
from functions.app.ports.http_client import AbstractHttpClient, RequestTimeout


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def create_http_client(settings: Settings, config: ClientConfig) -> AbstractHttpClient:
    """Build a pool for `config`. Timeouts and redirects come from settings; URL and headers are per request."""
    _log("http_pool_created", client=config.name or "<default>", base_address=config.base_address)
    return HttpxHttpClient(
        httpx.AsyncClient(),
        timeout=RequestTimeout(
            connect_seconds=settings.http_connect_timeout_seconds,
            read_seconds=settings.http_read_timeout_seconds,
        ),
        follow_redirects=settings.http_follow_redirects,
    )
