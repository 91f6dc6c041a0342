"""HTTP client port: contract for the connection pool behind a resolved client.

Domain code depends on this port; infrastructure (httpx) implements it. A pool
carries no base address and no default headers of its own: the dispatcher
passes the full URL and the header set on every call.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Protocol, runtime_checkable


class HttpClientError(Exception):
    """Base for transport failures (connect, DNS, protocol, body read)."""


class HttpClientTimeoutError(HttpClientError):
    """Raised when the request times out."""


@runtime_checkable
class HttpResponse(Protocol):
    """Response whose status and headers have arrived; the body is read on demand."""

    @property
    def headers(self) -> Mapping[str, str]: ...

    @property
    def status_code(self) -> int: ...

    @property
    def url(self) -> str: ...

    async def read(self) -> bytes:
        """Read the full body; raise HttpClientError if the transfer breaks."""
        ...

    async def aclose(self) -> None: ...


@dataclass(frozen=True)
class RequestTimeout:
    """Connect and read timeouts in seconds."""

    connect_seconds: float
    read_seconds: float


@runtime_checkable
class AbstractHttpClient(Protocol):
    """Port: issue GET requests over a shared pool. Implementations live in infrastructure."""

    async def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        """Perform GET; raise HttpClientTimeoutError or HttpClientError on transport failure."""
        ...

    async def close(self) -> None:
        """Release the connection pool."""
        ...
