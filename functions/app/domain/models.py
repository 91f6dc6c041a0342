"""Domain models."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import urlparse

from functions.app.domain.errors import InvalidClientConfigError


def is_absolute_http_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@dataclass(frozen=True)
class ClientConfig:
    """Reusable outbound request configuration (value object).

    default_headers accepts a mapping or (name, value) pairs and is normalised to
    a tuple of pairs so the config stays hashable. Header names are unique
    ignoring case.
    """

    base_address: str | None = None
    default_headers: tuple[tuple[str, str], ...] = ()
    name: str | None = None

    def __post_init__(self) -> None:
        raw = self.default_headers
        items = raw.items() if isinstance(raw, Mapping) else raw
        pairs = tuple((str(key), str(value)) for key, value in items)

        seen: set[str] = set()
        for key, _ in pairs:
            if not key.strip():
                raise InvalidClientConfigError("header name must be a non-empty str")
            lowered = key.lower()
            if lowered in seen:
                raise InvalidClientConfigError(f"duplicate default header: {key}")
            seen.add(lowered)
        object.__setattr__(self, "default_headers", pairs)

        if self.base_address is not None and not is_absolute_http_url(self.base_address):
            raise InvalidClientConfigError(
                f"base address must be an absolute http(s) URI: {self.base_address!r}"
            )

    @property
    def headers(self) -> dict[str, str]:
        """A fresh copy of the default headers."""
        return dict(self.default_headers)


EMPTY_CLIENT_CONFIG = ClientConfig()


@dataclass(frozen=True)
class RequestResult:
    """Outcome of one dispatched GET (value object)."""

    target_url: str
    status_code: int
    elapsed_milliseconds: int
    final_url: str
    headers: Mapping[str, str] = field(default_factory=dict, compare=False)
    content: bytes = b""
    content_type: str | None = None

    def __post_init__(self) -> None:
        if self.elapsed_milliseconds < 0:
            raise ValueError("elapsed_milliseconds must be >= 0")
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def summary(self) -> str:
        return f"{self.target_url} returned {self.status_code} in {self.elapsed_milliseconds}ms."


@dataclass(frozen=True)
class AvatarRequest:
    """Parsed queue payload for an avatar fetch."""

    profile_id: str
    request_id: str = ""


@dataclass(frozen=True)
class StoredAvatar:
    """Where an avatar ended up after a successful fetch."""

    key: str
    source_url: str
    content_type: str
    size: int
