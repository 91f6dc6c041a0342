"""Named client registry: maps client names to configs and hands out resolved clients.

Registration happens during setup; resolution may then run concurrently from
many tasks or threads. One lock guards the name -> config mapping and the pool
cache, so each distinct ClientConfig gets exactly one pool even when the first
resolutions race, and a late registration cannot corrupt the mapping.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping

from loguru import logger

from functions.app.core import SERVICE_NAME
from functions.app.domain.errors import (
    DuplicateNameError,
    InvalidClientConfigError,
    UnknownClientNameError,
)
from functions.app.domain.models import EMPTY_CLIENT_CONFIG, ClientConfig
from functions.app.ports.http_client import AbstractHttpClient

PoolFactory = Callable[[ClientConfig], AbstractHttpClient]

DEFAULT_CLIENT_LABEL = "<default>"


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


@dataclass(frozen=True)
class ResolvedClient:
    """Handle bound to one ClientConfig and its shared pool."""

    config: ClientConfig
    pool: AbstractHttpClient = field(repr=False, compare=False)

    @property
    def name(self) -> str | None:
        return self.config.name

    @property
    def base_address(self) -> str | None:
        return self.config.base_address

    @property
    def headers(self) -> dict[str, str]:
        """Default headers as a fresh dict; mutating it never reaches the pool or other handles."""
        return self.config.headers


class ClientRegistry:
    def __init__(self, pool_factory: PoolFactory) -> None:
        self._pool_factory = pool_factory
        self._configs: dict[str, ClientConfig] = {}
        self._default: ClientConfig | None = None
        self._pools: dict[ClientConfig, AbstractHttpClient] = {}
        self._lock = threading.Lock()
        self._closed = False

    @property
    def names(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(sorted(self._configs))

    @property
    def has_default(self) -> bool:
        return self._default is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def __contains__(self, name: object) -> bool:
        if name is None:
            return self.has_default
        return name in self._configs

    def register(self, name: str | None, config: ClientConfig) -> None:
        """Register `config` under `name`. A None name overwrites the default slot."""
        if name is not None and not name.strip():
            raise InvalidClientConfigError("client name must be a non-empty str or None")
        bound = replace(config, name=name)
        with self._lock:
            self._ensure_open()
            if name is None:
                self._default = bound
            elif name in self._configs:
                raise DuplicateNameError(name)
            else:
                self._configs[name] = bound
        _log(
            "client_registered",
            client=name or DEFAULT_CLIENT_LABEL,
            base_address=bound.base_address,
            header_names=sorted(bound.headers),
        )

    def add_client(
        self,
        name: str | None = None,
        *,
        base_address: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> "ClientRegistry":
        """Build a ClientConfig and register it; returns the registry for chaining."""
        config = ClientConfig(base_address=base_address, default_headers=dict(headers or {}))
        self.register(name, config)
        return self

    def resolve(self, name: str | None = None) -> ResolvedClient:
        """Return a client for `name`, or the default client when name is None."""
        with self._lock:
            self._ensure_open()
            if name is None:
                config = self._default or EMPTY_CLIENT_CONFIG
            else:
                found = self._configs.get(name)
                if found is None:
                    raise UnknownClientNameError(name)
                config = found
            pool = self._pools.get(config)
            if pool is None:
                pool = self._pool_factory(config)
                self._pools[config] = pool
        return ResolvedClient(config=config, pool=pool)

    async def close(self) -> None:
        """Close every pool. The registry refuses register/resolve afterwards."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            pools = list(self._pools.values())
            self._pools.clear()
        for pool in pools:
            try:
                await pool.close()
            except Exception as exc:
                logger.warning("http pool close failed: {}", exc)
        _log("client_registry_closed", pools=len(pools))

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("client registry is closed")
