"""Composition root: build and lifecycle-manage concrete dependencies.

Composition may: import concrete classes, call factories, store interface types,
manage high-level lifecycle. No DI container library; explicit wiring only.
"""
from __future__ import annotations

from functools import partial

from loguru import logger

from functions.app.application.avatar_service import AvatarService
from functions.app.config.settings import Settings
from functions.app.domain.client_registry import ClientRegistry, PoolFactory
from functions.app.domain.request_dispatcher import RequestDispatcher
from functions.app.infrastructure.http.factory import create_http_client
from functions.app.infrastructure.messaging.factory import create_message_consumer
from functions.app.infrastructure.storage.factory import create_blob_storage
from functions.app.ports.blob_storage import BlobStorage
from functions.app.ports.message_consumer import MessageConsumer


def build_client_registry(settings: Settings, pool_factory: PoolFactory | None = None) -> ClientRegistry:
    """Register the default client and every configured named client. Bad config aborts setup."""
    registry = ClientRegistry(pool_factory or partial(create_http_client, settings))

    default_headers = {"User-Agent": settings.default_user_agent} if settings.default_user_agent else {}
    registry.add_client(None, headers=default_headers)
    for name, client in settings.named_clients.items():
        registry.add_client(name, base_address=client.base_address, headers=client.headers)
    if settings.avatar_client_name not in registry:
        registry.add_client(settings.avatar_client_name, base_address=settings.avatar_base_address)
    return registry


class FunctionDependencies:
    """Holds what the HTTP-triggered functions need: the registry and the dispatcher."""

    def __init__(self, *, settings: Settings, pool_factory: PoolFactory | None = None) -> None:
        self._settings = settings
        self._pool_factory = pool_factory
        self._registry: ClientRegistry | None = None
        self._dispatcher: RequestDispatcher | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def registry(self) -> ClientRegistry:
        if self._registry is None:
            raise RuntimeError("client_registry is not initialized")
        return self._registry

    @property
    def dispatcher(self) -> RequestDispatcher:
        if self._dispatcher is None:
            raise RuntimeError("dispatcher is not initialized")
        return self._dispatcher

    async def connect(self) -> None:
        self._registry = build_client_registry(self._settings, self._pool_factory)
        self._dispatcher = RequestDispatcher()

    async def close(self) -> None:
        if self._registry is not None:
            await self._registry.close()
        self._registry = None
        self._dispatcher = None


class WorkerDependencies:
    """Holds wired queue-worker dependencies and their lifecycle."""

    def __init__(self, *, settings: Settings, pool_factory: PoolFactory | None = None) -> None:
        self._settings = settings
        self._pool_factory = pool_factory
        self._registry: ClientRegistry | None = None
        self._storage: BlobStorage | None = None
        self._message_consumer: MessageConsumer | None = None
        self._avatar_service: AvatarService | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def storage(self) -> BlobStorage:
        if self._storage is None:
            raise RuntimeError("storage is not initialized")
        return self._storage

    @property
    def message_consumer(self) -> MessageConsumer:
        if self._message_consumer is None:
            raise RuntimeError("message_consumer is not initialized")
        return self._message_consumer

    @property
    def avatar_service(self) -> AvatarService:
        if self._avatar_service is None:
            raise RuntimeError("avatar_service is not initialized")
        return self._avatar_service

    async def connect(self) -> None:
        self._registry = build_client_registry(self._settings, self._pool_factory)
        self._storage = await create_blob_storage(self._settings)

        self._message_consumer = create_message_consumer(self._settings)
        await self._message_consumer.connect()

        self._avatar_service = AvatarService(
            self._registry,
            RequestDispatcher(),
            self._storage,
            client_name=self._settings.avatar_client_name,
            path_template=self._settings.avatar_path_template,
            blob_prefix=self._settings.avatar_blob_prefix,
        )

    async def close(self) -> None:
        if self._message_consumer is not None:
            try:
                await self._message_consumer.close()
            except Exception as exc:
                logger.warning("message consumer close failed: {}", exc)
            self._message_consumer = None

        if self._registry is not None:
            await self._registry.close()
            self._registry = None

        if self._storage is not None:
            try:
                await self._storage.close()
            except Exception as exc:
                logger.warning("storage close failed: {}", exc)
            self._storage = None

        self._avatar_service = None


def create_function_dependencies(settings: Settings | None = None) -> FunctionDependencies:
    return FunctionDependencies(settings=settings or Settings())


def create_worker_dependencies(settings: Settings | None = None) -> WorkerDependencies:
    return WorkerDependencies(settings=settings or Settings())
