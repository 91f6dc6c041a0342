import json

import pytest

import functions.app.composition as composition
from functions.app.composition import FunctionDependencies, WorkerDependencies, build_client_registry
from functions.app.config.settings import BLOG_BASE_ADDRESS, BLOG_USER_AGENT, Settings
from functions.app.domain.errors import InvalidClientConfigError
from functions.app.infrastructure.messaging.factory import create_message_consumer
from functions.app.infrastructure.storage.factory import create_blob_storage
from functions.app.infrastructure.storage.inmemory.in_memory_storage import InMemoryBlobStorage
from tests.conftest import CountingPoolFactory


class _FakeConsumer:
    def __init__(self) -> None:
        self.connected = False
        self.closed = False

    async def connect(self):
        self.connected = True

    async def start_consuming(self, handler):
        return "ctag"

    async def cancel(self, consumer_tag):
        return None

    async def close(self):
        self.closed = True


def test_defaults_register_blog_and_avatar_clients(settings):
    registry = build_client_registry(settings, CountingPoolFactory())

    assert registry.names == ("avatars", "blog")
    assert registry.has_default is True
    blog = registry.resolve("blog")
    assert blog.base_address == BLOG_BASE_ADDRESS
    assert blog.headers == {"User-Agent": BLOG_USER_AGENT}
    assert registry.resolve().headers == {}


def test_default_user_agent_becomes_default_client_header():
    settings = Settings(DEFAULT_USER_AGENT="Functions/1.0")

    registry = build_client_registry(settings, CountingPoolFactory())

    assert registry.resolve().headers == {"User-Agent": "Functions/1.0"}


def test_named_clients_from_environment(monkeypatch):
    monkeypatch.setenv(
        "NAMED_CLIENTS",
        json.dumps({"github": {"base_address": "https://api.github.com/", "headers": {"Accept": "application/json"}}}),
    )

    registry = build_client_registry(Settings(), CountingPoolFactory())

    assert registry.names == ("avatars", "github")
    assert registry.resolve("github").headers == {"Accept": "application/json"}


def test_configured_avatar_client_is_not_overridden(monkeypatch):
    monkeypatch.setenv("NAMED_CLIENTS", json.dumps({"avatars": {"base_address": "https://avatars.example/"}}))

    registry = build_client_registry(Settings(), CountingPoolFactory())

    assert registry.resolve("avatars").base_address == "https://avatars.example/"


def test_invalid_base_address_aborts_setup(monkeypatch):
    monkeypatch.setenv("NAMED_CLIENTS", json.dumps({"bad": {"base_address": "not-a-url"}}))

    with pytest.raises(InvalidClientConfigError):
        build_client_registry(Settings(), CountingPoolFactory())


@pytest.mark.asyncio
async def test_unsupported_storage_backend_is_rejected():
    with pytest.raises(ValueError, match="storage backend"):
        await create_blob_storage(Settings(STORAGE_BACKEND="s3"))


@pytest.mark.asyncio
async def test_inmemory_storage_backend_is_selected():
    assert isinstance(await create_blob_storage(Settings(STORAGE_BACKEND="InMemory")), InMemoryBlobStorage)


def test_unsupported_consumer_backend_is_rejected():
    with pytest.raises(ValueError, match="consumer backend"):
        create_message_consumer(Settings(CONSUMER_BACKEND="kafka"))


@pytest.mark.asyncio
async def test_function_dependencies_lifecycle(settings):
    factory = CountingPoolFactory()
    dependencies = FunctionDependencies(settings=settings, pool_factory=factory)

    with pytest.raises(RuntimeError):
        dependencies.registry

    await dependencies.connect()
    registry = dependencies.registry
    registry.resolve("blog")
    await dependencies.close()

    assert registry.closed is True
    assert factory.pools[0].close_calls == 1
    with pytest.raises(RuntimeError):
        dependencies.dispatcher


@pytest.mark.asyncio
async def test_worker_dependencies_wire_avatar_service(monkeypatch, settings):
    consumer = _FakeConsumer()
    monkeypatch.setattr(composition, "create_message_consumer", lambda s: consumer)
    dependencies = WorkerDependencies(settings=settings, pool_factory=CountingPoolFactory())

    await dependencies.connect()
    assert consumer.connected is True
    assert isinstance(dependencies.storage, InMemoryBlobStorage)
    assert dependencies.avatar_service is not None

    await dependencies.close()
    assert consumer.closed is True
    with pytest.raises(RuntimeError):
        dependencies.avatar_service
