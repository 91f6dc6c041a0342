from __future__ import annotations

import pytest

from functions.app.domain.client_registry import ClientRegistry
from functions.app.domain.errors import InvalidTargetError, TransportError
from functions.app.domain.request_dispatcher import RequestDispatcher
from functions.app.ports.http_client import HttpClientError, HttpClientTimeoutError
from tests.conftest import CountingPoolFactory, fixed_clock

BLOG = "https://blog.jepsen.ninja"


def _registry(**pool_kwargs) -> tuple[ClientRegistry, CountingPoolFactory]:
    factory = CountingPoolFactory(**pool_kwargs)
    return ClientRegistry(factory), factory


@pytest.mark.asyncio
async def test_default_client_with_absolute_path_hits_exact_url():
    registry, factory = _registry()

    result = await RequestDispatcher().get(registry.resolve(), BLOG)

    assert result.target_url == BLOG
    assert result.status_code == 200
    assert result.elapsed_milliseconds >= 0
    assert factory.pools[0].requests == [(BLOG, {})]


@pytest.mark.asyncio
async def test_named_client_prepends_base_address_and_sends_default_headers():
    registry, factory = _registry()
    registry.add_client("n", base_address="https://example.test/", headers={"User-Agent": "X"})

    result = await RequestDispatcher().get(registry.resolve("n"), "path")

    assert result.target_url == "https://example.test/path"
    url, headers = factory.pools[0].requests[0]
    assert url == "https://example.test/path"
    assert headers["User-Agent"] == "X"


@pytest.mark.asyncio
async def test_empty_path_targets_base_address():
    registry, factory = _registry()
    registry.add_client("blog", base_address=BLOG)

    result = await RequestDispatcher().get(registry.resolve("blog"), "")

    assert result.target_url == BLOG
    assert result.elapsed_milliseconds >= 0


@pytest.mark.asyncio
async def test_default_client_headers_reach_absolute_target():
    registry, factory = _registry()
    registry.add_client(None, headers={"User-Agent": "X"})

    result = await RequestDispatcher().get(registry.resolve(None), "https://example.test/path")

    assert result.target_url == "https://example.test/path"
    assert factory.pools[0].requests == [("https://example.test/path", {"User-Agent": "X"})]


@pytest.mark.asyncio
async def test_mutating_one_handles_headers_never_reaches_another_request():
    registry, factory = _registry()
    registry.add_client("n1", base_address="https://one.example", headers={"X-Client": "one"})
    registry.add_client("n2", base_address="https://two.example", headers={"X-Client": "two"})
    c1, c2 = registry.resolve("n1"), registry.resolve("n2")

    c1.headers["X-Client"] = "hijacked"
    dispatcher = RequestDispatcher()
    await dispatcher.get(c1, "/")
    await dispatcher.get(c2, "/")

    assert factory.pools[0].requests[0][1] == {"X-Client": "one"}
    assert factory.pools[1].requests[0][1] == {"X-Client": "two"}


@pytest.mark.asyncio
async def test_absolute_path_ignores_base_address():
    registry, factory = _registry()
    registry.add_client("n", base_address="https://example.test/")

    result = await RequestDispatcher().get(registry.resolve("n"), "https://other.test/x")

    assert result.target_url == "https://other.test/x"
    assert factory.pools[0].requests[0][0] == "https://other.test/x"


@pytest.mark.asyncio
async def test_relative_path_without_base_address_is_invalid_target():
    registry, factory = _registry()

    with pytest.raises(InvalidTargetError):
        await RequestDispatcher().get(registry.resolve(), "relative/path")

    assert factory.pools[0].requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [301, 404, 500, 503])
async def test_http_error_statuses_are_returned_not_raised(status_code):
    registry, _ = _registry(status_code=status_code)

    result = await RequestDispatcher().get(registry.resolve(), BLOG)

    assert result.status_code == status_code
    assert result.is_success is False
    assert result.summary() == f"{BLOG} returned {status_code} in {result.elapsed_milliseconds}ms."


@pytest.mark.asyncio
async def test_connection_failure_raises_transport_error_with_cause():
    cause = HttpClientError("connection refused")
    registry, _ = _registry(raise_on_get=cause)

    with pytest.raises(TransportError) as excinfo:
        await RequestDispatcher().get(registry.resolve(), "http://127.0.0.1:1/")

    assert excinfo.value.cause is cause
    assert excinfo.value.target_url == "http://127.0.0.1:1/"


@pytest.mark.asyncio
async def test_timeout_is_a_transport_error():
    registry, _ = _registry(raise_on_get=HttpClientTimeoutError("timed out"))

    with pytest.raises(TransportError):
        await RequestDispatcher().get(registry.resolve(), BLOG)


@pytest.mark.asyncio
async def test_body_read_failure_raises_transport_error():
    registry, _ = _registry(raise_on_read=HttpClientError("reset by peer"))

    with pytest.raises(TransportError):
        await RequestDispatcher().get(registry.resolve(), BLOG)


@pytest.mark.asyncio
async def test_pool_rejecting_url_is_invalid_target():
    registry, _ = _registry(raise_on_get=ValueError("bad url"))

    with pytest.raises(InvalidTargetError):
        await RequestDispatcher().get(registry.resolve(), "http://[::1")


@pytest.mark.asyncio
async def test_elapsed_is_measured_in_whole_milliseconds():
    registry, _ = _registry()
    dispatcher = RequestDispatcher(clock=fixed_clock(10.0, 10.25))

    result = await dispatcher.get(registry.resolve(), BLOG)

    assert result.elapsed_milliseconds == 250
    assert result.summary() == f"{BLOG} returned 200 in 250ms."


@pytest.mark.asyncio
async def test_clock_going_backwards_clamps_to_zero():
    registry, _ = _registry()
    dispatcher = RequestDispatcher(clock=fixed_clock(5.0, 4.0))

    result = await dispatcher.get(registry.resolve(), BLOG)

    assert result.elapsed_milliseconds == 0


@pytest.mark.asyncio
async def test_default_headers_win_over_per_request_headers_and_do_not_leak():
    registry, factory = _registry()
    registry.add_client("n", base_address=BLOG, headers={"User-Agent": "Default"})
    client = registry.resolve("n")
    dispatcher = RequestDispatcher()

    await dispatcher.get(client, "/a", headers={"user-agent": "Override", "X-Trace": "1"})
    await dispatcher.get(client, "/b")

    first, second = factory.pools[0].requests
    assert first[1] == {"X-Trace": "1", "User-Agent": "Default"}
    assert second[1] == {"User-Agent": "Default"}
    assert client.headers == {"User-Agent": "Default"}


@pytest.mark.asyncio
async def test_result_carries_body_final_url_and_content_type():
    registry, _ = _registry(headers={"Content-Type": "image/png"}, body=b"\x89PNG")

    result = await RequestDispatcher().get(registry.resolve(), BLOG)

    assert result.content == b"\x89PNG"
    assert result.content_type == "image/png"
    assert result.final_url == BLOG


@pytest.mark.asyncio
async def test_result_headers_are_read_only_and_result_is_hashable():
    registry, _ = _registry(headers={"Content-Type": "text/html"})

    result = await RequestDispatcher().get(registry.resolve(), BLOG)

    with pytest.raises(TypeError):
        result.headers["Content-Type"] = "text/plain"
    assert result.headers["Content-Type"] == "text/html"
    assert hash(result) == hash(result)
    assert {result: 1}[result] == 1
