"""Per-app dependency_injector containers with their own loguru sinks.

Each container carries a container_id. Loggers handed to its components are
bound to that id, and the sink attached by add_logging only receives records
carrying it, so independent containers never see each other's log output.
"""
from __future__ import annotations

import uuid
from typing import Any, Iterator

from dependency_injector import containers, providers
from loguru import logger

DEFAULT_LOG_FORMAT = "{time:HH:mm:ss.SSS} | {level: <8} | {extra[component]} | {message}"


def _component_name(component: Any) -> str:
    return getattr(component, "__name__", None) or str(component)


def _container_sink(sink: Any, *, container_id: str, level: str, format: str) -> Iterator[int]:
    handler_id = logger.add(
        sink,
        level=level,
        format=format,
        filter=lambda record: record["extra"].get("container_id") == container_id,
    )
    yield handler_id
    logger.remove(handler_id)


def create_container() -> containers.DynamicContainer:
    container = containers.DynamicContainer()
    container.container_id = providers.Object(uuid.uuid4().hex)
    return container


def add_logging(
    container: containers.DynamicContainer,
    sink: Any,
    *,
    level: str = "INFO",
    format: str = DEFAULT_LOG_FORMAT,
) -> containers.DynamicContainer:
    """Attach a sink that only receives this container's records; detached by shutdown_resources()."""
    container.log_sink = providers.Resource(
        _container_sink,
        sink,
        container_id=container.container_id,
        level=level,
        format=format,
    )
    container.init_resources()
    return container


def component_logger(container: containers.DynamicContainer, component: Any) -> providers.Callable:
    """Provider of a logger bound to this container and the given component."""
    return providers.Callable(
        logger.bind,
        container_id=container.container_id,
        component=_component_name(component),
    )
