"""Shared setup routine reused by every console app."""
from __future__ import annotations

import sys
from typing import Any

from dependency_injector import containers, providers

from functions.app.bootstrap.container import add_logging, component_logger
from functions.app.bootstrap.services import AwesomeService, AwesomeServiceOptions, Service


def configure(
    container: containers.DynamicContainer,
    options: AwesomeServiceOptions,
    *,
    sink: Any = sys.stderr,
    level: str = "DEBUG",
) -> containers.DynamicContainer:
    """Attach logging, register the options and the service that reads them; return the container.

    The sink goes first so the critical record AwesomeService may emit while
    being constructed has somewhere to land.
    """
    add_logging(container, sink, level=level)
    container.options = providers.Object(options)
    container.awesome_service = providers.Singleton(
        AwesomeService,
        log=component_logger(container, AwesomeService),
        options=container.options,
    )
    return container


def add_required_services(
    container: containers.DynamicContainer,
    is_awesome: bool = True,
    *,
    sink: Any = sys.stderr,
    level: str = "DEBUG",
) -> containers.DynamicContainer:
    return configure(container, AwesomeServiceOptions(is_awesome=is_awesome), sink=sink, level=level)


def add_service(container: containers.DynamicContainer) -> containers.DynamicContainer:
    """Register Service as a factory: a new instance per call, sharing the AwesomeService singleton."""
    container.service = providers.Factory(
        Service,
        log=component_logger(container, Service),
        awesome_service=container.awesome_service,
    )
    return container
