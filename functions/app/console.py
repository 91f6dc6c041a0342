"""Two console apps sharing the same service setup; they differ only in the awesome flag."""
from __future__ import annotations

import sys

from loguru import logger

from functions.app.bootstrap import Service, add_required_services, add_service, create_container


def run_console_app(is_awesome: bool = True) -> str:
    container = add_service(add_required_services(create_container(), is_awesome=is_awesome, sink=sys.stderr))
    try:
        service: Service = container.service()
        return service.run()
    finally:
        container.shutdown_resources()


def _main(is_awesome: bool) -> None:
    # the container brings its own sink; drop loguru's default one to avoid duplicates
    logger.remove()
    print(run_console_app(is_awesome=is_awesome))


def app1() -> None:
    _main(is_awesome=True)


def app2() -> None:
    _main(is_awesome=False)
