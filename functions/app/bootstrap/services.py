"""Sample services wired by the shared setup routine."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loguru import Logger


@dataclass(frozen=True)
class AwesomeServiceOptions:
    is_awesome: bool = True


class AwesomeService:
    def __init__(self, log: "Logger", options: AwesomeServiceOptions) -> None:
        self._log = log
        self._options = options

        if not self._options.is_awesome:
            log.critical("Service is not awesome!")

    @property
    def is_awesome(self) -> bool:
        return self._options.is_awesome


class Service:
    def __init__(self, log: "Logger", awesome_service: AwesomeService) -> None:
        log.debug("Service initializing...")

        self._log = log
        self._awesome_service = awesome_service

        log.debug("Service initialized.")

    def run(self) -> str:
        line = f"IsAwesome: {self._awesome_service.is_awesome}"
        self._log.info(line)
        return line