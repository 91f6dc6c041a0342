"""Process-wide loguru setup for the host entry points."""
from __future__ import annotations

import sys

from loguru import logger

from functions.app.config.settings import Settings


def configure_logging(settings: Settings) -> int:
    """Replace loguru's default handler with a single stderr sink. Returns the handler id."""
    logger.remove()
    return logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        serialize=settings.log_serialize,
        backtrace=False,
        diagnose=False,
    )
