"""Queue-triggered avatar worker entry point."""
from __future__ import annotations

import asyncio
import signal
from typing import Any

from loguru import logger

from functions.app.composition import create_worker_dependencies
from functions.app.config.settings import Settings
from functions.app.core import SERVICE_NAME
from functions.app.core.logging import configure_logging
from functions.app.messaging.consumer import HandlerStats, create_message_handler


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


async def run_worker(settings: Settings | None = None) -> None:
    dependencies = create_worker_dependencies(settings)
    stats = HandlerStats()
    shutdown = asyncio.Event()

    def request_shutdown() -> None:
        if not shutdown.is_set():
            _log("shutdown_signal")
            shutdown.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, request_shutdown)
        except NotImplementedError:
            pass

    try:
        await dependencies.connect()
        await dependencies.message_consumer.start_consuming(
            create_message_handler(dependencies.avatar_service, stats),
        )
        _log("worker_started", queue=dependencies.settings.queue_name)
        await shutdown.wait()
    finally:
        await dependencies.close()
        _log("worker_stopped", handled_messages=stats.handled, failed_messages=stats.failed)


def main() -> None:
    settings = Settings()
    configure_logging(settings)
    try:
        asyncio.run(run_worker(settings))
    except KeyboardInterrupt:
        _log("worker_interrupted")
    except Exception as e:
        logger.exception("worker failed: {}", e)
        raise


if __name__ == "__main__":
    main()
