"""Queue trigger glue: turns broker deliveries into AvatarService calls."""
from __future__ import annotations

from dataclasses import dataclass

from aio_pika import IncomingMessage as AioPikaIncomingMessage
from loguru import logger

from functions.app.application.avatar_service import AvatarService
from functions.app.infrastructure.messaging.rabbitmq.aio_pika_message_adapter import AioPikaMessageAdapter


@dataclass
class HandlerStats:
    """Running totals for one handler. Holds no exception objects, so it stays constant in size."""

    handled: int = 0
    failed: int = 0
    last_error: str | None = None


def create_message_handler(avatar_service: AvatarService, stats: HandlerStats | None = None):
    """Create an async message handler. Failed messages are rejected without requeue (dead-lettered by the broker)."""
    stats = stats if stats is not None else HandlerStats()

    async def on_message(raw_message: AioPikaIncomingMessage) -> None:
        stats.handled += 1
        try:
            await avatar_service.process_message(AioPikaMessageAdapter(raw_message))
        except Exception as e:
            stats.failed += 1
            stats.last_error = f"{type(e).__name__}: {e}"
            logger.exception("message handling failed: {}", e)
            if not raw_message.processed:
                await raw_message.reject(requeue=False)

    return on_message
