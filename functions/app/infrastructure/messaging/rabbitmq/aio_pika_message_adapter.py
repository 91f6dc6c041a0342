"""Adapter: an aio_pika delivery seen as an avatar-queue IncomingMessage."""
from __future__ import annotations

from aio_pika import IncomingMessage as AioPikaIncomingMessage


class AioPikaMessageAdapter:
    """Implements functions.app.ports.incoming_message.IncomingMessage for aio_pika."""

    def __init__(self, message: AioPikaIncomingMessage) -> None:
        self._message = message

    @property
    def body(self) -> bytes:
        return self._message.body

    @property
    def processed(self) -> bool:
        return self._message.processed

    async def ack(self) -> None:
        await self._message.ack()

    async def reject(self, *, requeue: bool = False) -> None:
        await self._message.reject(requeue=requeue)
