"""
RabbitMQ consumer: the queue trigger of the avatar worker.

Lifecycle:
  DISCONNECTED -> CONNECTING -> CONNECTED -> READY -> CONSUMING.
  On shutdown: CLOSING -> cancel consumer, close channel/connection -> CLOSED.

Reconnection after a broker drop is handled by aio_pika's robust connection,
which restores the channel, the queue and its consumers on its own.
"""
from __future__ import annotations

import asyncio
from typing import Any

import aio_pika
from loguru import logger

from functions.app.config.settings import Settings
from functions.app.core import SERVICE_NAME
from functions.app.infrastructure.messaging.rabbitmq.constants import ConsumerState
from functions.app.ports.message_consumer import MessageHandler


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class RabbitMQConsumer:
    """MessageConsumer over a durable RabbitMQ queue with manual acks."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._state = ConsumerState.DISCONNECTED
        self._connection: aio_pika.abc.AbstractRobustConnection | None = None
        self._channel: aio_pika.abc.AbstractChannel | None = None
        self._queue: aio_pika.abc.AbstractQueue | None = None
        self._lock = asyncio.Lock()
        self._consumer_tag: str | None = None

    @property
    def state(self) -> ConsumerState:
        return self._state

    def _build_amqp_url(self) -> str:
        return (
            f"amqp://{self._settings.broker_user}:{self._settings.broker_password}"
            f"@{self._settings.broker_host}:{self._settings.broker_port}/"
        )

    async def connect(self) -> None:
        self._state = ConsumerState.CONNECTING
        _log("rmq_connecting", host=self._settings.broker_host, port=self._settings.broker_port)
        try:
            self._connection = await aio_pika.connect_robust(self._build_amqp_url())
        except Exception as exc:
            logger.warning("rmq connect failed: {}", exc)
            self._state = ConsumerState.DISCONNECTED
            raise
        self._state = ConsumerState.CONNECTED
        _log("rmq_connected")

        self._channel = await self._connection.channel()
        await self._channel.set_qos(prefetch_count=self._settings.prefetch_count)
        self._queue = await self._channel.declare_queue(self._settings.queue_name, durable=True)
        self._state = ConsumerState.READY

    async def start_consuming(self, handler: MessageHandler) -> str:
        async with self._lock:
            if self._queue is None:
                raise RuntimeError("consumer not connected")
            self._consumer_tag = await self._queue.consume(handler, no_ack=False)
            self._state = ConsumerState.CONSUMING
            _log("rmq_consuming", queue=self._settings.queue_name)
            return self._consumer_tag

    async def cancel(self, consumer_tag: str) -> None:
        async with self._lock:
            if self._queue is not None and self._consumer_tag == consumer_tag:
                await self._queue.cancel(consumer_tag)
                self._consumer_tag = None
                self._state = ConsumerState.READY

    async def close(self) -> None:
        self._state = ConsumerState.CLOSING
        _log("consumer_shutdown")
        async with self._lock:
            if self._queue is not None and self._consumer_tag is not None:
                try:
                    await self._queue.cancel(self._consumer_tag)
                except Exception as exc:
                    logger.warning("consumer cancel failed (continuing to close channel): {}", exc)
            self._queue = None
            self._consumer_tag = None
            if self._channel is not None:
                try:
                    await self._channel.close()
                except Exception as exc:
                    logger.warning("channel close failed (continuing to close connection): {}", exc)
                self._channel = None
            if self._connection is not None:
                try:
                    await self._connection.close()
                except Exception as exc:
                    logger.warning("connection close failed: {}", exc)
                self._connection = None
        self._state = ConsumerState.CLOSED
