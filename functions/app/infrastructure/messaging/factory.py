"""Message consumer factory: selects implementation from config. Only place that imports concrete consumers."""
from __future__ import annotations

from functions.app.config.settings import Settings
from functions.app.infrastructure.messaging.rabbitmq.rabbitmq_consumer import RabbitMQConsumer
from functions.app.ports.message_consumer import MessageConsumer


def create_message_consumer(settings: Settings) -> MessageConsumer:
    backend = settings.consumer_backend.strip().lower()

    if backend == "rabbitmq":
        return RabbitMQConsumer(settings)

    raise ValueError(f"Unsupported consumer backend: {backend}")
