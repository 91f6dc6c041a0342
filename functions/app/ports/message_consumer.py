"""Port: the queue trigger that feeds deliveries to the avatar worker."""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol

# Receives the broker's own message type; adapters wrap it as IncomingMessage.
MessageHandler = Callable[[Any], Awaitable[None]]


class MessageConsumer(Protocol):
    async def connect(self) -> None:
        """Open the broker connection and declare the trigger queue."""
        ...

    async def start_consuming(self, handler: MessageHandler) -> str:
        """Deliver each message to handler with manual acknowledgement. Returns the consumer tag."""
        ...

    async def cancel(self, consumer_tag: str) -> None: ...

    async def close(self) -> None:
        """Stop consuming and release the connection. Safe to call when never connected."""
        ...
