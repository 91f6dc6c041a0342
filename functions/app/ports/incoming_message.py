"""Port: one delivery from the avatar request queue."""
from __future__ import annotations

from typing import Protocol


class IncomingMessage(Protocol):
    """A queue delivery carrying an avatar request.

    Settled exactly once: ack after the avatar is stored, reject otherwise.
    """

    @property
    def body(self) -> bytes:
        """Raw payload: a JSON object with profile_id, or a bare profile id."""
        ...

    @property
    def processed(self) -> bool:
        """True once the delivery was acked or rejected."""
        ...

    async def ack(self) -> None: ...

    async def reject(self, *, requeue: bool = False) -> None: ...
