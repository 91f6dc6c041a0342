"""Port: blob/object storage sink. Implementations live in infrastructure."""
from __future__ import annotations

from typing import BinaryIO, Protocol


class BlobStorage(Protocol):
    """Write-mostly blob sink keyed by string."""

    async def write(self, key: str, stream: BinaryIO, *, content_type: str | None = None) -> None:
        """Persist the stream under key, replacing any existing blob. Raise StorageWriteError on failure."""
        ...

    async def read(self, key: str) -> bytes | None: ...

    async def close(self) -> None:
        """Release resources (e.g. DB client). No-op allowed if nothing to close."""
        ...
