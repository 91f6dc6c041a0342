"""In-memory blob storage for local runs and tests. Contents are lost on exit."""
from __future__ import annotations

from typing import BinaryIO

from functions.app.domain.errors import StorageWriteError


class InMemoryBlobStorage:
    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.content_types: dict[str, str | None] = {}
        self._closed = False

    async def write(self, key: str, stream: BinaryIO, *, content_type: str | None = None) -> None:
        if self._closed:
            raise StorageWriteError(key, RuntimeError("storage is closed"))
        self.blobs[key] = stream.read()
        self.content_types[key] = content_type

    async def read(self, key: str) -> bytes | None:
        return self.blobs.get(key)

    async def close(self) -> None:
        self._closed = True
