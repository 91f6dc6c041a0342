"""MongoDB GridFS implementation of BlobStorage."""
from __future__ import annotations

import inspect
from typing import Any, BinaryIO

from gridfs.errors import NoFile
from motor.motor_asyncio import AsyncIOMotorGridFSBucket

from functions.app.domain.errors import StorageWriteError


class GridFSBlobStorage:
    """Stores each blob as a GridFS file named by its key; a new write replaces older revisions."""

    def __init__(self, bucket: AsyncIOMotorGridFSBucket, *, client: Any | None = None) -> None:
        self._bucket = bucket
        self._client = client

    async def write(self, key: str, stream: BinaryIO, *, content_type: str | None = None) -> None:
        metadata = {"contentType": content_type} if content_type else None
        try:
            file_id = await self._bucket.upload_from_stream(key, stream, metadata=metadata)
            async for stale in self._bucket.find({"filename": key, "_id": {"$ne": file_id}}):
                await self._bucket.delete(stale._id)
        except Exception as exc:
            raise StorageWriteError(key, exc) from exc

    async def read(self, key: str) -> bytes | None:
        try:
            grid_out = await self._bucket.open_download_stream_by_name(key)
        except NoFile:
            return None
        return await grid_out.read()

    async def close(self) -> None:
        """Close underlying Mongo client when owned by this adapter."""
        if self._client is not None:
            res = self._client.close()
            if inspect.isawaitable(res):
                await res
