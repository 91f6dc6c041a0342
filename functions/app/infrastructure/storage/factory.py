"""Blob storage factory: selects and assembles storage adapters."""
from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorGridFSBucket

from functions.app.config.settings import Settings
from functions.app.infrastructure.storage.inmemory.in_memory_storage import InMemoryBlobStorage
from functions.app.infrastructure.storage.mongo.connection import create_mongo_client
from functions.app.infrastructure.storage.mongo.gridfs_storage import GridFSBlobStorage
from functions.app.ports.blob_storage import BlobStorage


async def create_blob_storage(settings: Settings) -> BlobStorage:
    """Select storage adapter from configuration and return port type."""
    backend = settings.storage_backend.strip().lower()

    if backend == "inmemory":
        return InMemoryBlobStorage()

    if backend in ("gridfs", "mongo"):
        mongo_client = await create_mongo_client(settings)
        bucket = AsyncIOMotorGridFSBucket(
            mongo_client[settings.database_name],
            bucket_name=settings.database_bucket,
        )
        return GridFSBlobStorage(bucket, client=mongo_client)

    raise ValueError(f"Unsupported storage backend: {backend}")
