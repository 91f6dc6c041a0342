"""Mongo client connection helper (provider-specific infrastructure)."""
from __future__ import annotations

import inspect
from typing import Any

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient

from functions.app.config.settings import Settings
from functions.app.core import SERVICE_NAME


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _build_mongo_uri(settings: Settings) -> str:
    user, password = settings.database_user, settings.database_password
    if user and password:
        return f"mongodb://{user}:{password}@{settings.database_host}:{settings.database_port}"
    return f"mongodb://{settings.database_host}:{settings.database_port}"


async def create_mongo_client(settings: Settings) -> AsyncIOMotorClient:
    """Connect to Mongo and return a live client. Reconnection is left to the driver."""
    _log("mongo_connecting", host=settings.database_host, port=settings.database_port)
    mongo_client = AsyncIOMotorClient(
        _build_mongo_uri(settings),
        serverSelectionTimeoutMS=settings.database_connection_timeout_ms,
    )
    try:
        await mongo_client.admin.command("ping")
    except Exception as exc:
        logger.warning("mongo connect failed: {}", exc)
        res = mongo_client.close()
        if inspect.isawaitable(res):
            await res
        raise
    _log("mongo_connected")
    return mongo_client
