"""Queue-triggered avatar fetch: resolve the avatar client, GET the image, write it to blob storage.

The avatar client comes from the shared registry, so every message reuses the
same connection pool. Failures are surfaced to the caller; nothing is retried.
"""
from __future__ import annotations

import io
import json
import mimetypes
from typing import Any
from urllib.parse import quote

from loguru import logger

from functions.app.core import SERVICE_NAME
from functions.app.domain.client_registry import ClientRegistry
from functions.app.domain.errors import AvatarNotFoundError
from functions.app.domain.models import AvatarRequest, StoredAvatar
from functions.app.domain.request_dispatcher import RequestDispatcher
from functions.app.ports.blob_storage import BlobStorage
from functions.app.ports.incoming_message import IncomingMessage

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _id_field(value: Any) -> str:
    # null, bools and nested values count as missing
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return ""
    return str(value).strip()


def parse_avatar_message(raw_body: bytes) -> AvatarRequest:
    """Accept a JSON object with profile_id (and optional request_id) or a bare profile id string."""
    text = raw_body.decode("utf-8").strip()
    profile_id, request_id = text, ""
    if text.startswith(("{", "[")):
        body = json.loads(text)
        if not isinstance(body, dict):
            raise ValueError("message must be a JSON object or a plain profile id")
        profile_id = _id_field(body.get("profile_id"))
        request_id = _id_field(body.get("request_id"))
    if not profile_id:
        raise ValueError("message missing required field: profile_id")
    return AvatarRequest(profile_id=profile_id, request_id=request_id)


def blob_extension(content_type: str) -> str:
    return mimetypes.guess_extension(content_type) or ".bin"


class AvatarService:
    def __init__(
        self,
        registry: ClientRegistry,
        dispatcher: RequestDispatcher,
        storage: BlobStorage,
        *,
        client_name: str,
        path_template: str = "{profile_id}.png",
        blob_prefix: str = "avatars/",
    ) -> None:
        self._registry = registry
        self._dispatcher = dispatcher
        self._storage = storage
        self._client_name = client_name
        self._path_template = path_template
        self._blob_prefix = blob_prefix

    async def process_message(self, message: IncomingMessage) -> StoredAvatar:
        request = parse_avatar_message(message.body)
        _log("avatar_message_received", profile_id=request.profile_id, request_id=request.request_id)

        stored = await self.fetch_and_store(request)
        await message.ack()
        _log(
            "avatar_stored",
            profile_id=request.profile_id,
            request_id=request.request_id,
            key=stored.key,
            size=stored.size,
        )
        return stored

    async def fetch_and_store(self, request: AvatarRequest) -> StoredAvatar:
        safe_id = quote(request.profile_id, safe="")
        client = self._registry.resolve(self._client_name)
        result = await self._dispatcher.get(client, self._path_template.format(profile_id=safe_id))
        if not result.is_success:
            raise AvatarNotFoundError(request.profile_id, result.status_code)

        content_type = (result.content_type or DEFAULT_CONTENT_TYPE).split(";")[0].strip().lower()
        key = f"{self._blob_prefix}{safe_id}{blob_extension(content_type)}"
        await self._storage.write(key, io.BytesIO(result.content), content_type=content_type)
        return StoredAvatar(
            key=key,
            source_url=result.final_url,
            content_type=content_type,
            size=len(result.content),
        )
