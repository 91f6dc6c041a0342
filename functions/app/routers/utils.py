from __future__ import annotations

from typing import Any

from fastapi import Request, Response
from loguru import logger

from functions.app.config.settings import Settings
from functions.app.core import SERVICE_NAME
from functions.app.domain.errors import InvalidTargetError, TransportError, UnknownClientNameError
from functions.app.domain.models import RequestResult


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


def app_settings(request: Request) -> Settings:
    """Settings from app.state, or a fresh Settings() when the app was built without a lifespan."""
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else Settings()


async def dispatch_or_error(request: Request, *, client_name: str | None, path: str) -> RequestResult | Response:
    """Resolve the client, dispatch the GET and map core errors to HTTP responses."""
    registry = getattr(request.app.state, "client_registry", None)
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if registry is None or dispatcher is None:
        _log("components_not_initialized")
        return Response(status_code=503, content="Not ready")

    try:
        client = registry.resolve(client_name)
        return await dispatcher.get(client, path)
    except UnknownClientNameError as exc:
        _log("unknown_client", client=client_name)
        return Response(status_code=404, content=str(exc))
    except InvalidTargetError as exc:
        _log("invalid_target", client=client_name, path=path)
        return Response(status_code=400, content=str(exc))
    except TransportError as exc:
        _log("transport_error", client=client_name, url=exc.target_url, error=str(exc.cause))
        return Response(status_code=502, content=str(exc))


__all__ = [
    "app_settings",
    "dispatch_or_error",
]
