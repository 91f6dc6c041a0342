from typing import Any

from fastapi import APIRouter, Request, Response
from loguru import logger

from functions.app.core import SERVICE_NAME

health_router = APIRouter(tags=["Health"])


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


@health_router.get(
    "/health/live",
    summary="Liveness probe",
    description="Returns 200 if the host process is running.",
    responses={200: {"description": "Service is alive."}},
)
async def live() -> dict:
    return {"status": "ok"}


@health_router.get(
    "/health/ready",
    summary="Readiness probe",
    description="Returns 200 only when the client registry and dispatcher are wired and the registry is open.",
    responses={
        200: {"description": "Registry and dispatcher are ready."},
        503: {"description": "Registry or dispatcher not ready."},
    },
)
async def ready(request: Request) -> Response:
    registry = getattr(request.app.state, "client_registry", None)
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if registry is None or dispatcher is None:
        _log("components_not_initialized")
        return Response(status_code=503, content="Not ready")
    if registry.closed:
        _log("client_registry_closed")
        return Response(status_code=503, content="Client registry closed")
    return Response(status_code=200, content="OK")
