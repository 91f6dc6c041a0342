from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse

from functions.app.routers.utils import app_settings, dispatch_or_error
from functions.app.schemas.probe import ProbeResponse

http_trigger_router = APIRouter(prefix="/api", tags=["Functions"])


@http_trigger_router.get(
    "/HttpTriggerFunction_InjectedClient",
    summary="GET through the default client",
    description="Dispatches a GET to INJECTED_CLIENT_URL with the default (unnamed) client and reports status and timing.",
    response_class=PlainTextResponse,
)
async def injected_client(request: Request) -> Response:
    outcome = await dispatch_or_error(request, client_name=None, path=app_settings(request).injected_client_url)
    if isinstance(outcome, Response):
        return outcome
    return PlainTextResponse(outcome.summary())


@http_trigger_router.get(
    "/HttpTriggerFunction_NamedHttpClient",
    summary="GET through the named blog client",
    description="Dispatches a GET to the blog client's base address; the client's default headers are applied.",
    response_class=PlainTextResponse,
)
async def named_http_client(request: Request) -> Response:
    outcome = await dispatch_or_error(request, client_name=app_settings(request).blog_client_name, path="")
    if isinstance(outcome, Response):
        return outcome
    return PlainTextResponse(outcome.summary())


@http_trigger_router.get(
    "/probe",
    summary="GET through any registered client",
    responses={
        200: {"description": "Request dispatched; status_code is the upstream status."},
        400: {"description": "Path cannot be turned into an absolute URL."},
        404: {"description": "Unknown client name."},
        502: {"description": "Upstream unreachable."},
    },
)
async def probe(request: Request, client: str | None = None, path: str = "") -> Response:
    outcome = await dispatch_or_error(request, client_name=client, path=path)
    if isinstance(outcome, Response):
        return outcome
    return Response(
        status_code=200,
        media_type="application/json",
        content=ProbeResponse(
            client=client,
            target_url=outcome.target_url,
            final_url=outcome.final_url,
            status_code=outcome.status_code,
            elapsed_milliseconds=outcome.elapsed_milliseconds,
        ).model_dump_json(),
    )
