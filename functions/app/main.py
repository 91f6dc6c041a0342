from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI
from loguru import logger

from functions.app.composition import create_function_dependencies
from functions.app.config.settings import Settings
from functions.app.core import SERVICE_NAME
from functions.app.core.logging import configure_logging
from functions.app.routers.health import health_router
from functions.app.routers.http_trigger import http_trigger_router


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()
    configure_logging(settings)
    _log("host_starting")
    dependencies = create_function_dependencies(settings)
    await dependencies.connect()

    app.state.settings = settings
    app.state.client_registry = dependencies.registry
    app.state.dispatcher = dependencies.dispatcher
    try:
        yield
    finally:
        _log("host_stopping")
        await dependencies.close()


app = FastAPI(
    title="Jepsen Functions",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(http_trigger_router)


def main() -> None:
    settings = Settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
