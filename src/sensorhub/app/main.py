from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..api.routes import bikes, data, health, session, store
from ..config import Settings, load_settings
from ..core.errors import EmptyError, FetchError, SinkError, ValidationError
from ..services.ingestion_service import IngestionService

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def _invalid_input(_: Request, exc: Exception) -> JSONResponse:
    message = str(exc) if isinstance(exc, ValidationError) else "Invalid data format"
    return _error(400, message)


async def _empty_buffer(_: Request, exc: Exception) -> JSONResponse:
    return _error(404, str(exc))


async def _upstream_failure(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return _error(500, str(exc))


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(500, "Internal server error")


def create_app(
    service: IngestionService | None = None,
    settings: Settings | None = None,
    start_poller: bool = True,
) -> FastAPI:
    settings = settings or load_settings()
    service = service or IngestionService.from_settings(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if start_poller:
            service.poller.start()
        yield
        await service.poller.stop()
        await service.buffer.wait_forwarding()

    app = FastAPI(title="Sensor Data Collection API", lifespan=lifespan)
    app.state.service = service
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ValidationError, _invalid_input)
    app.add_exception_handler(RequestValidationError, _invalid_input)
    app.add_exception_handler(EmptyError, _empty_buffer)
    app.add_exception_handler(SinkError, _upstream_failure)
    app.add_exception_handler(FetchError, _upstream_failure)
    app.add_exception_handler(Exception, _unhandled)

    app.include_router(health.router)
    app.include_router(session.router)
    app.include_router(data.router)
    app.include_router(store.router)
    app.include_router(bikes.router)
    return app
