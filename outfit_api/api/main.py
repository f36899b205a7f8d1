"""FastAPI entrypoint and HTTP routes."""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from outfit_api.config.settings import Settings, get_settings
from outfit_api.metrics.prometheus_exporter import outfit_generation_failures_total, render_latest
from outfit_api.monitoring.logging import configure_logging, install_loop_supervisor
from outfit_api.services.errors import (
    InternalError,
    InvalidInput,
    OutfitServiceError,
    PayloadTooLarge,
    utc_timestamp,
)
from outfit_api.services.outfit import OutfitService, timeout_error

logger = logging.getLogger(__name__)

PLATFORM = "fastapi"


def _error_response(error: OutfitServiceError) -> JSONResponse:
    outfit_generation_failures_total.labels(error=type(error).__name__).inc()
    return JSONResponse(status_code=error.status_code, content=error.payload())


async def _read_body(request: Request, settings: Settings) -> Any:
    limit = settings.max_body_bytes
    too_large = PayloadTooLarge("El cuerpo de la solicitud es demasiado grande", limit=limit)

    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise too_large

    raw = bytearray()
    async for chunk in request.stream():
        raw.extend(chunk)
        if len(raw) > limit:
            raise too_large
    try:
        return json.loads(bytes(raw) or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidInput("JSON inválido", received=0) from exc


def create_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Initialise the FastAPI application.

    ``transport`` replaces the network layer of the outbound Messages API
    client; tests use it to mock the upstream service.
    """

    settings = settings or get_settings()
    service = OutfitService(settings, transport=transport)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings)
        install_loop_supervisor()
        logger.info("Outfit API listening on port %s", settings.port)
        yield

    app = FastAPI(
        title="Outfit API",
        version="0.1.0",
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings

    @app.get("/", tags=["system"])
    async def service_info() -> dict[str, Any]:
        """Service identity used by platform health checks."""

        return {
            "message": "Outfit API",
            "status": "running",
            "platform": PLATFORM,
            "endpoints": {
                "test": "GET /api/claude",
                "generate": "POST /api/claude",
            },
            "timestamp": utc_timestamp(),
        }

    @app.get("/api/claude", tags=["system"])
    async def connectivity_echo() -> dict[str, Any]:
        return {
            "message": "API funcionando correctamente",
            "timestamp": utc_timestamp(),
            "status": "ok",
            "platform": PLATFORM,
            "port": settings.port,
        }

    @app.post("/api/claude", tags=["outfits"])
    async def generate_outfit(request: Request) -> JSONResponse:
        """Pick a top, bottom and shoes from the posted wardrobe."""

        try:
            body = await _read_body(request, settings)
            result = await service.generate(body)
        except OutfitServiceError as exc:
            return _error_response(exc)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.exception("Outfit generation aborted by deadline")
            return _error_response(timeout_error(settings))
        except Exception as exc:
            logger.exception("Unexpected error during outfit generation")
            return _error_response(InternalError("Error interno del servidor", message=str(exc)))
        return JSONResponse(content=result)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        payload, content_type = render_latest()
        return Response(content=payload, media_type=content_type)

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn using the environment configuration."""

    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
