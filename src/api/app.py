"""Construcción de la app FastAPI.

No hay instancia global: `create_app` recibe la configuración (y opcionalmente
la factory de clientes HTTP) y devuelve una app lista para `uvicorn`.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adapters.http_client import ClientFactory, client_factory_for, describe_http_error
from api import routes
from core.config import AppSettings

logger = logging.getLogger(__name__)


def create_app(
    settings: AppSettings | None = None,
    *,
    client_factory: ClientFactory | None = None,
) -> FastAPI:
    settings = settings or AppSettings()

    app = FastAPI(title="Roblox Gamepass Fetcher", version="1.0.0")
    app.state.settings = settings
    app.state.client_factory = client_factory or client_factory_for(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s: %s", request.url.path, describe_http_error(exc))
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": describe_http_error(exc)},
        )

    app.include_router(routes.router)
    return app


def serve(settings: AppSettings | None = None) -> None:
    """Arranca uvicorn con la app construida para `settings`."""

    import uvicorn  # noqa: PLC0415

    settings = settings or AppSettings()
    app = create_app(settings)
    logger.info("Server running on http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
