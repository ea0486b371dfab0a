from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import SERVICE_NAME, SERVICE_VERSION, router
from app.web import router as web_router
from logging_config import configure_logging
from services.relay import Unauthorized, build_default_relay
from settings import get_settings, mask_secret

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    relay = build_default_relay()
    logger.info(
        "Environment: %s",
        "Production" if settings.is_production else "Development",
        extra={"environment": settings.environment, "port": settings.port},
    )
    logger.info("%s listening at http://%s:%s", SERVICE_NAME, settings.host, settings.port)
    logger.info("Local access URL: http://localhost:%s", settings.port)
    logger.info("API Key: %s", mask_secret(relay.api_key))
    logger.info("Device ID: %s", relay.device_id)
    logger.info("Server ready to receive real sensor data")
    try:
        yield
    finally:
        logger.info("Shutting down server...")


async def handle_unauthorized(_request: Request, exc: Unauthorized) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": exc.message})


def create_app() -> FastAPI:
    configure_logging()
    settings = get_settings()
    app = FastAPI(
        title=SERVICE_NAME,
        description="Relays the latest temperature, humidity and sound reading from one device to its clients.",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_exception_handler(Unauthorized, handle_unauthorized)
    app.include_router(router)
    app.include_router(web_router)
    return app


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        workers=1,
        log_config=None,
        log_level=settings.log_level.lower(),
    )


app = create_app()


if __name__ == "__main__":
    run()
