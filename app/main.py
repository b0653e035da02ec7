from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router
from datastore.history_buffer import build_default_history
from devices.client import build_default_device_client
from logging_config import configure_logging
from services.telemetry import build_default_service
from settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    service = build_default_service()
    logger.info(
        "Telemetry service started",
        extra={"device_url": service.client.url, "history_size": len(service.history)},
    )
    try:
        yield
    finally:
        build_default_service.cache_clear()
        build_default_history.cache_clear()
        build_default_device_client.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    settings = get_settings()
    app = FastAPI(
        title="Sensor Telemetry Dashboard",
        description="Proxies a sensor device and keeps a bounded in-memory reading history.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["GET", "DELETE"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app

app = create_app()
