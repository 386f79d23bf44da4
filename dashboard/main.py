from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from dashboard.api import health, resources
from dashboard.core.config import APP_NAME
from dashboard.core.dependencies import get_channel_factory, get_settings
from dashboard.core.logging import configure_logging

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s on port %s", APP_NAME, settings.port)
    yield
    if get_channel_factory.cache_info().currsize:
        get_channel_factory().shutdown()


app = FastAPI(title=APP_NAME, version="1.0.0", lifespan=lifespan)
app.include_router(health.router)
app.include_router(resources.router)


def run() -> None:
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())
