"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (container with its
shared HTTP client, telemetry flush).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.core.container import Container
from app.shared.telemetry import get_telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the container on startup; close it and flush telemetry on exit.

    A container already present on app.state (tests) is used as is and left
    open on shutdown.
    """
    settings = get_settings()

    # ---- Startup ----
    owns_container = getattr(app.state, "container", None) is None
    if owns_container:
        app.state.container = Container.from_settings(settings)
    logger.info(
        "%s %s started (environment=%s)",
        settings.app_name,
        settings.app_version,
        settings.environment,
    )

    yield

    # ---- Shutdown ----
    if owns_container:
        await app.state.container.aclose()
        app.state.container = None
        logger.info("Container closed")

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
