"""Application lifespan: startup and shutdown.

Single place for startup/shutdown logic. The purge engine itself is
composed eagerly in create_app(); only process-level resources live here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from edgepurge.core.config import get_settings
from edgepurge.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging, yield, then close the shared HTTP client."""
    setup_logging()
    settings = get_settings()
    logger.info("%s %s starting", settings.app_name, settings.app_version)

    yield

    # ---- Shutdown ----
    http_client = getattr(app.state, "purge_http_client", None)
    if http_client is not None and getattr(app.state, "owns_http_client", False):
        http_client.close()
        app.state.purge_http_client = None
        logger.info("Purge HTTP client closed")
