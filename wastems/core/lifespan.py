"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring: document store, schema seeding
and the uptime clock used by /api/health.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from wastems.core.config import get_settings
from wastems.infrastructure.firebase import (
    close_document_store,
    get_document_store,
    init_document_store,
)
from wastems.infrastructure.services import SchemaBootstrapService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: document store, then schema seeding (failures are logged and
    startup continues). Shutdown: close the store's connection pool.
    """
    settings = get_settings()
    app.state.started_at = time.monotonic()

    # ---- Startup ----
    if init_document_store():
        await SchemaBootstrapService(get_document_store(), settings).initialize_schema()
    else:
        logger.error(
            "Document store not initialized (backend=%s); store-backed routes will fail",
            settings.database_backend,
        )

    yield

    # ---- Shutdown ----
    await close_document_store()
