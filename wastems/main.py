"""FastAPI application entry point.

Wiring only: logging, lifespan, exception handlers, middleware, routers.
See wastems.core.lifespan and wastems.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before calling create_app().
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from wastems.api.router import api_router
from wastems.core.config import get_settings
from wastems.core.exception_handlers import register_exception_handlers
from wastems.core.lifespan import create_lifespan
from wastems.core.limiter import limiter
from wastems.frontend import register_frontend
from wastems.middleware import (
    RequestIDMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)
from wastems.shared.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.limiter = limiter
    register_exception_handlers(app)

    # Middleware: last added = outermost. Request order: size limit → request ID →
    # security headers → CORS → rate limit → route.
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_body_size)

    app.include_router(api_router, prefix="/api")

    if settings.is_production:
        register_frontend(app, settings.static_dir)

    return app


app = create_app()


def run() -> None:
    """Serve with uvicorn; does nothing on serverless hosts, which import app directly."""
    settings = get_settings()
    if settings.vercel:
        logger.info("VERCEL is set; not binding a socket")
        return
    import uvicorn

    logger.info("Server running on port %d", settings.port)
    logger.info("Health check: http://localhost:%d/api/health", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
