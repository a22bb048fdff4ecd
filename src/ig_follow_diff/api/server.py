"""FastAPI server setup."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config.schema import Config

logger = logging.getLogger(__name__)


def create_app(config: Config) -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=config.app.name,
        version=config.app.version,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    app.state.config = config

    if config.api.enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.api.cors_origins or ["*"],
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    from .routes import analyze, health

    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(analyze.router, prefix="/api", tags=["analyze"])

    logger.info(
        "FastAPI application created",
        extra={"extra_fields": {"app_name": config.app.name, "version": config.app.version}},
    )

    return app
