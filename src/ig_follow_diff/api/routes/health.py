"""Health check endpoint."""

import logging

from fastapi import APIRouter, Request

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint."""
    config = request.app.state.config

    logger.debug("Health check requested")

    return {
        "status": "healthy",
        "version": config.app.version,
    }
