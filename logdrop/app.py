"""
Main Application Module

This module builds the FastAPI application, configuring routes,
middleware, error handling and the storage root lifecycle.

Features:
- Route management
- CORS configuration
- Security headers
- Error handling
- Storage root creation at startup

Routes:
- GET /health
- POST /upload
- GET /download

Dependencies:
- FastAPI for routing
- CORS middleware
- Logging

Author: Logdrop Development Team
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional, Union
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .shared import config
from .shared.errors import ApiError, api_error_handler
from .shared.security import SecurityHeadersMiddleware
from .features.health import router as health_router
from .features.logs import router as logs_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage storage root lifecycle.

    Notes:
        - Creates the storage root if absent
        - Failure to create it aborts startup
    """
    storage_root = app.state.storage_root
    os.makedirs(storage_root, exist_ok=True)
    logger.info(f"Storing logs under {storage_root}")

    yield

    logger.info("Server shutting down")


def create_app(
    storage_root: Optional[Union[str, Path]] = None,
    archive_spool_bytes: Optional[int] = None
) -> FastAPI:
    """
    Create the log drop application.

    Args:
        storage_root: Directory for stored logs (defaults to config)
        archive_spool_bytes: In-memory archive threshold (defaults to config)

    Returns:
        FastAPI: Configured application
    """
    app = FastAPI(title="Logdrop", lifespan=lifespan)
    app.state.storage_root = Path(storage_root or config.STORAGE_ROOT)
    app.state.archive_spool_bytes = archive_spool_bytes or config.ARCHIVE_SPOOL_BYTES

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    app.add_exception_handler(ApiError, api_error_handler)

    app.include_router(health_router, tags=["health"])
    app.include_router(logs_router, tags=["logs"])

    return app


app = create_app()
