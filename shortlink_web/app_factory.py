"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shortlink.config import Config
from shortlink.service import ShortLinkService

from .api import api_router
from .web import web_router
from .middleware.logging import LoggingMiddleware


def create_app(
    service_instance: Optional[ShortLinkService],
    config: Config,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: Service instance (may be set later from a lifespan)
        config: Configuration instance
        logger: Optional logger for request logging

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Short Links",
        description="URL shortening with per-day click analytics",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(
        LoggingMiddleware,
        logger=logger.getChild("web") if logger else None,
    )

    # API first: the redirect route matches any single path segment
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Redirect"])

    return app
