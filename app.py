#!/usr/bin/env python3
"""
Main entry point for the short link service.

Concurrency: the server handles many connections at once via async I/O
(FastAPI + asyncpg connection pool + redis.asyncio). Set SHORTLINK_WORKERS > 1
for multi-process scaling across CPU cores (each worker has its own DB pool).

Usage:
    python app.py

Environment variables (prefix SHORTLINK_):
    STORAGE_BACKEND - 'postgres' (default) or 'memory'
    DATABASE_URL - PostgreSQL connection URL
    DATABASE_CREATE_TABLES - Set to 'true' to create tables on startup
    REDIS_URL - Redis connection URL (optional)
    BASE_URL - Base URL for short links
    IDENTITY_HEADER - Header carrying the authenticated owner id
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from shortlink.config import load_config
from shortlink.database.cache import RedisCache
from shortlink.service import ShortLinkService, create_backend
from shortlink.shortcode import ShortCodeGenerator
from shortlink.common.logging_config import setup_logging
from shortlink.errors import StorageUnavailable
from shortlink_web import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the storage backend, cache and service; close them on shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting short link service...")

    logger.info(f"Using {config.storage_backend} storage")
    db = create_backend(config, logger=logger.getChild("db"))
    await db.initialize()

    # Initialize cache (optional)
    cache = None
    if config.redis_url:
        logger.info(f"Connecting to Redis at {config.redis_url}")
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger.getChild("cache"),
        )
        await cache.connect()
    else:
        logger.info("Redis caching disabled")

    service = ShortLinkService(
        db=db,
        cache=cache,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        logger=logger,
        max_collision_retries=config.max_collision_retries,
    )
    app.state.service = service

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down short link service...")
    await service.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Short Link Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url', 'redis_url'})}")

    app = create_app(service_instance=None, config=config, logger=logger)
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    # async handles many concurrent connections per worker;
    # workers > 1 runs multiple processes (each has its own DB pool).
    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=False,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except (OSError, StorageUnavailable) as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
