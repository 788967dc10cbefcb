#!/usr/bin/env python3
"""
Process entry point for the shortlink service.

    python app.py

Settings come from the environment or `.env` (see config.py): DATABASE_URL,
REDIS_URL, BASE_URL, PORT, WORKERS, LOG_LEVEL ...

With WORKERS > 1 uvicorn forks that many processes, each building its own
app through build_app() and so its own store pool and Redis client.
"""

import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortlink.bootstrap import build_service
from shortlink.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the service on startup and close its connections on shutdown."""
    logger = app.state.logger

    service = await build_service(app.state.config, logger)
    app.state.service = service
    app.state.db = service.db
    app.state.cache = service.cache
    logger.info("shortlink ready")

    try:
        yield
    finally:
        await service.close()
        logger.info("shortlink stopped")


def build_app(config: Config = None) -> FastAPI:
    """App factory; the service itself is created in ``lifespan``."""
    config = config or load_config()
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    app = create_app(
        db_instance=None,
        cache_instance=None,
        service_instance=None,
        config=config,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan
    return app


def main() -> int:
    config = load_config()
    logger = setup_logging(level=config.log_level, log_file=config.log_file, json_format=config.log_json)
    logger.info(f"Configuration: {config.redacted_dump()}")
    logger.info(f"Listening on {config.host}:{config.port} with {config.workers} worker(s)")

    run_options = dict(
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=False,
    )

    try:
        if config.workers > 1:
            # Multi-process mode needs an import string to re-create the app per worker
            uvicorn.run("app:build_app", factory=True, workers=config.workers, **run_options)
        else:
            uvicorn.run(build_app(config), **run_options)
    except Exception as e:
        logger.error(f"Server error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
