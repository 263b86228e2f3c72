#!/usr/bin/env python3
"""
Main entry point for the link shortener service.

Concurrency: requests are served by one async worker process (FastAPI on
uvicorn). The link store lives in this process's memory, so the service is
not meant to run with several workers against one snapshot file.

Usage:
    python app.py

Environment variables:
    DATA_FILE - Path of the JSON snapshot (default data/links.json)
    AUTOSAVE_INTERVAL_SECONDS - Background save period (default 30)
    BASE_URL - Base URL for short links
    PORT - Port to listen on (default 8974)
    MAX_COLLISION_RETRIES - Extra attempts on short code collision; negative overwrites
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from linkstore.persistence import SnapshotFile, AutosaveWorker
from linkstore.service import LinkShortenerService
from linkstore.shortcode import ShortCodeGenerator
from linkstore.store import LinkStore
from linkstore.common.logging_config import setup_logging
from web_app import create_app


def build_service(config, logger) -> LinkShortenerService:
    """Build the store from its snapshot and wrap it in a service."""
    store = LinkStore(
        snapshot=SnapshotFile(config.data_file),
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        logger=logger,
        max_collision_retries=config.max_collision_retries,
    )
    store.load()

    autosave = AutosaveWorker(
        save=store.persist,
        interval_seconds=config.autosave_interval_seconds,
        logger=logger,
    )
    return LinkShortenerService(store=store, autosave=autosave, logger=logger)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting link shortener service...")

    service = build_service(config, logger)
    await service.start()
    app.state.service = service

    logger.info("Service started successfully")

    # Yield control to the application
    yield

    # Shutdown
    logger.info("Shutting down link shortener service...")
    await service.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    # Load configuration
    config = load_config()

    # Setup logging
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Link Shorter Service")
    logger.info(f"Configuration: {config.model_dump()}")
    logger.info(f"My links: /my, statistics: /stats, top: /top, snapshot: {config.data_file}")

    # Create FastAPI app; the service is attached by the lifespan
    app = create_app(
        service_instance=None,
        config=config,
    )

    # Store config and logger in app state
    app.state.config = config
    app.state.logger = logger

    # Override lifespan
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=False,
    )

    server = uvicorn.Server(uvicorn_config)

    # Setup signal handlers for graceful shutdown
    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    # Run server
    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
