#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Concurrency: the server handles many connections on one event loop; every
store operation runs a short SQLite transaction on a worker thread, and
SQLite serializes the writers. Set WORKERS > 1 for multi-process serving; all
workers share the same database file.

Usage:
    python app.py

Environment variables:
    DATABASE_PATH - SQLite database file
    BASE_URL - Base URL for short links (derived from requests when unset)
    SESSION_SECRET - Secret for signing session cookies
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortener.database.sqlite import LinkStoreSQLite
from shortener.service import ShorteningService
from shortener.resolver import ResolutionService
from shortener.accounts import CredentialService
from shortener.shortcode import ShortCodeGenerator
from shortener.common.logging_config import setup_logging
from web_app import create_app


def build_services(config: Config, logger):
    """Create the store and the services that share it."""
    store = LinkStoreSQLite(db_config=config.database_path, logger=logger)
    generator = ShortCodeGenerator(default_length=config.short_code_length)
    shortening = ShorteningService(
        store=store,
        short_code_generator=generator,
        logger=logger,
        max_attempts=config.max_allocation_attempts,
    )
    resolution = ResolutionService(store=store, logger=logger)
    credentials = CredentialService(store=store, logger=logger, bcrypt_rounds=config.bcrypt_rounds)
    return store, shortening, resolution, credentials


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    logger = app.state.logger

    logger.info("Starting URL shortener service...")
    yield

    logger.info("Shutting down URL shortener service...")
    await app.state.shortening.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.safe_dump()}")

    logger.info(f"Opening SQLite database at {config.database_path}")
    store, shortening, resolution, credentials = build_services(config, logger)

    app = create_app(
        store=store,
        shortening_service=shortening,
        resolution_service=resolution,
        credential_service=credentials,
        config=config,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        # Request logging is done by LoggingMiddleware without client addresses
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
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
