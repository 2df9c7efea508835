#!/usr/bin/env python3
"""
Main entry point for the short-link service.

All links live in one in-memory LinkRegistry owned by the application for
the lifetime of the process, so the server always runs as a single worker.

Usage:
    python app.py

Environment variables:
    BASE_URL - Base URL for short links
    PATH_PREFIX - Optional path prefix for short links
    PORT - Port to listen on
    EVENT_SINK_URL - Remote log endpoint for link events (optional)
    EMAIL, NAME, ROLL_NO - Identity added to locally logged events
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortlinks.registry import LinkRegistry
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.events import StreamEventLogger, HttpEventLogger
from shortlinks.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    logger = app.state.logger

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down short-link service...")
    await app.state.registry.close()
    logger.info("Service stopped")


def build_app(config: Config, logger) -> FastAPI:
    """Wire the registry, event loggers and FastAPI app together."""
    event_sink = StreamEventLogger(identity=config.identity)

    if config.event_sink_url:
        logger.info(f"Forwarding link events to {config.event_sink_url}")
        event_logger = HttpEventLogger(
            sink_url=config.event_sink_url,
            timeout=config.event_sink_timeout,
        )
    else:
        logger.info("Logging link events locally")
        event_logger = event_sink

    registry = LinkRegistry(
        event_logger=event_logger,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        logger=logger.getChild("registry"),
        default_validity_minutes=config.default_validity_minutes,
        max_collision_retries=config.max_collision_retries,
    )

    app = create_app(registry=registry, event_sink=event_sink, config=config)
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    return app


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

    app = build_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
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
