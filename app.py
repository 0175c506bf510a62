#!/usr/bin/env python3
"""
Main entry point for the short-link service.

All state lives in memory in this single process; links do not survive a
restart. Requests are served by uvicorn with one worker.

Usage:
    python app.py

Environment variables:
    PORT - Port to listen on
    BASE_URL - Fallback base URL for short links
    TOKEN_LENGTH - Length of generated short codes
    ALLOC_MAX_ATTEMPTS - Candidate codes tried before allocation fails
    REAPER_INTERVAL_MS - Interval between expiry sweeps
    MAX_VALIDITY_MINUTES - Longest lifetime a link may request
    LOG_LEVEL - Logging level
"""

import signal
import sys

import uvicorn

from config import Config, load_config
from shortlinks.reaper import ExpiryReaper
from shortlinks.service import LinkService
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.store.memory import InMemoryClickLog, InMemoryLinkStore
from shortlinks.common.logging_config import get_logger, setup_logging
from web_app import create_app


def build_app(config: Config):
    """Wire stores, service and reaper into a FastAPI app."""
    link_store = InMemoryLinkStore(stripes=config.lock_stripes, logger=get_logger("store"))
    click_log = InMemoryClickLog(stripes=config.lock_stripes, logger=get_logger("store"))

    service = LinkService(
        link_store=link_store,
        click_log=click_log,
        short_code_generator=ShortCodeGenerator(default_length=config.token_length),
        logger=get_logger("service"),
        enable_custom_codes=config.enable_custom_codes,
        alloc_max_attempts=config.alloc_max_attempts,
        max_validity_minutes=config.max_validity_minutes,
        default_validity_minutes=config.default_validity_minutes,
    )

    reaper = ExpiryReaper(
        link_store=link_store,
        click_log=click_log,
        interval_seconds=config.reaper_interval_seconds,
        logger=get_logger("reaper"),
    )

    return create_app(
        service_instance=service,
        config=config,
        reaper_instance=reaper,
    )


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Short-link service")
    logger.info(f"Configuration: {config.model_dump()}")

    app = build_app(config)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    # Setup signal handlers for graceful shutdown
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
