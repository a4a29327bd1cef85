#!/usr/bin/env python3
"""CLI entry point for the configuration refresher"""
import argparse
import asyncio

from cloudconfig.core.config import get_settings, load_settings
from cloudconfig.core.logging import setup_logging, get_logger
from cloudconfig.main import create_refresher, run


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Remote configuration refresher")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML settings file (default: compiled-in settings)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between refresh cycles (overrides the settings file)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single refresh cycle and exit",
    )
    args = parser.parse_args()

    settings = load_settings(args.config) if args.config else get_settings()
    if args.interval is not None:
        settings = settings.model_copy(update={"refresh_interval_secs": args.interval})

    setup_logging(log_level=settings.log_level, log_file=settings.log_file)
    logger = get_logger()

    logger.info(f"Pulling configuration from {settings.config_url}")
    logger.info(f"Refresh interval: {settings.refresh_interval_secs}s, ETag commit: {settings.etag_commit}")

    refresher = create_refresher(settings)
    try:
        asyncio.run(run(refresher, settings.refresh_interval_secs, once=args.once))
    except KeyboardInterrupt:
        logger.info("Refresher stopped")


if __name__ == "__main__":
    main()
