"""
Command-line entry point.

Usage:
    python -m media_player -b <bucket> [-e <endpoint>] [-l <log file>] [-p <port>]

Credentials come from the environment (ACCESS_KEY / AWS_ACCESS_KEY /
AWS_ACCESS_KEY_ID and SECRET_KEY / AWS_SECRET_KEY / AWS_SECRET_ACCESS_KEY).
Flags override the matching environment settings.
"""

import argparse
import logging
import sys
from typing import Optional

import uvicorn

from .config.settings import ConfigError, Settings, get_settings
from .main import configure_logging, create_app

logger = logging.getLogger("media_player")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="media_player",
        description="Browser media player backed by an object storage bucket",
    )
    parser.add_argument("-b", dest="bucket_name", help="Bucket name to be used for media assets.")
    parser.add_argument("-e", dest="storage_endpoint", help="Choose a custom endpoint.")
    parser.add_argument("-l", dest="log_file", help="Set a log file.")
    parser.add_argument("-p", dest="port", type=int, help="Port to serve.")
    parser.add_argument("--host", dest="host", help="Interface to listen on.")
    parser.add_argument(
        "--mock",
        dest="storage_mock_mode",
        action="store_true",
        default=None,
        help="Serve an in-memory bucket instead of a real storage server.",
    )
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace, base: Settings) -> Settings:
    """Overlay the flags that were given on top of base."""
    overrides = {name: value for name, value in vars(args).items() if value is not None}
    return base.model_copy(update=overrides)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    settings = settings_from_args(args, get_settings())

    try:
        settings.require_valid()
    except ConfigError as e:
        sys.exit(f"media_player: {e}")

    configure_logging(settings.log_file, settings.log_level)

    app = create_app(settings)

    logger.info(
        "Starting media player, please visit your browser at "
        f"http://localhost:{settings.port}/player/index.html"
    )

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
