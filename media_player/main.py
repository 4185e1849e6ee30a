"""
FastAPI application entry point.

This module creates and configures the FastAPI application. The
application factory (create_app) is the composition root: it builds the
storage client and the shared playback state and hands them to the
routes through app.state.

For local development:
    STORAGE_MOCK_MODE=true BUCKET_NAME=media uvicorn media_player.main:create_app --factory --reload

For production:
    python -m media_player -b <bucket> -e https://minio.example.com:9000
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from . import __version__
from .api.errors import register_exception_handlers
from .api.routes import health, media, playlist
from .config.settings import Settings, get_settings
from .core.playback.state import PlaybackState
from .infrastructure.storage.client import StorageClient, StorageConfig, create_storage_client

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(log_file: Optional[str], level: str = "INFO") -> None:
    """
    Send logs to log_file.

    If the file cannot be opened, logs go to stdout instead.
    """
    fallback = False
    handler: logging.Handler
    if log_file:
        try:
            handler = logging.FileHandler(log_file)
        except OSError:
            handler = logging.StreamHandler(sys.stdout)
            fallback = True
    else:
        handler = logging.StreamHandler(sys.stdout)

    logging.basicConfig(
        format=LOG_FORMAT,
        level=level.upper(),
        handlers=[handler],
        force=True,
    )

    if fallback:
        logger.info("Failed to log to file, using default stdout", extra={"log_file": log_file})


def build_storage_client(settings: Settings) -> StorageClient:
    """Create the storage client described by settings."""
    config = StorageConfig(
        access_key_id=settings.access_key,
        secret_access_key=settings.secret_key,
        bucket_name=settings.bucket_name,
        endpoint_url=settings.storage_endpoint,
        region=settings.storage_region,
        secure=settings.storage_secure,
        timeout_seconds=settings.storage_timeout_seconds,
    )
    return create_storage_client(config=config, mock_mode=settings.storage_mock_mode)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown."""
    settings: Settings = app.state.settings

    logger.info(
        "Media player starting",
        extra={
            "version": __version__,
            "bucket": settings.bucket_name,
            "endpoint": settings.storage_endpoint,
            "mock_mode": settings.storage_mock_mode,
        }
    )

    yield

    logger.info("Media player shutting down")


def create_app(
    settings: Optional[Settings] = None,
    storage_client: Optional[StorageClient] = None,
) -> FastAPI:
    """
    Application factory.

    Raises ConfigError when settings are incomplete and no storage client
    was supplied. Tests pass their own settings and storage client.
    """
    if settings is None:
        settings = get_settings()

    if storage_client is None:
        settings.require_valid()
        storage_client = build_storage_client(settings)

    app = FastAPI(
        title="Media Player",
        version=__version__,
        description="Lists media in an object storage bucket, presigns downloads "
                    "and tracks what is playing.",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.storage_client = storage_client
    app.state.playback_state = PlaybackState()

    register_exception_handlers(app)

    app.include_router(playlist.router, tags=["Playlist"])
    app.include_router(media.router, prefix="/media", tags=["Playback"])
    app.include_router(health.router, prefix="/health", tags=["Health"])

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/player", StaticFiles(directory=static_dir, html=True), name="player")
    else:
        logger.warning(
            "Static directory not found, /player is not served",
            extra={"static_dir": str(static_dir)},
        )

    logger.info(
        "FastAPI application created",
        extra={"bucket": settings.bucket_name, "version": __version__},
    )

    return app
