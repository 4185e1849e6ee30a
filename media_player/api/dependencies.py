"""
FastAPI dependency injection.

The application factory builds one storage client and one PlaybackState
and keeps them on app.state. Dependencies hand them to route handlers,
so routes never reach for module-level globals and tests can inject
fakes through create_app().
"""

import logging
from typing import Annotated

from fastapi import Depends, Request

from ..config.settings import Settings
from ..core.playback.state import PlaybackState
from ..infrastructure.storage.client import StorageClient

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Provide the settings the application was built with."""
    return request.app.state.settings


def get_storage_client(request: Request) -> StorageClient:
    """
    Provide the shared storage client.

    boto3 clients are thread-safe, so one instance serves every request.
    """
    return request.app.state.storage_client


def get_playback_state(request: Request) -> PlaybackState:
    """Provide the process-wide playback state."""
    return request.app.state.playback_state


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
StorageClientDep = Annotated[StorageClient, Depends(get_storage_client)]
PlaybackStateDep = Annotated[PlaybackState, Depends(get_playback_state)]
