"""
Playlist building and shared playback state.
"""

from .cancellation import (
    CancellationToken,
    ListingCancelled,
    ListingTimedOut,
    listing_cancellation,
)
from .models import ObjectInfo, PlaylistEntry
from .playlist import BadRequestError, ObjectStore, PlaylistBuilder, build_playlist, presign_one
from .state import PlaybackState

__all__ = [
    "CancellationToken",
    "ListingCancelled",
    "ListingTimedOut",
    "listing_cancellation",
    "ObjectInfo",
    "PlaylistEntry",
    "BadRequestError",
    "ObjectStore",
    "PlaylistBuilder",
    "build_playlist",
    "presign_one",
    "PlaybackState",
]
