"""
Domain models for the media player.

These models have no dependencies on the web framework or the storage
SDK. Storage clients translate their own listing records into ObjectInfo,
and the HTTP layer serializes PlaylistEntry.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ObjectInfo:
    """
    One object in the bucket, as reported by a listing.

    Frozen because a listing record is a snapshot. Only the key is used
    to build playlists; the rest is carried for logging and debugging.
    """
    key: str
    size: int = 0
    last_modified: Optional[datetime] = None
    etag: str = ""


@dataclass
class PlaylistEntry:
    """
    One playable item as surfaced to the browser.

    url is empty unless this is the first entry of a listing; the player
    asks for a presigned URL on demand for every other track.
    """
    key: str
    url: str = ""

    @property
    def is_presigned(self) -> bool:
        return bool(self.url)

    def to_wire(self) -> dict[str, str]:
        """Wire format expected by the player: {"Key": ..., "URL": ...}."""
        return {"Key": self.key, "URL": self.url}
