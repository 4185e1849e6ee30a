"""
Playlist building and on-demand URL signing.

The player loads the whole bucket as one playlist. Only the first entry
is presigned up front; presigning hundreds of objects for a large bucket
would be slow and mostly wasted, so the player asks for a URL per track
when the user selects it (see presign_one).

Nothing here checks that a requested object belongs to the playlist.
Any object name can be signed.
"""

import logging
from typing import Iterator, Optional, Protocol

from .cancellation import CancellationToken
from .models import ObjectInfo, PlaylistEntry

logger = logging.getLogger(__name__)


class BadRequestError(ValueError):
    """Raised when a caller omits a required value."""
    pass


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class ObjectStore(Protocol):
    """
    The storage operations the playlist needs.

    Both calls block on network I/O; callers in async code must run them
    in a worker thread. Failures surface as StorageError.
    """

    def list_objects(
        self,
        prefix: str = "",
        recursive: bool = True,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Iterator[ObjectInfo]:
        """Lazily list objects in bucket order."""
        ...

    def presign_get(self, key: str, expiry_seconds: int) -> str:
        """Return a time-limited download URL for one object."""
        ...


# ---------------------------------------------------------------------------
# Playlist Builder
# ---------------------------------------------------------------------------

class PlaylistBuilder:
    """
    Turns a bucket listing into an ordered playlist.

    Stateless beyond its dependencies; each build() call performs a fresh
    listing.
    """

    def __init__(self, storage: ObjectStore, presign_ttl_seconds: int) -> None:
        self._storage = storage
        self._presign_ttl_seconds = presign_ttl_seconds

    def build(
        self,
        cancel_token: Optional[CancellationToken] = None,
        prefix: str = "",
        recursive: bool = True,
    ) -> list[PlaylistEntry]:
        """
        List the bucket and return one entry per object.

        Entries keep the order the storage backend produced them in.
        Any listing or signing error propagates and the partial playlist
        is discarded.
        """
        entries: list[PlaylistEntry] = []

        for info in self._storage.list_objects(
            prefix=prefix,
            recursive=recursive,
            cancel_token=cancel_token,
        ):
            entry = PlaylistEntry(key=info.key)
            if not entries:
                entry.url = self._storage.presign_get(info.key, self._presign_ttl_seconds)
            entries.append(entry)

        logger.info(
            "Built playlist",
            extra={"entries": len(entries), "prefix": prefix, "recursive": recursive},
        )

        return entries


def build_playlist(
    storage: ObjectStore,
    presign_ttl_seconds: int,
    cancel_token: Optional[CancellationToken] = None,
    prefix: str = "",
    recursive: bool = True,
) -> list[PlaylistEntry]:
    """Convenience wrapper around PlaylistBuilder.build."""
    builder = PlaylistBuilder(storage, presign_ttl_seconds)
    return builder.build(cancel_token=cancel_token, prefix=prefix, recursive=recursive)


def presign_one(storage: ObjectStore, object_name: str, presign_ttl_seconds: int) -> str:
    """
    Presign a single object picked by the player.

    The name is validated before the storage client is touched.
    """
    if not object_name:
        raise BadRequestError("No object name set, invalid request.")

    return storage.presign_get(object_name, presign_ttl_seconds)
