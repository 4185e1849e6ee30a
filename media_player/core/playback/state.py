"""
Shared "currently playing" state.

One value for the whole process: every connected browser sees the same
selection. The state is owned by the application and injected into the
request handlers.

Thread-safe: handlers may run concurrently, so every read and write goes
through a single lock.
"""

import threading


class PlaybackState:
    """
    The media key currently playing.

    An empty string means nothing is playing. Keys are not checked
    against the bucket.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current_key = ""

    def get(self) -> str:
        """Return the current key, or "" when nothing is playing."""
        with self._lock:
            return self._current_key

    def set(self, key: str) -> str:
        """
        Mark key as playing.

        An empty key leaves the state unchanged. Returns the key passed in.
        """
        if key:
            with self._lock:
                self._current_key = key
        return key

    def clear(self) -> None:
        """Reset to nothing playing."""
        with self._lock:
            self._current_key = ""

    @property
    def is_playing(self) -> bool:
        return bool(self.get())
