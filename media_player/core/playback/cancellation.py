"""
Cancellation for lazy storage listings.

A listing runs in a worker thread and produces objects page by page.
The request handler owns a CancellationToken for the lifetime of the
request; cancelling it makes the listing stop at the next object.
"""

import threading
from contextlib import contextmanager
from typing import Iterator


class ListingCancelled(Exception):
    """Raised by a listing when its token was cancelled before it finished."""
    pass


class ListingTimedOut(ListingCancelled):
    """Raised by a listing that was cancelled because it ran out of time."""
    pass


class CancellationToken:
    """Thread-safe, one-way cancellation flag."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._timed_out = False

    def cancel(self, timed_out: bool = False) -> None:
        # First cancellation wins; the reason is fixed from then on.
        if not self._event.is_set():
            self._timed_out = timed_out
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def timed_out(self) -> bool:
        return self._event.is_set() and self._timed_out

    def raise_if_cancelled(self) -> None:
        if not self._event.is_set():
            return
        if self._timed_out:
            raise ListingTimedOut("Storage request timed out")
        raise ListingCancelled("Listing cancelled")


@contextmanager
def listing_cancellation() -> Iterator[CancellationToken]:
    """
    Provide a token that is cancelled when the block exits.

    The token is released on every exit path, including exceptions and
    task cancellation, so a listing never outlives its request.
    """
    token = CancellationToken()
    try:
        yield token
    finally:
        token.cancel()
