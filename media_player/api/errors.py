"""
Exception handlers.

Errors go back to the player as plain text with an HTTP status:
- StorageError -> 500 with the storage error message
- BadRequestError -> 400
- ListingTimedOut -> 504
- ListingCancelled -> 499 (the client went away)
- anything else -> 500 with a generic message, full error logged
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from ..core.playback.cancellation import ListingCancelled, ListingTimedOut
from ..core.playback.playlist import BadRequestError
from ..infrastructure.storage.client import StorageError

logger = logging.getLogger(__name__)

# Non-standard, but widely used for "client closed request".
HTTP_499_CLIENT_CLOSED_REQUEST = 499


async def storage_error_handler(request: Request, exc: StorageError) -> PlainTextResponse:
    logger.error(
        "Storage error",
        extra={"path": request.url.path, "error": str(exc)},
    )
    return PlainTextResponse(str(exc), status_code=500)


async def bad_request_handler(request: Request, exc: BadRequestError) -> PlainTextResponse:
    logger.warning(
        "Bad request",
        extra={"path": request.url.path, "error": str(exc)},
    )
    return PlainTextResponse(str(exc), status_code=400)


async def listing_cancelled_handler(request: Request, exc: ListingCancelled) -> PlainTextResponse:
    logger.info("Listing cancelled", extra={"path": request.url.path})
    return PlainTextResponse(str(exc), status_code=HTTP_499_CLIENT_CLOSED_REQUEST)


async def listing_timed_out_handler(request: Request, exc: ListingTimedOut) -> PlainTextResponse:
    return PlainTextResponse(str(exc), status_code=504)


async def global_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """
    Catch-all exception handler.

    Prevents stack traces from leaking to clients. The full error is
    logged server-side.
    """
    logger.error(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error": str(exc),
        },
        exc_info=exc,
    )
    return PlainTextResponse("Internal server error", status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(BadRequestError, bad_request_handler)
    app.add_exception_handler(ListingTimedOut, listing_timed_out_handler)
    app.add_exception_handler(ListingCancelled, listing_cancelled_handler)
    app.add_exception_handler(Exception, global_exception_handler)
