"""
Playlist API endpoints.

- GET /list/v1: the whole bucket as a playlist, first entry presigned
- GET /getpresign/v1: presigned URL for one object, fetched by the player
  when the user picks a track

Storage calls block on network I/O, so they run in the worker thread
pool and never stall the event loop.
"""

import asyncio
import logging

from fastapi import APIRouter, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse

from ...core.playback.cancellation import CancellationToken, listing_cancellation
from ...core.playback.playlist import PlaylistBuilder, presign_one
from ..dependencies import SettingsDep, StorageClientDep

logger = logging.getLogger(__name__)

router = APIRouter()

DISCONNECT_POLL_SECONDS = 0.5


async def watch_listing(request: Request, token: CancellationToken, timeout_seconds: float) -> None:
    """
    Cancel token when the client disconnects or the deadline passes.

    The listing thread cannot be interrupted from the event loop; it stops
    at the next object once the token is cancelled.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_seconds

    while not token.cancelled:
        if await request.is_disconnected():
            logger.info(
                "Client disconnected, cancelling listing",
                extra={"path": request.url.path},
            )
            token.cancel()
            return

        remaining = deadline - loop.time()
        if remaining <= 0:
            logger.warning(
                "Listing timed out",
                extra={"path": request.url.path, "timeout_seconds": timeout_seconds},
            )
            token.cancel(timed_out=True)
            return

        await asyncio.sleep(min(DISCONNECT_POLL_SECONDS, remaining))


@router.get(
    "/list/v1",
    status_code=status.HTTP_200_OK,
    summary="List playlist",
    description="List every object in the bucket. Only the first entry carries a presigned URL.",
    responses={
        500: {"description": "Storage error (plain text)"},
        499: {"description": "Client disconnected"},
        504: {"description": "Storage did not answer in time"},
    },
)
async def list_objects(
    request: Request,
    storage: StorageClientDep,
    settings: SettingsDep,
) -> JSONResponse:
    """
    Build the playlist for the player.

    The listing is bound to a cancellation token that is released when
    this handler exits, whatever the exit path. A failure anywhere in the
    listing discards the partial playlist; the exception handlers turn it
    into a plain-text error response.
    """
    builder = PlaylistBuilder(storage, settings.presign_ttl_seconds)

    with listing_cancellation() as token:
        watcher = asyncio.create_task(
            watch_listing(request, token, settings.storage_timeout_seconds)
        )
        try:
            entries = await run_in_threadpool(builder.build, token)
        finally:
            watcher.cancel()

    return JSONResponse([entry.to_wire() for entry in entries])


@router.get(
    "/getpresign/v1",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
    summary="Presign one object",
    description="Return a presigned download URL for the object named by objname.",
    responses={
        400: {"description": "objname missing"},
        500: {"description": "Signing failed"},
    },
)
async def get_presigned_url(
    storage: StorageClientDep,
    settings: SettingsDep,
    objname: str = "",
) -> PlainTextResponse:
    url = await run_in_threadpool(
        presign_one, storage, objname, settings.presign_ttl_seconds
    )

    logger.debug("Presigned object", extra={"object_name": objname})

    return PlainTextResponse(url)
