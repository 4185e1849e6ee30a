"""
Playback state endpoints.

Tracks the single "currently playing" media key shared by every
connected browser. There is no per-user state: a selection made in one
tab is what all other tabs see.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Form, Query, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from ..dependencies import PlaybackStateDep

logger = logging.getLogger(__name__)

router = APIRouter()


class PlayingResponse(BaseModel):
    """What is playing right now."""
    playing: str = Field(description="Key of the playing object, empty if nothing plays")
    ts: str = Field(description="Client timestamp, echoed back")


@router.get(
    "/playing",
    response_model=PlayingResponse,
    status_code=status.HTTP_200_OK,
    summary="Get playing media",
)
async def get_playing_media(
    playback: PlaybackStateDep,
    ts: str = "",
    app_id: Annotated[str, Query(alias="appId")] = "",
) -> PlayingResponse:
    """
    Return the playing key.

    ts and appId are only for client-side debugging: ts is echoed back,
    appId is logged.
    """
    playing = playback.get()

    logger.info(
        "GetPlayingMedia",
        extra={"playing": playing, "ts": ts, "app_id": app_id},
    )

    return PlayingResponse(playing=playing, ts=ts)


@router.get(
    "/pause",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
    summary="Pause playing media",
)
async def pause_playing_media(playback: PlaybackStateDep) -> PlainTextResponse:
    playback.clear()
    logger.info("PausePlayingMedia")
    return PlainTextResponse("")


@router.post(
    "/playing",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
    summary="Set playing media",
)
async def set_playing_media(
    playback: PlaybackStateDep,
    objname: Annotated[str, Form()] = "",
) -> PlainTextResponse:
    """Mark objname as playing. An empty name leaves the state alone."""
    key = playback.set(objname)
    if key:
        logger.info("SetPlayingMedia", extra={"playing": key})
    return PlainTextResponse(key)
