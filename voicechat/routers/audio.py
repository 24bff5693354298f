"""GET /audio/{filename}: serve a stored MP3."""

from __future__ import annotations

import logging
from email.utils import formatdate

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, Response

from voicechat.http_errors import error_response
from voicechat.storage import AudioStore

log = logging.getLogger(__name__)

router = APIRouter()

AUDIO_MEDIA_TYPE = "audio/mpeg"


@router.get("/audio/{filename}", response_model=None)
async def get_audio(filename: str, request: Request) -> Response:
    """Serve an audio artifact.

    Disk-backed entries go through ``FileResponse``, which answers ``Range``
    requests with 206 (single or multipart) and 416 past the end.
    """
    store: AudioStore = request.app.state.audio_store
    entry = await store.lookup(filename)
    if entry is None:
        log.debug("Audio file not found: %s", filename)
        return error_response(404, "Audio file not found")

    if entry.path is not None:
        return FileResponse(
            entry.path,
            media_type=AUDIO_MEDIA_TYPE,
            headers={"Accept-Ranges": "bytes"},
        )
    return Response(
        content=entry.data,
        media_type=AUDIO_MEDIA_TYPE,
        headers={"Last-Modified": formatdate(entry.mtime, usegmt=True)},
    )
