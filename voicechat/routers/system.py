"""Operational routes: health, config introspection, audio cleanup."""

from __future__ import annotations

import logging
import platform

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from voicechat import __version__
from voicechat.ai_runtime import providers_snapshot
from voicechat.http_errors import error_response
from voicechat.schemas import (
    CleanupResponse,
    ConfigResponse,
    HealthResponse,
    utc_timestamp,
)
from voicechat.storage import AudioStore

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness check."""
    return HealthResponse(
        status="Server is running!",
        timestamp=utc_timestamp(),
        version=__version__,
    )


@router.delete("/cleanup", response_model=CleanupResponse)
async def cleanup(request: Request) -> CleanupResponse | JSONResponse:
    """Delete audio files older than the configured maximum age."""
    store: AudioStore = request.app.state.audio_store
    max_age_s = request.app.state.settings.audio_max_age_s
    try:
        deleted = await store.purge(max_age_s)
    except OSError:
        log.exception("Error cleaning up files")
        return error_response(500, "Error cleaning up files")

    return CleanupResponse(
        message=f"Cleaned up {deleted} old audio files",
        deleted_count=deleted,
    )


@router.get("/config", response_model=ConfigResponse)
async def config(request: Request) -> ConfigResponse:
    """Non-secret runtime configuration and backend counters, for debugging."""
    state = request.app.state
    settings = state.settings
    store: AudioStore = state.audio_store
    return ConfigResponse(
        runtime_version=f"Python {platform.python_version()}",
        environment=settings.environment,
        has_api_key=settings.has_api_key,
        audio_directory=store.location,
        server_time=utc_timestamp(),
        provider_backend=settings.provider_backend,
        providers=providers_snapshot(state.text_generator, state.synthesizer),
        store=store.debug_snapshot(),
        janitor=state.janitor.debug_snapshot() if state.janitor is not None else None,
    )
