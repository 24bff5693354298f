"""Pydantic models for the HTTP request/response contract.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2024-01-01T00:00:00.000Z``."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# /api/chat
# ---------------------------------------------------------------------------


class ChatRequest(_WireModel):
    """Prompt plus optional system message; both validated by the route."""

    prompt: str | None = None
    system_message: str | None = None


class ChatResponse(_WireModel):
    success: bool = True
    text_response: str
    audio_url: str
    audio_file_name: str
    timestamp: str
    prompt_length: int
    response_length: int


# ---------------------------------------------------------------------------
# Operational routes
# ---------------------------------------------------------------------------


class HealthResponse(_WireModel):
    status: str
    timestamp: str
    version: str


class CleanupResponse(_WireModel):
    message: str
    deleted_count: int


class ConfigResponse(_WireModel):
    runtime_version: str
    environment: str
    has_api_key: bool
    audio_directory: str
    server_time: str
    provider_backend: str
    providers: dict
    store: dict
    janitor: dict | None = None


class ErrorResponse(BaseModel):
    error: str
    type: str | None = None
    details: str | None = None
