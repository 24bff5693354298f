"""POST /api/chat: generate a text reply and a spoken MP3 of it."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from voicechat.chat import run_chat
from voicechat.errors import (
    PromptValidationError,
    ProviderAuthError,
    ProviderQuotaError,
    ProviderTimeoutError,
)
from voicechat.http_errors import error_response
from voicechat.schemas import ChatRequest, ChatResponse, utc_timestamp

log = logging.getLogger(__name__)

router = APIRouter()


def _server_error(exc: Exception, is_production: bool) -> JSONResponse:
    return error_response(
        500,
        "Internal server error while processing your request",
        error_type="server_error",
        details=None if is_production else str(exc),
    )


@router.post("/api/chat", response_model=ChatResponse)
async def chat(
    request: Request, req: ChatRequest | None = None
) -> ChatResponse | JSONResponse:
    """Generate a reply for the prompt, synthesize it, and return its audio URL."""
    state = request.app.state
    settings = state.settings

    try:
        result = await run_chat(
            req or ChatRequest(),
            state.text_generator,
            state.synthesizer,
            state.audio_store,
        )
    except PromptValidationError as exc:
        return error_response(400, str(exc))
    except ProviderQuotaError:
        log.warning("Provider quota exceeded")
        return error_response(
            429,
            "API quota exceeded. Please check your API limits.",
            error_type="quota_error",
        )
    except ProviderAuthError:
        log.error("Provider rejected the configured API key")
        return error_response(
            401,
            "Invalid API key. Please check your configuration.",
            error_type="auth_error",
        )
    except ProviderTimeoutError as exc:
        log.warning("Provider timed out after %.1fs", settings.provider_timeout_s)
        return _server_error(exc, settings.is_production)
    except Exception as exc:
        log.exception("Error in chat endpoint")
        return _server_error(exc, settings.is_production)

    return ChatResponse(
        success=True,
        text_response=result.text,
        audio_url=result.audio.url,
        audio_file_name=result.audio.name,
        timestamp=utc_timestamp(),
        prompt_length=result.prompt_length,
        response_length=result.response_length,
    )
