"""Shared AsyncOpenAI client construction and error translation."""

from __future__ import annotations

import logging

import httpx
import openai
from openai import AsyncOpenAI

from voicechat.config import Settings
from voicechat.errors import (
    ProviderAuthError,
    ProviderError,
    ProviderQuotaError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)

log = logging.getLogger(__name__)

_QUOTA_CODES = frozenset({"insufficient_quota", "rate_limit_exceeded"})
_AUTH_CODES = frozenset({"invalid_api_key"})


def create_openai_client(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncOpenAI:
    """Build one AsyncOpenAI client for both chat and speech calls.

    Retries are disabled; every provider failure is terminal for the request.
    """
    api_key = settings.require_api_key()
    timeout = httpx.Timeout(settings.provider_timeout_s, connect=5.0)
    http_client = httpx.AsyncClient(timeout=timeout, transport=transport)
    return AsyncOpenAI(
        api_key=api_key,
        base_url=settings.openai_base_url or None,
        timeout=timeout,
        max_retries=0,
        http_client=http_client,
    )


def translate_openai_error(exc: Exception) -> ProviderError:
    """Map an SDK exception onto the provider error hierarchy."""
    code = getattr(exc, "code", None)
    if isinstance(exc, openai.RateLimitError) or code in _QUOTA_CODES:
        return ProviderQuotaError(str(exc))
    if isinstance(exc, openai.AuthenticationError) or code in _AUTH_CODES:
        return ProviderAuthError(str(exc))
    # APITimeoutError subclasses APIConnectionError; check it first.
    if isinstance(exc, openai.APITimeoutError):
        return ProviderTimeoutError("provider_timeout")
    if isinstance(exc, openai.APIConnectionError):
        return ProviderUnavailableError("provider_unreachable")
    if isinstance(exc, openai.APIStatusError):
        return ProviderError(f"provider returned {exc.status_code}: {exc.message}")
    return ProviderError(f"request failed: {exc}")
