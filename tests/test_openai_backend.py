"""Tests for the OpenAI chat + speech adapters against a mock transport."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from voicechat.config import Settings
from voicechat.errors import (
    ProviderAuthError,
    ProviderError,
    ProviderQuotaError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)
from voicechat.llm.openai_backend import OpenAIChatGenerator
from voicechat.openai_client import create_openai_client
from voicechat.tts.openai_speech import OpenAISpeechSynthesizer


def _settings() -> Settings:
    return Settings(
        openai_api_key="sk-test",
        openai_base_url="http://openai.local/v1",
        provider_timeout_s=5.0,
    )


def _completion(content: str | None) -> dict:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-3.5-turbo",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


def _api_error(status: int, code: str, message: str) -> httpx.Response:
    return httpx.Response(
        status,
        json={"error": {"message": message, "type": code, "param": None, "code": code}},
    )


def _run_generate(handler, **kwargs) -> str:
    async def _run() -> str:
        client = create_openai_client(
            _settings(), transport=httpx.MockTransport(handler)
        )
        try:
            generator = OpenAIChatGenerator(client, **kwargs)
            return await generator.generate("be nice", "Say hello")
        finally:
            await client.close()

    return asyncio.run(_run())


def _run_synthesize(handler, text: str = "Hello there!") -> bytes:
    async def _run() -> bytes:
        client = create_openai_client(
            _settings(), transport=httpx.MockTransport(handler)
        )
        try:
            synth = OpenAISpeechSynthesizer(client, model="tts-1", voice="alloy", speed=1.0)
            return await synth.synthesize(text)
        finally:
            await client.close()

    return asyncio.run(_run())


# ---------------------------------------------------------------------------
# Chat completions
# ---------------------------------------------------------------------------


def test_generate_sends_bounded_request_and_returns_first_choice():
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/chat/completions"
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion("Hello! How are you?"))

    text = _run_generate(
        handler, model="gpt-3.5-turbo", max_tokens=500, temperature=0.7
    )

    assert text == "Hello! How are you?"
    assert seen["auth"] == "Bearer sk-test"
    body = seen["body"]
    assert body["model"] == "gpt-3.5-turbo"
    assert body["max_tokens"] == 500
    assert body["temperature"] == 0.7
    assert body["messages"] == [
        {"role": "system", "content": "be nice"},
        {"role": "user", "content": "Say hello"},
    ]


def test_generate_empty_content_is_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion(""))

    with pytest.raises(ProviderError, match="Empty content"):
        _run_generate(handler)


def test_generate_quota_exhausted_maps_to_quota_error():
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return _api_error(429, "insufficient_quota", "You exceeded your current quota")

    with pytest.raises(ProviderQuotaError):
        _run_generate(handler)
    assert calls["n"] == 1  # no retries


def test_generate_invalid_key_maps_to_auth_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return _api_error(401, "invalid_api_key", "Incorrect API key provided")

    with pytest.raises(ProviderAuthError):
        _run_generate(handler)


def test_generate_server_error_maps_to_generic_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return _api_error(500, "server_error", "upstream exploded")

    with pytest.raises(ProviderError) as exc:
        _run_generate(handler)
    assert type(exc.value) is ProviderError


def test_generate_timeout_maps_to_timeout_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ProviderTimeoutError):
        _run_generate(handler)


def test_generate_connect_failure_maps_to_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderUnavailableError):
        _run_generate(handler)


# ---------------------------------------------------------------------------
# Speech
# ---------------------------------------------------------------------------


def test_synthesize_sends_voice_and_speed_and_returns_bytes():
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/audio/speech"
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200, content=b"ID3\x04fake-mp3", headers={"content-type": "audio/mpeg"}
        )

    audio = _run_synthesize(handler, text="Hello there!")

    assert audio == b"ID3\x04fake-mp3"
    body = seen["body"]
    assert body["model"] == "tts-1"
    assert body["voice"] == "alloy"
    assert body["speed"] == 1.0
    assert body["input"] == "Hello there!"
    assert body["response_format"] == "mp3"


def test_synthesize_empty_audio_is_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"", headers={"content-type": "audio/mpeg"})

    with pytest.raises(ProviderError, match="Empty audio"):
        _run_synthesize(handler)


def test_synthesize_rate_limited_maps_to_quota_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return _api_error(429, "rate_limit_exceeded", "Rate limit reached")

    with pytest.raises(ProviderQuotaError):
        _run_synthesize(handler)


def test_synthesize_server_error_propagates_as_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return _api_error(503, "server_error", "overloaded")

    with pytest.raises(ProviderError):
        _run_synthesize(handler)
