"""OpenAI audio.speech implementation of the synthesizer interface."""

from __future__ import annotations

import logging

import openai
from openai import AsyncOpenAI

from voicechat.errors import ProviderError
from voicechat.openai_client import translate_openai_error
from voicechat.tts.synth import SpeechSynthesizer

log = logging.getLogger(__name__)


class OpenAISpeechSynthesizer(SpeechSynthesizer):
    """Synthesize MP3 speech with a fixed model, voice and speed."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "tts-1",
        voice: str = "alloy",
        speed: float = 1.0,
    ) -> None:
        self._client = client
        self._model = model
        self._voice = voice
        self._speed = speed
        self._requests = 0
        self._failures = 0
        self._bytes_out = 0

    @property
    def backend_name(self) -> str:
        return "openai"

    async def synthesize(self, text: str) -> bytes:
        self._requests += 1
        try:
            async with self._client.audio.speech.with_streaming_response.create(
                model=self._model,
                voice=self._voice,
                input=text,
                speed=self._speed,
                response_format="mp3",
            ) as response:
                audio = await response.read()
        except openai.OpenAIError as exc:
            self._failures += 1
            raise translate_openai_error(exc) from exc

        if not audio:
            self._failures += 1
            raise ProviderError("Empty audio in speech response")

        self._bytes_out += len(audio)
        log.info(
            "Speech synthesized: %d bytes (%s/%s, speed=%.2f)",
            len(audio),
            self._model,
            self._voice,
            self._speed,
        )
        return audio

    def debug_snapshot(self) -> dict:
        return {
            "backend": self.backend_name,
            "model": self._model,
            "voice": self._voice,
            "speed": self._speed,
            "requests": self._requests,
            "failures": self._failures,
            "bytes_out": self._bytes_out,
        }
