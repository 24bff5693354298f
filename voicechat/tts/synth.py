"""TTS synthesis abstraction with a stub backend.

The synthesizer interface is intentionally simple: text in, MP3 bytes out.
Provider-specific behaviour (model, voice, speed) is fixed at construction.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from openai import AsyncOpenAI

from voicechat.config import Settings

log = logging.getLogger(__name__)

# MPEG-1 Layer III, 128 kbit/s, 44.1 kHz, mono, no CRC.
_MP3_FRAME_HEADER = b"\xff\xfb\x90\xc0"
_MP3_FRAME_BYTES = 144 * 128_000 // 44_100
_MP3_SAMPLES_PER_FRAME = 1152
_MP3_SAMPLE_RATE = 44_100


class SpeechSynthesizer(ABC):
    """Base class for TTS backends."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        raise NotImplementedError

    @abstractmethod
    async def synthesize(self, text: str) -> bytes:
        """Return MP3 audio for ``text``."""

    def debug_snapshot(self) -> dict:
        return {"backend": self.backend_name}


class StubSynthesizer(SpeechSynthesizer):
    """Generates silent MP3 audio for development without a provider."""

    @property
    def backend_name(self) -> str:
        return "stub"

    async def synthesize(self, text: str) -> bytes:
        # Approximate speaking pace: ~15 characters per second, capped at 30 s.
        seconds = min(len(text) / 15, 30.0)
        return _make_silent_mp3(seconds)


def _make_silent_mp3(seconds: float) -> bytes:
    """Build a run of silent MP3 frames covering at least ``seconds``."""
    frame_s = _MP3_SAMPLES_PER_FRAME / _MP3_SAMPLE_RATE
    num_frames = max(1, int(seconds / frame_s + 0.999))
    # Zeroed side info means part2_3_length == 0 for every granule: silence.
    frame = _MP3_FRAME_HEADER + b"\x00" * (_MP3_FRAME_BYTES - len(_MP3_FRAME_HEADER))
    return frame * num_frames


def create_synthesizer(
    settings: Settings, client: AsyncOpenAI | None = None
) -> SpeechSynthesizer:
    """Factory: pick backend based on config."""
    backend = settings.provider_backend
    if backend == "stub":
        log.info("Using stub TTS synthesizer (silent audio)")
        return StubSynthesizer()
    if backend == "openai":
        if client is None:
            raise ValueError("openai backend requires an AsyncOpenAI client")
        from voicechat.tts.openai_speech import OpenAISpeechSynthesizer

        return OpenAISpeechSynthesizer(
            client,
            model=settings.tts_model,
            voice=settings.tts_voice,
            speed=settings.tts_speed,
        )
    raise ValueError(f"Unknown TTS backend: {backend!r}")
