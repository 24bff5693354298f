"""Provider runtime: the text generator and synthesizer used by /api/chat."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from voicechat.config import Settings
from voicechat.llm.base import TextGenerator
from voicechat.llm.factory import create_text_generator
from voicechat.openai_client import create_openai_client
from voicechat.tts.synth import SpeechSynthesizer, create_synthesizer

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ProviderRuntime:
    text_generator: TextGenerator
    synthesizer: SpeechSynthesizer
    client: AsyncOpenAI | None = None

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()
            self.client = None


def providers_snapshot(
    text_generator: TextGenerator, synthesizer: SpeechSynthesizer
) -> dict:
    return {
        "llm": text_generator.debug_snapshot(),
        "tts": synthesizer.debug_snapshot(),
    }


def build_runtime(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ProviderRuntime:
    """Create provider adapters for ``settings.provider_backend``.

    Raises ConfigError when the openai backend is selected without a key.
    """
    client: AsyncOpenAI | None = None
    if settings.provider_backend == "openai":
        client = create_openai_client(settings, transport=transport)

    runtime = ProviderRuntime(
        text_generator=create_text_generator(settings, client),
        synthesizer=create_synthesizer(settings, client),
        client=client,
    )
    log.info(
        "Provider runtime ready: llm=%s tts=%s",
        runtime.text_generator.backend_name,
        runtime.synthesizer.backend_name,
    )
    return runtime
