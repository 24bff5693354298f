"""Factory for selecting the text generator implementation."""

from __future__ import annotations

from openai import AsyncOpenAI

from voicechat.config import Settings
from voicechat.llm.base import TextGenerator
from voicechat.llm.openai_backend import OpenAIChatGenerator
from voicechat.llm.stub_backend import StubTextGenerator


def create_text_generator(
    settings: Settings, client: AsyncOpenAI | None = None
) -> TextGenerator:
    if settings.provider_backend == "stub":
        return StubTextGenerator()
    if client is None:
        raise ValueError("openai backend requires an AsyncOpenAI client")
    return OpenAIChatGenerator(
        client,
        model=settings.chat_model,
        max_tokens=settings.chat_max_tokens,
        temperature=settings.chat_temperature,
    )
