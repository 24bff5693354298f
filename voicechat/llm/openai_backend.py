"""OpenAI chat-completion implementation of the text generator interface."""

from __future__ import annotations

import logging

import openai
from openai import AsyncOpenAI

from voicechat.config import settings
from voicechat.errors import ProviderError
from voicechat.llm.base import TextGenerator
from voicechat.llm.prompts import build_messages
from voicechat.openai_client import translate_openai_error

log = logging.getLogger(__name__)


class OpenAIChatGenerator(TextGenerator):
    """Thin async wrapper around the chat completions endpoint."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = settings.chat_model,
        max_tokens: int = settings.chat_max_tokens,
        temperature: float = settings.chat_temperature,
    ) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._requests = 0
        self._failures = 0

    @property
    def backend_name(self) -> str:
        return "openai"

    @property
    def model_name(self) -> str:
        return self._model

    async def generate(self, system_message: str, prompt: str) -> str:
        self._requests += 1
        try:
            completion = await self._client.chat.completions.create(
                model=self._model,
                messages=build_messages(system_message, prompt),
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except openai.OpenAIError as exc:
            self._failures += 1
            raise translate_openai_error(exc) from exc

        if not completion.choices:
            self._failures += 1
            raise ProviderError("Empty choices in chat completion")
        content = completion.choices[0].message.content
        if not content:
            self._failures += 1
            raise ProviderError("Empty content in chat completion")

        log.info("Chat completion: %d chars from %s", len(content), self._model)
        return content

    def debug_snapshot(self) -> dict:
        return {
            "backend": self.backend_name,
            "model": self.model_name,
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
            "requests": self._requests,
            "failures": self._failures,
        }
