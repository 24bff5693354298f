"""Offline text generator used for local development without a provider key."""

from __future__ import annotations

from voicechat.llm.base import TextGenerator


class StubTextGenerator(TextGenerator):
    """Echoes the prompt back so the full pipeline can run offline."""

    @property
    def backend_name(self) -> str:
        return "stub"

    @property
    def model_name(self) -> str:
        return "echo"

    async def generate(self, system_message: str, prompt: str) -> str:
        return f"You said: {prompt.strip()}"
