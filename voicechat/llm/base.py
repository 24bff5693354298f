"""Backend abstraction for chat text generation."""

from __future__ import annotations

from abc import ABC, abstractmethod


class TextGenerator(ABC):
    """Async interface for single-turn text generation."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        raise NotImplementedError

    @property
    @abstractmethod
    def model_name(self) -> str:
        raise NotImplementedError

    @abstractmethod
    async def generate(self, system_message: str, prompt: str) -> str:
        """Return the generated reply for ``prompt`` under ``system_message``.

        Implementations raise :class:`voicechat.errors.ProviderError`
        subclasses on failure.
        """
        raise NotImplementedError

    def debug_snapshot(self) -> dict:
        return {
            "backend": self.backend_name,
            "model": self.model_name,
        }
