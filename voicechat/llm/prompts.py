"""System message defaults for the chat generator."""

from __future__ import annotations

DEFAULT_SYSTEM_MESSAGE = (
    "You are a helpful, friendly, and conversational AI assistant. "
    "Provide clear, concise, and engaging responses. "
    "Keep your responses conversational and natural, as if speaking to a friend."
)


def resolve_system_message(system_message: str | None) -> str:
    """Return the trimmed caller message, or the default persona when blank."""
    if system_message is None:
        return DEFAULT_SYSTEM_MESSAGE
    trimmed = system_message.strip()
    return trimmed or DEFAULT_SYSTEM_MESSAGE


def build_messages(system_message: str, prompt: str) -> list[dict[str, str]]:
    """Build the system + user message pair sent to the chat model."""
    return [
        {"role": "system", "content": system_message},
        {"role": "user", "content": prompt},
    ]
