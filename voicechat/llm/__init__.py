"""Text generation package exports."""

from voicechat.llm.base import TextGenerator
from voicechat.llm.factory import create_text_generator
from voicechat.llm.prompts import DEFAULT_SYSTEM_MESSAGE, resolve_system_message

__all__ = [
    "TextGenerator",
    "DEFAULT_SYSTEM_MESSAGE",
    "create_text_generator",
    "resolve_system_message",
]
