"""Chat pipeline: validate, generate text, synthesize speech, store audio."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from voicechat.errors import PromptValidationError
from voicechat.llm.base import TextGenerator
from voicechat.llm.prompts import resolve_system_message
from voicechat.schemas import ChatRequest
from voicechat.storage import AudioStore, StoredAudio
from voicechat.tts.synth import SpeechSynthesizer

log = logging.getLogger(__name__)

EMPTY_PROMPT_MESSAGE = "Prompt is required and cannot be empty"


@dataclass(slots=True)
class ChatResult:
    text: str
    audio: StoredAudio
    prompt_length: int
    response_length: int


def validate_prompt(prompt: object) -> str:
    """Return ``prompt`` unchanged if it has non-whitespace content."""
    if not isinstance(prompt, str) or not prompt.strip():
        raise PromptValidationError(EMPTY_PROMPT_MESSAGE)
    return prompt


async def run_chat(
    req: ChatRequest,
    generator: TextGenerator,
    synthesizer: SpeechSynthesizer,
    store: AudioStore,
) -> ChatResult:
    """Run one request through both provider stages and persist the audio.

    Validation happens before any provider call. Provider and storage errors
    propagate to the caller.
    """
    prompt = validate_prompt(req.prompt)
    system_message = resolve_system_message(req.system_message)
    t0 = time.monotonic()

    log.info(
        "Chat request: prompt=%d chars, custom_system=%s",
        len(prompt),
        system_message != resolve_system_message(None),
    )

    text = await generator.generate(system_message, prompt)
    audio_bytes = await synthesizer.synthesize(text)
    stored = await store.write(audio_bytes)

    elapsed_ms = int((time.monotonic() - t0) * 1000)
    log.info(
        "Chat response: %d chars, audio=%s (%d bytes) in %d ms",
        len(text),
        stored.name,
        len(audio_bytes),
        elapsed_ms,
    )
    return ChatResult(
        text=text,
        audio=stored,
        prompt_length=len(prompt),
        response_length=len(text),
    )
