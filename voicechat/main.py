"""Voice chat server entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from voicechat import __version__
from voicechat.ai_runtime import ProviderRuntime, build_runtime
from voicechat.config import Settings, settings as default_settings
from voicechat.http_errors import install_error_handlers
from voicechat.janitor import AudioJanitor
from voicechat.llm.base import TextGenerator
from voicechat.routers.audio import router as audio_router
from voicechat.routers.chat import router as chat_router
from voicechat.routers.system import router as system_router
from voicechat.storage import AudioStore, DiskAudioStore
from voicechat.tts.synth import SpeechSynthesizer

log = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    text_generator: TextGenerator | None = None,
    synthesizer: SpeechSynthesizer | None = None,
    audio_store: AudioStore | None = None,
) -> FastAPI:
    """Build the ASGI app.

    Collaborators passed in are used as-is; anything left as None is built
    from ``settings`` at startup. Building the openai providers without
    ``OPENAI_API_KEY`` raises ConfigError and aborts startup.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open providers, storage and the optional janitor."""
        state = app.state
        runtime: ProviderRuntime | None = None

        if state.audio_store is None:
            state.audio_store = DiskAudioStore(settings.audio_dir)
        if state.text_generator is None or state.synthesizer is None:
            runtime = build_runtime(settings)
            if state.text_generator is None:
                state.text_generator = runtime.text_generator
            if state.synthesizer is None:
                state.synthesizer = runtime.synthesizer
        state.runtime = runtime

        janitor: AudioJanitor | None = None
        if settings.cleanup_interval_s > 0:
            janitor = AudioJanitor(
                state.audio_store,
                interval_s=settings.cleanup_interval_s,
                max_age_s=settings.audio_max_age_s,
            )
            await janitor.start()
        state.janitor = janitor

        log.info("Audio files directory: %s", state.audio_store.location)
        log.info("API key configured: %s", settings.has_api_key)
        log.info(
            "Server ready (%s, provider=%s)",
            settings.environment,
            settings.provider_backend,
        )

        yield

        if janitor is not None:
            await janitor.stop()
        if runtime is not None:
            await runtime.close()

    app = FastAPI(
        title="Voice Chat Server",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.text_generator = text_generator
    app.state.synthesizer = synthesizer
    app.state.audio_store = audio_store
    app.state.runtime = None
    app.state.janitor = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Accept-Ranges", "Content-Range", "Content-Length"],
    )
    install_error_handlers(app)

    app.include_router(system_router)
    app.include_router(chat_router)
    app.include_router(audio_router)
    return app


app = create_app()


def main() -> None:
    logging.basicConfig(
        level=default_settings.log_level,
        format="%(asctime)s %(levelname)-8s %(name)s  %(message)s",
    )
    uvicorn.run(
        "voicechat.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
