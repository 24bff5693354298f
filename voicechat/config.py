"""Server configuration with environment variable overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass

from voicechat.errors import ConfigError

try:
    from dotenv import load_dotenv

    load_dotenv(override=False)
except Exception:
    # Optional dependency; env vars still work without .env loading.
    pass


_PROVIDER_BACKENDS = {"openai", "stub"}
_TTS_SPEED_MIN = 0.25
_TTS_SPEED_MAX = 4.0


@dataclass(slots=True)
class Settings:
    """Voice chat server settings. Override any field via environment variable."""

    openai_api_key: str = os.environ.get("OPENAI_API_KEY", "").strip()
    openai_base_url: str = os.environ.get("OPENAI_BASE_URL", "").strip()
    provider_backend: str = os.environ.get("PROVIDER_BACKEND", "openai").strip().lower()
    chat_model: str = os.environ.get("CHAT_MODEL", "gpt-3.5-turbo")
    chat_max_tokens: int = int(os.environ.get("CHAT_MAX_TOKENS", "500"))
    chat_temperature: float = float(os.environ.get("CHAT_TEMPERATURE", "0.7"))
    tts_model: str = os.environ.get("TTS_MODEL", "tts-1")
    tts_voice: str = os.environ.get("TTS_VOICE", "alloy")
    tts_speed: float = float(os.environ.get("TTS_SPEED", "1.0"))
    provider_timeout_s: float = float(os.environ.get("PROVIDER_TIMEOUT_S", "60.0"))
    audio_dir: str = os.environ.get("AUDIO_DIR", os.path.join("public", "audio"))
    audio_max_age_s: float = float(os.environ.get("AUDIO_MAX_AGE_S", "3600"))
    cleanup_interval_s: float = float(os.environ.get("CLEANUP_INTERVAL_S", "0"))
    environment: str = os.environ.get("ENVIRONMENT", "development").strip().lower()
    cors_origins: str = os.environ.get("CORS_ORIGINS", "*")
    log_level: str = os.environ.get("LOG_LEVEL", "INFO").upper()
    host: str = os.environ.get("SERVER_HOST", "0.0.0.0")
    port: int = int(os.environ.get("PORT", "5000"))

    def __post_init__(self) -> None:
        if self.provider_backend not in _PROVIDER_BACKENDS:
            raise ValueError("PROVIDER_BACKEND must be one of: openai, stub")
        if self.chat_max_tokens < 1:
            raise ValueError("CHAT_MAX_TOKENS must be >= 1")
        if not (0.0 <= self.chat_temperature <= 2.0):
            raise ValueError("CHAT_TEMPERATURE must be in [0.0, 2.0]")
        if not (_TTS_SPEED_MIN <= self.tts_speed <= _TTS_SPEED_MAX):
            raise ValueError(
                f"TTS_SPEED must be in [{_TTS_SPEED_MIN}, {_TTS_SPEED_MAX}]"
            )
        if self.provider_timeout_s <= 0.0:
            raise ValueError("PROVIDER_TIMEOUT_S must be > 0")
        if self.audio_max_age_s <= 0.0:
            raise ValueError("AUDIO_MAX_AGE_S must be > 0")
        if self.cleanup_interval_s < 0.0:
            raise ValueError("CLEANUP_INTERVAL_S must be >= 0")
        if not (1 <= self.port <= 65535):
            raise ValueError("PORT must be between 1 and 65535")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def has_api_key(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def require_api_key(self) -> str:
        """Return the provider credential or fail startup without one."""
        if not self.openai_api_key:
            raise ConfigError(
                "OPENAI_API_KEY is not set; export it or add it to .env "
                "(or set PROVIDER_BACKEND=stub for offline development)"
            )
        return self.openai_api_key


settings = Settings()
