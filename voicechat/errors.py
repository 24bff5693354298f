"""Error types shared by the providers, the store and the HTTP layer."""

from __future__ import annotations


class ConfigError(RuntimeError):
    """Raised at startup when required configuration is missing."""


class PromptValidationError(ValueError):
    """Raised when a chat request carries no usable prompt."""


class ProviderError(RuntimeError):
    """Base error for external text/speech provider failures."""


class ProviderQuotaError(ProviderError):
    """Raised when the provider reports quota or rate-limit exhaustion."""


class ProviderAuthError(ProviderError):
    """Raised when the provider rejects the configured credential."""


class ProviderTimeoutError(ProviderError):
    """Raised when a provider call exceeds the configured timeout."""


class ProviderUnavailableError(ProviderError):
    """Raised when the provider cannot be reached."""
