"""
LLM Provider Factory

Creates the provider the rewrite stage talks to, based on settings.
"""

from darkmaker.config import Settings
from darkmaker.core import ConfigError

from .base import LLMProvider, ProviderType
from .gemini_provider import GeminiProvider
from .ollama_provider import OllamaProvider


def get_provider_type(settings: Settings) -> ProviderType:
    """Resolve the provider type

    An explicit LLM_PROVIDER wins; otherwise Gemini is used when its key is
    configured and Ollama (local) is the fallback.
    """
    if settings.llm_provider == ProviderType.OLLAMA.value:
        return ProviderType.OLLAMA
    if settings.llm_provider == ProviderType.GEMINI.value:
        return ProviderType.GEMINI
    if settings.llm_provider:
        raise ConfigError(f"Unknown LLM_PROVIDER: {settings.llm_provider}")

    if settings.gemini_api_key:
        return ProviderType.GEMINI
    return ProviderType.OLLAMA


def get_llm_provider(settings: Settings) -> LLMProvider:
    """Build an LLM provider for the configured backend

    Raises:
        ConfigError: If the selected provider is missing its credentials
    """
    provider_type = get_provider_type(settings)

    if provider_type == ProviderType.GEMINI:
        return GeminiProvider(
            api_key=settings.require("gemini_api_key"),
            timeout=settings.http_timeout_seconds,
        )

    return OllamaProvider(
        base_url=settings.ollama_host,
        timeout=settings.http_timeout_seconds,
    )
