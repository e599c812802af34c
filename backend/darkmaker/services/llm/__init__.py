"""
LLM providers used by the rewrite stage.
"""

from .base import LLMProvider, LLMConfig, LLMResponse, ProviderType, UsageStats
from .factory import get_llm_provider, get_provider_type
from .gemini_provider import GeminiProvider
from .ollama_provider import OllamaProvider

__all__ = [
    "LLMProvider",
    "LLMConfig",
    "LLMResponse",
    "ProviderType",
    "UsageStats",
    "get_llm_provider",
    "get_provider_type",
    "GeminiProvider",
    "OllamaProvider",
]
