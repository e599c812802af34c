"""
Provider-neutral LLM types

The rewrite stage only ever sends one prompt with a system instruction and
reads back text, so the interface is a single async ``generate``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ProviderType(str, Enum):
    GEMINI = "gemini"
    OLLAMA = "ollama"


@dataclass
class LLMConfig:
    model: str
    temperature: float = 0.7
    max_tokens: Optional[int] = None
    system_instruction: Optional[str] = None
    # Passed through to the provider untouched
    extra_options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class UsageStats:
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class LLMResponse:
    text: str
    model: str
    provider: ProviderType
    usage: Optional[UsageStats] = None
    raw_response: Any = None


class LLMProvider(ABC):
    """A text-generation backend"""

    provider_type: ProviderType

    @property
    def name(self) -> str:
        return self.provider_type.value

    @abstractmethod
    def is_available(self) -> bool:
        """True when the provider has what it needs to make a call"""

    @abstractmethod
    async def generate(self, prompt: str, config: LLMConfig) -> LLMResponse:
        """
        Send ``prompt`` with ``config.system_instruction`` and return the reply

        Transport and API errors propagate unchanged; the caller decides
        whether they are fatal.
        """
