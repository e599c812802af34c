"""
Gemini LLM Provider

Wraps the google-genai client. Its ``generate_content`` call blocks, so it
runs in a worker thread to keep the event loop free while a job waits on
the rewrite.
"""

import asyncio
from typing import Any, Dict, Optional

from google import genai
from google.genai import types

from .base import LLMConfig, LLMProvider, LLMResponse, ProviderType, UsageStats


def _usage(response: Any) -> Optional[UsageStats]:
    metadata = getattr(response, "usage_metadata", None)
    if metadata is None:
        return None
    return UsageStats(
        input_tokens=metadata.prompt_token_count or 0,
        output_tokens=metadata.candidates_token_count or 0,
    )


class GeminiProvider(LLMProvider):
    provider_type = ProviderType.GEMINI

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        # HttpOptions takes milliseconds
        http_options = types.HttpOptions(timeout=int(timeout * 1000)) if timeout else None
        self.client = genai.Client(api_key=api_key, http_options=http_options) if api_key else None

    def is_available(self) -> bool:
        return self.client is not None

    @staticmethod
    def _content_config(config: LLMConfig) -> types.GenerateContentConfig:
        options: Dict[str, Any] = {
            "temperature": config.temperature,
            "system_instruction": config.system_instruction,
        }
        if config.max_tokens:
            options["max_output_tokens"] = config.max_tokens
        options.update(config.extra_options)
        return types.GenerateContentConfig(**options)

    async def generate(self, prompt: str, config: LLMConfig) -> LLMResponse:
        if self.client is None:
            raise RuntimeError("Gemini provider is not available. Check API key.")

        response = await asyncio.to_thread(
            self.client.models.generate_content,
            model=config.model,
            contents=prompt,
            config=self._content_config(config),
        )
        return LLMResponse(
            text=(response.text or "").strip(),
            model=config.model,
            provider=self.provider_type,
            usage=_usage(response),
            raw_response=response,
        )
