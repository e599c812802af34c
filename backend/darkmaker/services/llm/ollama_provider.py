"""
Ollama LLM Provider

Talks to a local Ollama server through its chat endpoint. The rewrite
instruction goes in as the system message and the transcript as the user
message.
"""

from typing import Any, Dict, List, Optional

import httpx

from .base import LLMConfig, LLMProvider, LLMResponse, ProviderType, UsageStats

DEFAULT_OLLAMA_URL = "http://localhost:11434"


class OllamaProvider(LLMProvider):
    provider_type = ProviderType.OLLAMA

    def __init__(
        self,
        base_url: str = DEFAULT_OLLAMA_URL,
        timeout: float = 300.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}/api/chat"

    def is_available(self) -> bool:
        return bool(self.base_url)

    @staticmethod
    def _messages(prompt: str, config: LLMConfig) -> List[Dict[str, str]]:
        messages = []
        if config.system_instruction:
            messages.append({"role": "system", "content": config.system_instruction})
        messages.append({"role": "user", "content": prompt})
        return messages

    @staticmethod
    def _options(config: LLMConfig) -> Dict[str, Any]:
        # Ollama calls the output cap num_predict
        options: Dict[str, Any] = {"temperature": config.temperature}
        if config.max_tokens:
            options["num_predict"] = config.max_tokens
        return {**options, **config.extra_options}

    async def generate(self, prompt: str, config: LLMConfig) -> LLMResponse:
        payload = {
            "model": config.model,
            "messages": self._messages(prompt, config),
            "options": self._options(config),
            "stream": False,
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.chat_url, json=payload)
            response.raise_for_status()
            body = response.json()

        message = body.get("message") or {}
        return LLMResponse(
            text=(message.get("content") or "").strip(),
            model=body.get("model", config.model),
            provider=self.provider_type,
            usage=UsageStats(
                input_tokens=body.get("prompt_eval_count", 0),
                output_tokens=body.get("eval_count", 0),
            ),
            raw_response=body,
        )
