"""
Transcript rewriting

Sends a fixed system instruction plus the transcript to the configured LLM
provider. Every failure is reported as RewriteError; whether the job goes on
without the rewrite is the caller's decision.
"""

import asyncio
from typing import Callable, Optional

from darkmaker.config import Settings
from darkmaker.core import get_logger, RewriteError
from darkmaker.services.llm import LLMConfig, LLMProvider, get_llm_provider

logger = get_logger(__name__, component="rewriter")

REWRITE_SYSTEM_INSTRUCTION = (
    "You are a scriptwriter for narrated videos. Rewrite the transcript you "
    "receive into an original, engaging narration script in the same "
    "language as the transcript. Keep every fact and the overall order of "
    "ideas, remove filler words, greetings and calls to subscribe. The first "
    "line must be a short title on its own line. Reply with the script text "
    "only, without markdown, headings or stage directions."
)


class ScriptRewriter:
    """Rewrites transcripts into narration scripts"""

    def __init__(
        self,
        settings: Settings,
        provider_factory: Callable[[Settings], LLMProvider] = get_llm_provider,
    ):
        self.settings = settings
        self._provider_factory = provider_factory
        self._provider: Optional[LLMProvider] = None

    def _get_provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = self._provider_factory(self.settings)
        return self._provider

    async def rewrite(self, transcript: str) -> str:
        """
        Rewrite a transcript, waiting at most HTTP_TIMEOUT_SECONDS

        Raises:
            RewriteError: On missing credentials, an upstream failure, a timeout or an
                empty result
        """
        if not transcript.strip():
            raise RewriteError("Transcript is empty, nothing to rewrite")

        config = LLMConfig(
            model=self.settings.rewrite_model,
            temperature=0.7,
            system_instruction=REWRITE_SYSTEM_INSTRUCTION,
        )

        timeout = self.settings.http_timeout_seconds
        try:
            provider = self._get_provider()
            if not provider.is_available():
                raise RewriteError(f"Rewrite provider {provider.name} is not configured")
            response = await asyncio.wait_for(provider.generate(transcript, config), timeout=timeout)
        except RewriteError:
            raise
        except asyncio.TimeoutError as exc:
            raise RewriteError(f"Rewrite timed out after {timeout}s") from exc
        except Exception as exc:
            raise RewriteError(f"Rewrite failed: {exc}") from exc

        if not response.text.strip():
            raise RewriteError("Rewrite service returned an empty script")

        logger.info("Transcript rewritten", extra={
            "provider": provider.name,
            "model": response.model,
            "input_chars": len(transcript),
            "output_chars": len(response.text),
            "tokens": response.usage.total_tokens if response.usage else None,
        })
        return response.text.strip()
