"""
Speech synthesis client (ElevenLabs-compatible text-to-speech API)
"""

import asyncio
from typing import Optional

import httpx

from darkmaker.config import Settings
from darkmaker.core import get_logger, ConfigError, UpstreamError, WorkspaceError
from darkmaker.models import FileHandle
from darkmaker.services.infrastructure.storage import Workspace

logger = get_logger(__name__, component="speech")


class SpeechClient:
    """Turns a script into an MP3 artifact in the output directory"""

    def __init__(
        self,
        settings: Settings,
        workspace: Workspace,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.workspace = workspace
        self._transport = transport

    def resolve_voice(self, voice: Optional[str]) -> str:
        chosen = (voice or "").strip() or self.settings.default_voice_id
        if not chosen:
            raise ConfigError("Missing configuration: DEFAULT_VOICE_ID is not set and no voice was requested")
        return chosen

    async def synthesize_speech(self, text: str, voice: Optional[str] = None) -> FileHandle:
        """
        Synthesize ``text`` and persist the returned audio bytes

        Raises:
            ConfigError: If SPEECH_API_KEY or a voice id is missing
            UpstreamError: On a non-2xx response, an empty body or a transport failure
        """
        api_key = self.settings.require("speech_api_key")
        voice_id = self.resolve_voice(voice)
        url = f"{self.settings.speech_api_url.rstrip('/')}/{voice_id}"

        logger.info("Requesting speech synthesis", extra={"voice": voice_id, "chars": len(text)})

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.http_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    url,
                    headers={"xi-api-key": api_key, "Accept": "audio/mpeg"},
                    json={"text": text, "model_id": self.settings.speech_model},
                )
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Speech synthesis request failed: {exc}") from exc

        if not response.is_success:
            raise UpstreamError(
                f"Speech synthesis service returned {response.status_code}: {response.text[:300]}"
            )
        if not response.content:
            raise UpstreamError("Speech synthesis service returned no audio")

        output_path = self.workspace.output_path("tts", ".mp3")
        try:
            await asyncio.to_thread(output_path.write_bytes, response.content)
        except OSError as exc:
            self.workspace.delete_if_present(output_path)
            raise WorkspaceError(f"Could not store synthesized audio: {exc}") from exc

        return FileHandle.for_path(output_path)
