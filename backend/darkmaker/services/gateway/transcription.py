"""
Speech-to-text client

Talks to an OpenAI-compatible ``/audio/transcriptions`` endpoint: multipart
upload of the audio file, JSON response carrying ``text``.
"""

import asyncio
import mimetypes
from typing import Optional

import httpx

from darkmaker.config import Settings
from darkmaker.core import get_logger, UpstreamError
from darkmaker.models import FileHandle

logger = get_logger(__name__, component="transcription")


def to_iso639_1(language: Optional[str]) -> Optional[str]:
    """``pt-BR`` -> ``pt``; the transcription API takes bare language codes"""
    if not language:
        return None
    return language.replace("_", "-").split("-")[0].lower() or None


class TranscriptionClient:
    """Transcribes workspace audio files"""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    async def transcribe(self, audio: FileHandle, language: Optional[str] = None) -> str:
        """
        Transcribe an audio file

        Returns:
            The transcript; empty when the service returns no ``text`` field

        Raises:
            ConfigError: If TRANSCRIPTION_API_KEY is not set
            UpstreamError: On a non-2xx response, transport failure or timeout
        """
        api_key = self.settings.require("transcription_api_key")
        content = await asyncio.to_thread(audio.path.read_bytes)
        mime_type = mimetypes.guess_type(audio.display_name)[0] or "application/octet-stream"

        data = {"model": self.settings.transcription_model}
        code = to_iso639_1(language or self.settings.default_language)
        if code:
            data["language"] = code

        logger.info("Sending audio for transcription", extra={
            "audio": audio.display_name,
            "size": len(content),
            "language": code,
        })

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.http_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.settings.transcription_api_url,
                    headers={"Authorization": f"Bearer {api_key}"},
                    data=data,
                    files={"file": (audio.display_name, content, mime_type)},
                )
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Transcription request failed: {exc}") from exc

        if not response.is_success:
            raise UpstreamError(
                f"Transcription service returned {response.status_code}: {response.text[:300]}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError("Transcription service returned invalid JSON") from exc

        text = payload.get("text") if isinstance(payload, dict) else None
        if not text:
            logger.warning("Transcription returned no text")
            return ""
        return text.strip()
