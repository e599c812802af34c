"""
Runtime settings

All service credentials, endpoints and tunables are read from the
environment. Nothing is validated at startup: a missing credential only
surfaces as ConfigError when the stage that needs it is reached.

=== ENVIRONMENT ===

    PORT                     Listening port (default 10000)
    WORKSPACE_ROOT           Root for the intake/ and output/ directories
                             (default: <tempdir>/darkmaker)
    TRANSCRIPTION_API_KEY    Key for the speech-to-text service
    TRANSCRIPTION_API_URL    OpenAI-compatible transcription endpoint
    TRANSCRIPTION_MODEL      Transcription model name
    LLM_PROVIDER             "gemini" or "ollama" (auto: gemini when a key exists)
    GEMINI_API_KEY           Key for the Gemini rewrite provider
    REWRITE_MODEL            Model used for the rewrite stage
    OLLAMA_HOST              Ollama server for local rewrites
    SPEECH_API_KEY           Key for the speech-synthesis service
    SPEECH_API_URL           ElevenLabs-compatible text-to-speech base URL
    SPEECH_MODEL             Synthesis model id
    DEFAULT_VOICE_ID         Voice used when the request names none
    DEFAULT_LANGUAGE         Transcription language (default pt-BR)
    GATEWAY_TIMEOUT_SECONDS  Bounded wait for external processes
    HTTP_TIMEOUT_SECONDS     Bounded wait for remote services
    KEN_BURNS_ENABLED        Slow zoom over each slide
    KEEP_REUSED_NARRATION    Keep the narration upload when it was served as
                             the final audio track. Off by default, matching
                             the original service, which always deleted it.
    MAX_UPLOAD_SIZE          Per-file upload limit in bytes
    YTDLP_COOKIES_FILE       Cookies file handed to the downloader
"""

import os
import tempfile
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Mapping, Optional

from ..core.exceptions import ConfigError
from ..core.runtime import parse_bool_env


DEFAULT_TRANSCRIPTION_URL = "https://api.openai.com/v1/audio/transcriptions"
DEFAULT_SPEECH_URL = "https://api.elevenlabs.io/v1/text-to-speech"


def _default_workspace_root() -> Path:
    return Path(tempfile.gettempdir()) / "darkmaker"


@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of the service configuration"""
    port: int = 10000
    workspace_root: Path = field(default_factory=_default_workspace_root)

    transcription_api_key: Optional[str] = None
    transcription_api_url: str = DEFAULT_TRANSCRIPTION_URL
    transcription_model: str = "whisper-1"

    llm_provider: Optional[str] = None
    gemini_api_key: Optional[str] = None
    rewrite_model: str = "gemini-2.5-flash"
    ollama_host: str = "http://localhost:11434"

    speech_api_key: Optional[str] = None
    speech_api_url: str = DEFAULT_SPEECH_URL
    speech_model: str = "eleven_multilingual_v2"
    default_voice_id: Optional[str] = None

    default_language: str = "pt-BR"
    gateway_timeout_seconds: float = 600.0
    http_timeout_seconds: float = 120.0
    ken_burns_enabled: bool = False
    keep_reused_narration: bool = False
    max_upload_size: int = 50 * 1024 * 1024
    ytdlp_cookies_file: Optional[str] = None

    @property
    def intake_dir(self) -> Path:
        return self.workspace_root / "intake"

    @property
    def output_dir(self) -> Path:
        return self.workspace_root / "output"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from the process environment (or a given mapping)"""
        env = os.environ if environ is None else environ

        def text(name: str) -> Optional[str]:
            value = env.get(name)
            if value is None or not value.strip():
                return None
            return value.strip()

        defaults = cls()
        return cls(
            port=int(text("PORT") or defaults.port),
            workspace_root=Path(text("WORKSPACE_ROOT") or defaults.workspace_root),
            transcription_api_key=text("TRANSCRIPTION_API_KEY"),
            transcription_api_url=text("TRANSCRIPTION_API_URL") or defaults.transcription_api_url,
            transcription_model=text("TRANSCRIPTION_MODEL") or defaults.transcription_model,
            llm_provider=(text("LLM_PROVIDER") or "").lower() or None,
            gemini_api_key=text("GEMINI_API_KEY"),
            rewrite_model=text("REWRITE_MODEL") or defaults.rewrite_model,
            ollama_host=text("OLLAMA_HOST") or defaults.ollama_host,
            speech_api_key=text("SPEECH_API_KEY"),
            speech_api_url=text("SPEECH_API_URL") or defaults.speech_api_url,
            speech_model=text("SPEECH_MODEL") or defaults.speech_model,
            default_voice_id=text("DEFAULT_VOICE_ID"),
            default_language=text("DEFAULT_LANGUAGE") or defaults.default_language,
            gateway_timeout_seconds=float(text("GATEWAY_TIMEOUT_SECONDS") or defaults.gateway_timeout_seconds),
            http_timeout_seconds=float(text("HTTP_TIMEOUT_SECONDS") or defaults.http_timeout_seconds),
            ken_burns_enabled=parse_bool_env(text("KEN_BURNS_ENABLED"), default=False),
            keep_reused_narration=parse_bool_env(text("KEEP_REUSED_NARRATION"), default=False),
            max_upload_size=int(text("MAX_UPLOAD_SIZE") or defaults.max_upload_size),
            ytdlp_cookies_file=text("YTDLP_COOKIES_FILE"),
        )

    def require(self, name: str) -> str:
        """
        Return a configured value or fail with ConfigError

        Args:
            name: Settings attribute name (e.g. "speech_api_key")

        Raises:
            ConfigError: If the value is unset or empty
        """
        if name not in {f.name for f in fields(self)}:
            raise AttributeError(name)
        value = getattr(self, name)
        if value is None or (isinstance(value, str) and not value):
            raise ConfigError(f"Missing configuration: {name.upper()} is not set")
        return value
