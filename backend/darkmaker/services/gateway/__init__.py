"""
External Tool Gateway

Single boundary for every external process and remote service the render
pipeline touches. Each operation has a narrow contract and raises from the
shared error taxonomy:

    download_audio       -> DownloadError
    transcribe           -> ConfigError, UpstreamError
    rewrite              -> RewriteError
    synthesize_speech    -> ConfigError, UpstreamError
    probe_duration       -> never raises (0.0 when unknown)
    render_title_image   -> TranscodeError
    transcode / mux      -> TranscodeError
    extract_audio        -> TranscodeError
"""

from typing import Optional

from darkmaker.config import Settings
from darkmaker.models import FileHandle
from darkmaker.services.infrastructure.storage import Workspace

from .downloader import AudioDownloader
from .media import MediaToolkit
from .rewriter import ScriptRewriter
from .speech import SpeechClient
from .transcription import TranscriptionClient


class ToolGateway:
    """Facade over the downloader, remote services and ffmpeg"""

    def __init__(
        self,
        settings: Settings,
        workspace: Workspace,
        *,
        downloader: Optional[AudioDownloader] = None,
        transcriber: Optional[TranscriptionClient] = None,
        rewriter: Optional[ScriptRewriter] = None,
        speech: Optional[SpeechClient] = None,
        media: Optional[MediaToolkit] = None,
    ):
        self.settings = settings
        self.workspace = workspace
        self.downloader = downloader or AudioDownloader(
            workspace,
            timeout=settings.gateway_timeout_seconds,
            cookies_file=settings.ytdlp_cookies_file,
        )
        self.transcriber = transcriber or TranscriptionClient(settings)
        self.rewriter = rewriter or ScriptRewriter(settings)
        self.speech = speech or SpeechClient(settings, workspace)
        self.media = media or MediaToolkit(
            workspace,
            timeout=settings.gateway_timeout_seconds,
            ken_burns=settings.ken_burns_enabled,
        )

    async def download_audio(self, url: str) -> FileHandle:
        return await self.downloader.download_audio(url)

    async def transcribe(self, audio: FileHandle, language: Optional[str] = None) -> str:
        return await self.transcriber.transcribe(audio, language)

    async def rewrite(self, transcript: str) -> str:
        return await self.rewriter.rewrite(transcript)

    async def synthesize_speech(self, text: str, voice: Optional[str] = None) -> FileHandle:
        return await self.speech.synthesize_speech(text, voice)

    async def probe_duration(self, media: FileHandle) -> float:
        return await self.media.probe_duration(media)

    async def render_title_image(self, text_file: FileHandle) -> FileHandle:
        return await self.media.render_title_image(text_file)

    async def transcode(self, manifest: FileHandle, duration_per_image: float) -> FileHandle:
        return await self.media.transcode(manifest, duration_per_image)

    async def mux(self, video: FileHandle, audio: FileHandle) -> FileHandle:
        return await self.media.mux(video, audio)

    async def extract_audio(self, video: FileHandle) -> FileHandle:
        return await self.media.extract_audio(video)


__all__ = [
    "ToolGateway",
    "AudioDownloader",
    "MediaToolkit",
    "ScriptRewriter",
    "SpeechClient",
    "TranscriptionClient",
]
