"""
Shared fixtures: isolated workspace, settings and a fake tool gateway.

The fake gateway writes real (tiny) files into the workspace so cleanup can
be checked by listing the directories afterwards.
"""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from darkmaker.config import Settings
from darkmaker.models import FileHandle
from darkmaker.services.infrastructure.storage import Workspace

CONFIG_ENV_VARS = (
    "TRANSCRIPTION_API_KEY",
    "GEMINI_API_KEY",
    "SPEECH_API_KEY",
    "LLM_PROVIDER",
    "DEFAULT_VOICE_ID",
    "KEEP_REUSED_NARRATION",
    "KEN_BURNS_ENABLED",
    "WORKSPACE_ROOT",
    "YTDLP_COOKIES_FILE",
)


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch):
    """Keep a developer's .env or shell exports out of the tests"""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def workspace(tmp_path) -> Workspace:
    return Workspace.under(tmp_path / "workspace").prepare()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        workspace_root=tmp_path / "workspace",
        transcription_api_key="test-transcription-key",
        gemini_api_key="test-gemini-key",
        speech_api_key="test-speech-key",
        default_voice_id="voice-default",
        gateway_timeout_seconds=5.0,
        http_timeout_seconds=5.0,
    )


def workspace_files(workspace: Workspace) -> list:
    """Every regular file left in the intake and output directories"""
    return sorted(
        path for directory in (workspace.intake_dir, workspace.output_dir)
        for path in directory.rglob("*") if path.is_file()
    )


class FakeGateway:
    """Stand-in for ToolGateway whose operations are AsyncMocks"""

    def __init__(
        self,
        workspace: Workspace,
        transcript: str = "original transcript line\nsecond line",
        script: str = "The Rewritten Title\nRewritten narration body.",
        audio_seconds: float = 12.0,
    ):
        self.workspace = workspace
        self.manifests = []
        self.titles = []

        self.download_audio = AsyncMock(side_effect=self._download)
        self.transcribe = AsyncMock(return_value=transcript)
        self.rewrite = AsyncMock(return_value=script)
        self.synthesize_speech = AsyncMock(side_effect=self._synthesize)
        self.probe_duration = AsyncMock(return_value=audio_seconds)
        self.render_title_image = AsyncMock(side_effect=self._title_image)
        self.transcode = AsyncMock(side_effect=self._transcode)
        self.mux = AsyncMock(side_effect=self._mux)
        self.extract_audio = AsyncMock(side_effect=self._extract_audio)

    def _write(self, directory: Path, prefix: str, suffix: str, data: bytes = b"data") -> FileHandle:
        path = self.workspace.allocate(directory, prefix, suffix)
        path.write_bytes(data)
        return FileHandle.for_path(path)

    async def _download(self, url):
        return self._write(self.workspace.intake_dir, "source-audio", ".mp3")

    async def _synthesize(self, text, voice=None):
        return self._write(self.workspace.output_dir, "tts", ".mp3")

    async def _title_image(self, text_file):
        self.titles.append(Path(text_file.path).read_text(encoding="utf-8"))
        return self._write(self.workspace.output_dir, "title", ".png")

    async def _transcode(self, manifest, duration_per_image):
        self.manifests.append(Path(manifest.path).read_text(encoding="utf-8"))
        return self._write(self.workspace.output_dir, "silent", ".mp4")

    async def _mux(self, video, audio):
        return self._write(self.workspace.output_dir, "video-final", ".mp4", b"FAKE-MP4-BYTES")

    async def _extract_audio(self, video):
        return self._write(self.workspace.output_dir, "audio-ext", ".wav", b"RIFF-FAKE-WAV")


@pytest.fixture
def fake_gateway(workspace) -> FakeGateway:
    return FakeGateway(workspace)


@pytest.fixture
def leftover_files(workspace):
    """Callable listing the files still present in the workspace"""
    return lambda: workspace_files(workspace)
