"""
Remote source download via yt-dlp
"""

from pathlib import Path
from typing import List, Optional

from darkmaker.core import get_logger, DownloadError
from darkmaker.models import FileHandle
from darkmaker.services.infrastructure.storage import Workspace

from .process import run_tool

logger = get_logger(__name__, component="downloader")

AUDIO_FORMAT = "mp3"


def build_download_cmd(url: str, output_stem: str, cookies_file: Optional[str] = None) -> List[str]:
    """
    yt-dlp invocation extracting the audio track only

    The URL goes after ``--`` so a value starting with a dash can never be
    read as an option.
    """
    cmd = [
        "yt-dlp",
        "--no-playlist",
        "--no-progress",
        "--quiet",
        "-x",
        "--audio-format", AUDIO_FORMAT,
        "-o", f"{output_stem}.%(ext)s",
    ]
    if cookies_file:
        cmd += ["--cookies", cookies_file]
    cmd += ["--", url]
    return cmd


class AudioDownloader:
    """Downloads the audio of a remote video into the intake directory"""

    def __init__(self, workspace: Workspace, timeout: float, cookies_file: Optional[str] = None):
        self.workspace = workspace
        self.timeout = timeout
        self.cookies_file = cookies_file

    async def download_audio(self, url: str) -> FileHandle:
        if self.cookies_file and not Path(self.cookies_file).is_file():
            raise DownloadError(f"Downloader cookies file not found: {self.cookies_file}")

        stem = self.workspace.intake_path("source-audio")
        output_path = stem.with_name(f"{stem.name}.{AUDIO_FORMAT}")

        try:
            await run_tool(
                build_download_cmd(url, str(stem), self.cookies_file),
                timeout=self.timeout,
                error_cls=DownloadError,
                action="audio download",
            )
        except DownloadError:
            self._discard_partials(stem)
            raise

        if not output_path.is_file():
            self._discard_partials(stem)
            raise DownloadError(f"Downloader reported success but produced no audio for {url}")

        logger.info("Source audio downloaded", extra={"url": url, "path": str(output_path)})
        return FileHandle(path=output_path, display_name=output_path.name)

    def _discard_partials(self, stem: Path) -> None:
        # yt-dlp leaves .part/.webm/.m4a siblings behind when it dies mid-way
        for leftover in stem.parent.glob(f"{stem.name}.*"):
            self.workspace.delete_if_present(leftover)
