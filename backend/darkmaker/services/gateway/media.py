"""
ffmpeg / ffprobe operations

Command builders are plain functions returning argument lists so they can be
inspected without running anything; MediaToolkit runs them through the
process runner and allocates output paths in the workspace.
"""

import re
import textwrap
from pathlib import Path
from typing import List

from darkmaker.config import TARGET_WIDTH, TARGET_HEIGHT, TARGET_FPS
from darkmaker.core import get_logger, TranscodeError, DarkMakerError
from darkmaker.models import FileHandle
from darkmaker.services.infrastructure.storage import Workspace

from .process import run_tool

logger = get_logger(__name__, component="media")

TITLE_WRAP_WIDTH = 38
TITLE_MAX_LINES = 4


def escape_filter_value(value: str) -> str:
    """Escape a value for a filter option nested inside a filtergraph"""
    option_level = re.sub(r"([\\:'])", r"\\\1", value)
    return re.sub(r"([\\'\[\],;])", r"\\\1", option_level)


def wrap_title(text: str) -> str:
    """Wrap a title to a few centered lines; overflow is cut with an ellipsis"""
    lines = textwrap.wrap(" ".join(text.split()), width=TITLE_WRAP_WIDTH) or [""]
    if len(lines) > TITLE_MAX_LINES:
        lines = lines[:TITLE_MAX_LINES]
        lines[-1] = lines[-1].rstrip(".") + "..."
    return "\n".join(lines)


def build_probe_cmd(media_path: str) -> List[str]:
    return [
        "ffprobe",
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        media_path,
    ]


def build_title_image_cmd(text_file: str, output_path: str) -> List[str]:
    """Single black 1080p frame with the contents of ``text_file`` centered"""
    drawtext = (
        f"drawtext=textfile={escape_filter_value(text_file)}"
        ":fontcolor=white:fontsize=64:line_spacing=18"
        ":x=(w-text_w)/2:y=(h-text_h)/2"
    )
    return [
        "ffmpeg", "-y",
        "-f", "lavfi",
        "-i", f"color=c=black:s={TARGET_WIDTH}x{TARGET_HEIGHT}:d=1",
        "-vf", drawtext,
        "-frames:v", "1",
        output_path,
    ]


def build_slideshow_filter(duration_per_image: float, ken_burns: bool = False) -> str:
    """Scale/pad every slide to the target frame, optionally with a slow zoom"""
    size = f"{TARGET_WIDTH}:{TARGET_HEIGHT}"
    steps = [
        f"scale={size}:force_original_aspect_ratio=decrease",
        f"pad={size}:-1:-1",
    ]
    if ken_burns:
        frames = max(1, round(duration_per_image * TARGET_FPS))
        steps.append(
            f"zoompan=z='min(zoom+0.0015,1.5)':d={frames}"
            ":x='iw/2-(iw/zoom/2)':y='ih/2-(ih/zoom/2)'"
            f":s={TARGET_WIDTH}x{TARGET_HEIGHT}"
        )
    steps.append("format=yuv420p")
    return ",".join(steps)


def build_transcode_cmd(
    manifest_path: str,
    output_path: str,
    duration_per_image: float,
    ken_burns: bool = False,
) -> List[str]:
    """Render a concat manifest of still images into a silent video"""
    return [
        "ffmpeg", "-y",
        "-f", "concat",
        "-safe", "0",
        "-i", manifest_path,
        "-vf", build_slideshow_filter(duration_per_image, ken_burns),
        "-c:v", "libx264",
        "-r", str(TARGET_FPS),
        "-an",
        output_path,
    ]


def build_mux_cmd(video_path: str, audio_path: str, output_path: str) -> List[str]:
    """Combine a silent video with an audio track; output stops at the shorter stream"""
    return [
        "ffmpeg", "-y",
        "-i", video_path,
        "-i", audio_path,
        "-map", "0:v:0",
        "-map", "1:a:0",
        "-c:v", "copy",
        "-c:a", "aac",
        "-shortest",
        output_path,
    ]


def build_extract_audio_cmd(video_path: str, output_path: str) -> List[str]:
    """16 kHz mono PCM, the format speech recognizers expect"""
    return [
        "ffmpeg", "-y",
        "-i", video_path,
        "-vn",
        "-acodec", "pcm_s16le",
        "-ar", "16000",
        "-ac", "1",
        output_path,
    ]


class MediaToolkit:
    """Runs ffmpeg/ffprobe against workspace files"""

    def __init__(self, workspace: Workspace, timeout: float, ken_burns: bool = False):
        self.workspace = workspace
        self.timeout = timeout
        self.ken_burns = ken_burns

    async def probe_duration(self, media: FileHandle) -> float:
        """
        Duration of a media file in seconds

        Returns 0.0 when ffprobe fails or prints something that is not a
        number; callers treat that as "unknown" and fall back to the minimum
        slide duration.
        """
        try:
            stdout = await run_tool(
                build_probe_cmd(str(media.path)),
                timeout=self.timeout,
                error_cls=TranscodeError,
                action="ffprobe",
            )
            duration = float(stdout.decode(errors="replace").strip())
        except (DarkMakerError, ValueError) as exc:
            logger.warning("Could not read media duration", extra={
                "path": str(media.path),
                "error": str(exc),
            })
            return 0.0

        if duration != duration or duration < 0:  # NaN or negative
            return 0.0
        return duration

    async def _render(self, cmd: List[str], output_path: Path, action: str) -> FileHandle:
        """Run an ffmpeg command; a partial output is removed if it fails"""
        try:
            await run_tool(cmd, timeout=self.timeout, error_cls=TranscodeError, action=action)
        except TranscodeError:
            self.workspace.delete_if_present(output_path)
            raise
        if not output_path.is_file():
            raise TranscodeError(f"{action} produced no output")
        return FileHandle.for_path(output_path)

    async def render_title_image(self, text_file: FileHandle) -> FileHandle:
        output_path = self.workspace.output_path("title", ".png")
        cmd = build_title_image_cmd(str(text_file.path), str(output_path))
        return await self._render(cmd, output_path, "title image render")

    async def transcode(self, manifest: FileHandle, duration_per_image: float) -> FileHandle:
        output_path = self.workspace.output_path("silent", ".mp4")
        cmd = build_transcode_cmd(str(manifest.path), str(output_path), duration_per_image, self.ken_burns)
        return await self._render(cmd, output_path, "slideshow transcode")

    async def mux(self, video: FileHandle, audio: FileHandle) -> FileHandle:
        output_path = self.workspace.output_path("video-final", ".mp4")
        cmd = build_mux_cmd(str(video.path), str(audio.path), str(output_path))
        return await self._render(cmd, output_path, "audio mux")

    async def extract_audio(self, video: FileHandle) -> FileHandle:
        output_path = self.workspace.output_path("audio-ext", ".wav")
        cmd = build_extract_audio_cmd(str(video.path), str(output_path))
        return await self._render(cmd, output_path, "audio extraction")
