"""
Render pipeline orchestrator

Runs one render job through its stages, strictly in order:

    INTAKE -> AUDIO_RESOLVED -> TRANSCRIBED -> REWRITTEN -> VOICE_RESOLVED
    -> MEDIA_RESOLVED -> MANIFEST_BUILT -> SILENT_VIDEO_BUILT -> MUXED
    -> DELIVERED | FAILED

Every file the job creates or receives is recorded in its ArtifactSet the
moment it exists. ``release()`` deletes them all; the HTTP layer calls it
once the final video has been streamed (or the transfer broke), and direct
callers get the same guarantee from ``async with``.

Failure policy: the rewrite stage falls back to the raw transcript; every
other stage aborts the job with its own error.
"""

import asyncio
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from darkmaker.core import (
    get_logger,
    set_job_id,
    validate_source_url,
    LogTimer,
    BadRequest,
    RewriteError,
    WorkspaceError,
)
from darkmaker.models import (
    ArtifactKind,
    FileHandle,
    JobRequest,
    PipelineState,
    RemoteAudio,
    UploadedAudio,
)
from darkmaker.services.gateway import ToolGateway
from darkmaker.services.gateway.media import wrap_title
from darkmaker.services.infrastructure.storage import Workspace
from darkmaker.services.use_cases.base import UseCase

from .artifacts import ArtifactSet
from .manifest import build_manifest
from .timing import resolve_duration_per_image

logger = get_logger(__name__, component="orchestrator")

DEFAULT_TITLE = "Untitled"


@dataclass
class PipelineResult:
    """Outcome of a successful run; ``video`` is still owned by the orchestrator"""
    job_id: str
    video: FileHandle
    transcript: str
    script: str
    duration_per_image: float
    state: PipelineState


def first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip().strip("#*").strip()
    return ""


class PipelineOrchestrator(UseCase[JobRequest, PipelineResult]):
    """Sequences the render stages and owns every artifact they produce"""

    def __init__(
        self,
        workspace: Workspace,
        gateway: ToolGateway,
        *,
        keep_reused_narration: bool = False,
        job_id: Optional[str] = None,
    ):
        self.workspace = workspace
        self.gateway = gateway
        self.keep_reused_narration = keep_reused_narration
        self.job_id = job_id or str(uuid.uuid4())

        self.artifacts = ArtifactSet()
        self.state = PipelineState.INTAKE
        self.narration_upload: Optional[FileHandle] = None
        self.final_audio: Optional[FileHandle] = None
        self.error: Optional[BaseException] = None
        self._released = False

    async def __aenter__(self) -> "PipelineOrchestrator":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    # -- state -----------------------------------------------------------

    def _advance(self, target: PipelineState) -> None:
        if not self.state.can_advance_to(target):
            raise RuntimeError(f"Illegal pipeline transition {self.state.value} -> {target.value}")
        logger.info(f"Pipeline {self.state.value} -> {target.value}", extra={"job": self.job_id})
        self.state = target

    def _track(self, handle: FileHandle, kind: ArtifactKind = ArtifactKind.GENERATED) -> FileHandle:
        return self.artifacts.add(handle, kind)

    def _adopt_uploads(self, request: JobRequest) -> None:
        if isinstance(request.audio_source, UploadedAudio):
            self.narration_upload = self._track(request.audio_source.handle, ArtifactKind.UPLOADED)
        for handle in [*request.images, *request.extra_uploads]:
            self._track(handle, ArtifactKind.UPLOADED)

    # -- run -------------------------------------------------------------

    async def execute(self, request: JobRequest) -> PipelineResult:
        """
        Run the job up to MUXED

        Raises:
            BadRequest: No narration source
            DownloadError, ConfigError, UpstreamError, TranscodeError,
            WorkspaceError: From the stage that failed
        """
        set_job_id(self.job_id)
        self._adopt_uploads(request)

        try:
            with LogTimer(logger, f"render job {self.job_id}"):
                audio = await self._resolve_audio(request)
                transcript = await self._transcribe(audio, request.language)
                script = await self._rewrite(transcript)
                final_audio = await self._resolve_voice(script, audio, request)
                images = await self._resolve_media(script, request.images)
                manifest, duration = await self._write_manifest(images, final_audio, request.image_duration)
                silent = await self._transcode(manifest, duration)
                video = await self._mux(silent, final_audio)
        except BaseException as exc:
            self.error = exc
            logger.error("Render job failed", extra={
                "job": self.job_id,
                "stage": self.state.value,
                "error_type": type(exc).__name__,
                "error": str(exc),
            })
            self._advance(PipelineState.FAILED)
            raise

        return PipelineResult(
            job_id=self.job_id,
            video=video,
            transcript=transcript,
            script=script,
            duration_per_image=duration,
            state=self.state,
        )

    async def _resolve_audio(self, request: JobRequest) -> FileHandle:
        source = request.audio_source
        if isinstance(source, RemoteAudio):
            url = validate_source_url(source.url)
            audio = self._track(await self.gateway.download_audio(url))
        elif isinstance(source, UploadedAudio):
            audio = source.handle
        else:
            raise BadRequest("Provide either a source URL or a narration file")

        self._advance(PipelineState.AUDIO_RESOLVED)
        return audio

    async def _transcribe(self, audio: FileHandle, language: Optional[str]) -> str:
        transcript = await self.gateway.transcribe(audio, language)
        logger.info("Transcript ready", extra={"chars": len(transcript)})
        self._advance(PipelineState.TRANSCRIBED)
        return transcript

    async def _rewrite(self, transcript: str) -> str:
        try:
            script = await self.gateway.rewrite(transcript)
        except RewriteError as exc:
            logger.warning("Rewrite failed, continuing with the original transcript", extra={
                "error": str(exc),
            })
            script = transcript
        self._advance(PipelineState.REWRITTEN)
        return script

    async def _resolve_voice(self, script: str, audio: FileHandle, request: JobRequest) -> FileHandle:
        if request.synthesize_voice:
            final_audio = self._track(await self.gateway.synthesize_speech(script, request.voice))
        else:
            final_audio = audio
        self.final_audio = final_audio
        self._advance(PipelineState.VOICE_RESOLVED)
        return final_audio

    async def _resolve_media(self, script: str, images: List[FileHandle]) -> List[FileHandle]:
        if images:
            resolved = list(images)
        else:
            title = first_line(script) or DEFAULT_TITLE
            text_file = self._track(FileHandle.for_path(self.workspace.output_path("title", ".txt")))
            await self._write_text(text_file.path, wrap_title(title))
            resolved = [self._track(await self.gateway.render_title_image(text_file))]
            logger.info("Generated title slide", extra={"title": title})

        self._advance(PipelineState.MEDIA_RESOLVED)
        return resolved

    async def _write_manifest(
        self,
        images: List[FileHandle],
        final_audio: FileHandle,
        requested_duration: Optional[float],
    ) -> Tuple[FileHandle, float]:
        total_seconds = await self.gateway.probe_duration(final_audio)
        duration = resolve_duration_per_image(total_seconds, len(images), requested_duration)
        logger.info("Slide timing resolved", extra={
            "audio_seconds": total_seconds,
            "images": len(images),
            "seconds_per_image": duration,
        })

        manifest = self._track(FileHandle.for_path(self.workspace.output_path("list", ".txt")))
        await self._write_text(manifest.path, build_manifest(images, duration))
        self._advance(PipelineState.MANIFEST_BUILT)
        return manifest, duration

    async def _transcode(self, manifest: FileHandle, duration: float) -> FileHandle:
        silent = self._track(await self.gateway.transcode(manifest, duration))
        self._advance(PipelineState.SILENT_VIDEO_BUILT)
        return silent

    async def _mux(self, silent: FileHandle, final_audio: FileHandle) -> FileHandle:
        video = self._track(await self.gateway.mux(silent, final_audio))
        self._advance(PipelineState.MUXED)
        return video

    @staticmethod
    async def _write_text(path: Path, content: str) -> None:
        try:
            await asyncio.to_thread(path.write_text, content, encoding="utf-8")
        except OSError as exc:
            raise WorkspaceError(f"Could not write {path.name}: {exc}") from exc

    # -- delivery & cleanup ---------------------------------------------

    def finish_delivery(self, transfer_error: Optional[BaseException] = None) -> int:
        """Record the end of the response transfer and release every artifact"""
        if self.state is PipelineState.MUXED:
            if transfer_error is None:
                self._advance(PipelineState.DELIVERED)
            else:
                logger.error("Response transfer failed", extra={"error": str(transfer_error)})
                self.error = transfer_error
                self._advance(PipelineState.FAILED)
        return self.release()

    def _retained_path(self) -> Optional[Path]:
        reused = (
            self.narration_upload is not None
            and self.final_audio is not None
            and self.final_audio.path == self.narration_upload.path
        )
        if self.keep_reused_narration and reused:
            return self.narration_upload.path
        return None

    def release(self) -> int:
        """
        Delete every tracked artifact (idempotent, never raises)

        The narration upload is kept only when ``keep_reused_narration`` is
        set and the upload itself was used as the final audio track.

        Returns:
            Number of files removed
        """
        if self._released:
            return 0
        self._released = True

        retained = self._retained_path()
        tracked = len(self.artifacts)
        uploads = len(self.artifacts.paths(ArtifactKind.UPLOADED))
        removed = self.artifacts.drain(self.workspace.delete_if_present, keep=retained)
        logger.info("Job artifacts released", extra={
            "job": self.job_id,
            "state": self.state.value,
            "tracked": tracked,
            "uploads": uploads,
            "removed": removed,
            "retained": str(retained) if retained else None,
        })
        return removed
