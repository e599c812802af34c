"""
Render route

POST /render takes a source URL or a narration upload plus up to 50 images,
runs the render pipeline and streams back the finished MP4. Every file the
job touched is deleted once the response has been sent or the transfer
broke off.
"""

import math
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ..config import MAX_MEDIA_FILES, Settings
from ..core import get_logger, parse_bool_env, BadRequest
from ..models import JobRequest, RemoteAudio, UploadedAudio
from ..services.gateway import ToolGateway
from ..services.infrastructure.storage import Workspace
from ..services.pipeline import PipelineOrchestrator
from .dependencies import get_gateway, get_settings, get_workspace
from .responses import CleanupFileResponse
from .upload_helpers import (
    ERROR_RESPONSES,
    ensure_allowed_type,
    http_error,
    is_present,
    store_uploads,
)

logger = get_logger(__name__, component="render_routes")

router = APIRouter(tags=["render"])


def parse_image_duration(value: Optional[str]) -> Optional[float]:
    """Caller-fixed seconds per image; blank means "compute from the narration" """
    if value is None or not value.strip():
        return None
    try:
        duration = float(value)
    except ValueError:
        raise BadRequest(f"Invalid imageDuration: {value!r}") from None
    if not math.isfinite(duration) or duration <= 0:
        raise BadRequest(f"Invalid imageDuration: {value!r}")
    return duration


@router.post("/render", response_class=CleanupFileResponse, responses=ERROR_RESPONSES)
async def render_video(
    source_url: Optional[str] = Form(None, alias="sourceUrl"),
    narration: Optional[UploadFile] = File(None),
    media: Optional[List[UploadFile]] = File(None),
    synthesize_voice: Optional[str] = Form(None, alias="synthesizeVoice"),
    voice: Optional[str] = Form(None),
    language_code: Optional[str] = Form(None, alias="languageCode"),
    image_duration: Optional[str] = Form(None, alias="imageDuration"),
    settings: Settings = Depends(get_settings),
    workspace: Workspace = Depends(get_workspace),
    gateway: ToolGateway = Depends(get_gateway),
):
    """
    Render a narrated slideshow

    Either ``sourceUrl`` or ``narration`` is required; when both are given
    the URL is used. Without ``media`` a title card is generated from the
    rewritten script.
    """
    source_url = (source_url or "").strip()
    images_in = [upload for upload in (media or []) if is_present(upload)]
    narration_in = narration if is_present(narration) else None

    try:
        if len(images_in) > MAX_MEDIA_FILES:
            raise BadRequest(f"Too many media files: {len(images_in)} (maximum {MAX_MEDIA_FILES})")
        for upload in ([narration_in] if narration_in else []) + images_in:
            ensure_allowed_type(upload)
        duration = parse_image_duration(image_duration)

        narration_saved = await store_uploads(
            workspace, [narration_in] if narration_in else [], "narration", settings.max_upload_size
        )
        try:
            images = await store_uploads(workspace, images_in, "media", settings.max_upload_size)
        except BaseException:
            for handle in narration_saved:
                workspace.delete_if_present(handle.path)
            raise
    except Exception as exc:
        raise http_error(exc) from exc

    narration_handle = narration_saved[0] if narration_saved else None
    extra_uploads = []
    if source_url:
        audio_source = RemoteAudio(source_url)
        if narration_handle:
            logger.info("Both sourceUrl and narration given, using the URL")
            extra_uploads.append(narration_handle)
    elif narration_handle:
        audio_source = UploadedAudio(narration_handle)
    else:
        audio_source = None

    job = JobRequest(
        audio_source=audio_source,
        images=images,
        synthesize_voice=parse_bool_env(synthesize_voice, default=False),
        voice=(voice or "").strip() or None,
        language=(language_code or "").strip() or None,
        image_duration=duration,
        extra_uploads=extra_uploads,
    )

    orchestrator = PipelineOrchestrator(
        workspace,
        gateway,
        keep_reused_narration=settings.keep_reused_narration,
    )
    logger.info("Render job accepted", extra={
        "job": orchestrator.job_id,
        "source": "url" if source_url else ("upload" if narration_handle else "none"),
        "images": len(images),
        "synthesize_voice": job.synthesize_voice,
    })

    try:
        result = await orchestrator.execute(job)
    except Exception as exc:
        orchestrator.release()
        raise http_error(exc) from exc
    except BaseException:
        # Client abort or shutdown cancels the handler mid-stage
        orchestrator.release()
        raise

    return CleanupFileResponse(
        result.video.path,
        media_type="video/mp4",
        filename=result.video.display_name,
        headers={"X-Job-ID": orchestrator.job_id},
        on_complete=orchestrator.finish_delivery,
    )
