"""
Auxiliary media routes

POST /extract-audio: uploaded video -> 16 kHz mono WAV download
POST /transcribe: uploaded audio -> {"script": text}

Uploads are removed whatever the outcome; the extracted WAV is removed once
it has been sent.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ..config import Settings
from ..core import get_logger, BadRequest
from ..models import TranscriptionResponse
from ..services.gateway import ToolGateway
from ..services.infrastructure.storage import Workspace
from ..services.use_cases import (
    ExtractAudioRequest,
    ExtractAudioUseCase,
    TranscribeRequest,
    TranscribeUploadUseCase,
)
from .dependencies import get_gateway, get_settings, get_workspace
from .responses import CleanupFileResponse
from .upload_helpers import ERROR_RESPONSES, ensure_allowed_type, http_error, is_present

logger = get_logger(__name__, component="media_routes")

router = APIRouter(tags=["media"])


@router.post("/extract-audio", response_class=CleanupFileResponse, responses=ERROR_RESPONSES)
async def extract_audio(
    video: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_settings),
    workspace: Workspace = Depends(get_workspace),
    gateway: ToolGateway = Depends(get_gateway),
):
    """Extract a 16 kHz mono WAV track from an uploaded video"""
    try:
        if not is_present(video):
            raise BadRequest("No video file uploaded")
        ensure_allowed_type(video)
        handle = await workspace.save_upload(video, "video", settings.max_upload_size)
        response = await ExtractAudioUseCase(gateway, workspace).execute(ExtractAudioRequest(video=handle))
    except Exception as exc:
        raise http_error(exc) from exc

    audio_path = response.audio.path
    logger.info("Sending extracted audio", extra={"output": response.audio.display_name})
    return CleanupFileResponse(
        audio_path,
        media_type="audio/wav",
        filename=response.audio.display_name,
        on_complete=lambda _error: workspace.delete_if_present(audio_path),
    )


@router.post("/transcribe", response_model=TranscriptionResponse, responses=ERROR_RESPONSES)
async def transcribe_audio(
    audio: Optional[UploadFile] = File(None),
    language_code: Optional[str] = Form(None, alias="languageCode"),
    settings: Settings = Depends(get_settings),
    workspace: Workspace = Depends(get_workspace),
    gateway: ToolGateway = Depends(get_gateway),
):
    """Transcribe an uploaded audio file"""
    try:
        if not is_present(audio):
            raise BadRequest("No audio file uploaded")
        ensure_allowed_type(audio)
        handle = await workspace.save_upload(audio, "audio", settings.max_upload_size)
        response = await TranscribeUploadUseCase(gateway, workspace).execute(
            TranscribeRequest(audio=handle, language=(language_code or "").strip() or None)
        )
    except Exception as exc:
        raise http_error(exc) from exc

    logger.info("Transcription served", extra={"empty": response.empty})
    return TranscriptionResponse(script=response.script)
