"""
Audio extraction use case.

Pulls a 16 kHz mono WAV track out of an uploaded video. The source upload
is removed as soon as extraction finishes; the WAV is handed back to the
caller, who deletes it once it has been sent.
"""

from dataclasses import dataclass

from darkmaker.core import get_logger
from darkmaker.models import FileHandle
from darkmaker.services.gateway import ToolGateway
from darkmaker.services.infrastructure.storage import Workspace

from .base import UseCase

logger = get_logger(__name__, component="extract_audio_use_case")


@dataclass
class ExtractAudioRequest:
    video: FileHandle


@dataclass
class ExtractAudioResponse:
    audio: FileHandle


class ExtractAudioUseCase(UseCase[ExtractAudioRequest, ExtractAudioResponse]):
    """Extract a speech-ready WAV from an uploaded video"""

    def __init__(self, gateway: ToolGateway, workspace: Workspace):
        self.gateway = gateway
        self.workspace = workspace

    async def execute(self, request: ExtractAudioRequest) -> ExtractAudioResponse:
        try:
            audio = await self.gateway.extract_audio(request.video)
        finally:
            self.workspace.delete_if_present(request.video.path)

        logger.info("Audio extracted", extra={
            "source": request.video.display_name,
            "output": audio.display_name,
        })
        return ExtractAudioResponse(audio=audio)
