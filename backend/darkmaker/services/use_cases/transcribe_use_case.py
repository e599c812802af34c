"""
Standalone transcription use case.

Transcribes one uploaded audio file and returns the text. The upload is
deleted before ``execute`` returns, whatever the outcome.
"""

from dataclasses import dataclass
from typing import Optional

from darkmaker.core import get_logger
from darkmaker.models import FileHandle
from darkmaker.services.gateway import ToolGateway
from darkmaker.services.infrastructure.storage import Workspace

from .base import UseCase

logger = get_logger(__name__, component="transcribe_use_case")

EMPTY_TRANSCRIPT_MESSAGE = "Could not transcribe the audio."


@dataclass
class TranscribeRequest:
    """
    Attributes:
        audio: Uploaded audio already stored in the intake directory
        language: Language code such as ``pt-BR`` (settings default when None)
    """
    audio: FileHandle
    language: Optional[str] = None


@dataclass
class TranscribeResponse:
    script: str
    empty: bool


class TranscribeUploadUseCase(UseCase[TranscribeRequest, TranscribeResponse]):
    """Transcribe an upload and always remove it afterwards"""

    def __init__(self, gateway: ToolGateway, workspace: Workspace):
        self.gateway = gateway
        self.workspace = workspace

    async def execute(self, request: TranscribeRequest) -> TranscribeResponse:
        try:
            transcript = (await self.gateway.transcribe(request.audio, request.language)).strip()
        finally:
            self.workspace.delete_if_present(request.audio.path)

        if not transcript:
            logger.warning("Transcription returned no text", extra={
                "upload_name": request.audio.display_name,
            })
            return TranscribeResponse(script=EMPTY_TRANSCRIPT_MESSAGE, empty=True)

        logger.info("Upload transcribed", extra={"chars": len(transcript)})
        return TranscribeResponse(script=transcript, empty=False)
