"""
Use Cases package - Business logic layer.

Each use case is one business operation, independent of HTTP, driven through
``execute``. The render pipeline itself lives in services.pipeline.

Modules:
- base: Base use case abstract class
- transcribe_use_case: Transcribe a single upload
- extract_audio_use_case: WAV track from an uploaded video
"""

from .base import UseCase
from .transcribe_use_case import (
    TranscribeUploadUseCase,
    TranscribeRequest,
    TranscribeResponse,
    EMPTY_TRANSCRIPT_MESSAGE,
)
from .extract_audio_use_case import (
    ExtractAudioUseCase,
    ExtractAudioRequest,
    ExtractAudioResponse,
)

__all__ = [
    "UseCase",
    "TranscribeUploadUseCase",
    "TranscribeRequest",
    "TranscribeResponse",
    "EMPTY_TRANSCRIPT_MESSAGE",
    "ExtractAudioUseCase",
    "ExtractAudioRequest",
    "ExtractAudioResponse",
]
