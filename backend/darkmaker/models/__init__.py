"""
Domain types and API schemas
"""

from .status import PipelineState, PIPELINE_ORDER
from .media import (
    FileHandle,
    RemoteAudio,
    UploadedAudio,
    AudioSource,
    ArtifactKind,
    JobRequest,
)
from .responses import TranscriptionResponse, ErrorResponse, HealthResponse

__all__ = [
    "PipelineState",
    "PIPELINE_ORDER",
    "FileHandle",
    "RemoteAudio",
    "UploadedAudio",
    "AudioSource",
    "ArtifactKind",
    "JobRequest",
    "TranscriptionResponse",
    "ErrorResponse",
    "HealthResponse",
]
