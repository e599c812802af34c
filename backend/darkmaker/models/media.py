"""
Domain types for a render job

FileHandle references a file in the workspace. AudioSource is the tagged
variant the route resolves from the form: either a remote URL to download or
an uploaded narration file.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union


@dataclass(frozen=True)
class FileHandle:
    """A file in the workspace plus the name shown to the caller"""
    path: Path
    display_name: str

    @classmethod
    def for_path(cls, path: Path) -> "FileHandle":
        return cls(path=Path(path), display_name=Path(path).name)


@dataclass(frozen=True)
class RemoteAudio:
    """Narration to be downloaded from a remote video URL"""
    url: str


@dataclass(frozen=True)
class UploadedAudio:
    """Narration uploaded by the caller"""
    handle: FileHandle


AudioSource = Union[RemoteAudio, UploadedAudio]


class ArtifactKind(str, Enum):
    """Origin of a tracked file"""
    GENERATED = "generated"
    UPLOADED = "uploaded"


@dataclass
class JobRequest:
    """
    Input to one render job.

    Attributes:
        audio_source: Where the narration comes from; None means the caller
            supplied neither a URL nor a narration file
        images: Ordered slides (may be empty)
        synthesize_voice: Replace the narration with a synthesized voice
        voice: Voice id override for synthesis
        language: Transcription language override
        image_duration: Caller-fixed seconds per slide (still floored)
        extra_uploads: Uploaded files the job owns but does not consume,
            e.g. a narration upload shadowed by a source URL
    """
    audio_source: Optional[AudioSource]
    images: List[FileHandle] = field(default_factory=list)
    synthesize_voice: bool = False
    voice: Optional[str] = None
    language: Optional[str] = None
    image_duration: Optional[float] = None
    extra_uploads: List[FileHandle] = field(default_factory=list)


__all__ = [
    "FileHandle",
    "RemoteAudio",
    "UploadedAudio",
    "AudioSource",
    "ArtifactKind",
    "JobRequest",
]
