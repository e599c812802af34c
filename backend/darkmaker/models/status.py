"""
Pipeline state enumeration.

The render pipeline moves strictly forward through these states; FAILED can
be entered from any non-terminal state.
"""

from enum import Enum


class PipelineState(Enum):
    """Enumeration of render pipeline states, in execution order."""

    INTAKE = "intake"
    AUDIO_RESOLVED = "audio_resolved"
    TRANSCRIBED = "transcribed"
    REWRITTEN = "rewritten"
    VOICE_RESOLVED = "voice_resolved"
    MEDIA_RESOLVED = "media_resolved"
    MANIFEST_BUILT = "manifest_built"
    SILENT_VIDEO_BUILT = "silent_video_built"
    MUXED = "muxed"
    DELIVERED = "delivered"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        """Check if this state ends the job (no further stage runs)."""
        return self in (PipelineState.DELIVERED, PipelineState.FAILED)

    def can_advance_to(self, target: "PipelineState") -> bool:
        """Check whether ``target`` is a legal next state."""
        if self.is_terminal():
            return False
        if target is PipelineState.FAILED:
            return True
        return PIPELINE_ORDER.index(target) == PIPELINE_ORDER.index(self) + 1


PIPELINE_ORDER = (
    PipelineState.INTAKE,
    PipelineState.AUDIO_RESOLVED,
    PipelineState.TRANSCRIBED,
    PipelineState.REWRITTEN,
    PipelineState.VOICE_RESOLVED,
    PipelineState.MEDIA_RESOLVED,
    PipelineState.MANIFEST_BUILT,
    PipelineState.SILENT_VIDEO_BUILT,
    PipelineState.MUXED,
    PipelineState.DELIVERED,
)


__all__ = [
    "PipelineState",
    "PIPELINE_ORDER",
]
