"""
Render pipeline

Modules:
    - timing: Seconds per slide from narration length
    - manifest: ffmpeg concat manifest
    - artifacts: Files owned by one job
    - orchestrator: Stage sequencing and cleanup
"""

from .timing import compute_duration_per_image, resolve_duration_per_image
from .manifest import ManifestEntry, build_manifest, manifest_entries, quote_concat_path
from .artifacts import ArtifactSet, TrackedArtifact
from .orchestrator import PipelineOrchestrator, PipelineResult

__all__ = [
    "compute_duration_per_image",
    "resolve_duration_per_image",
    "ManifestEntry",
    "build_manifest",
    "manifest_entries",
    "quote_concat_path",
    "ArtifactSet",
    "TrackedArtifact",
    "PipelineOrchestrator",
    "PipelineResult",
]
