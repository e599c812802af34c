"""
Services package - Core business logic and integrations

Organized by responsibility:

Pipeline (Render Flow):
    - pipeline/timing: Seconds per slide
    - pipeline/manifest: ffmpeg concat playlist
    - pipeline/artifacts: Files owned by a job
    - pipeline/orchestrator: Stage sequencing and cleanup

Gateway (External Tools):
    - gateway/downloader: yt-dlp audio download
    - gateway/transcription: Speech-to-text HTTP client
    - gateway/rewriter: LLM script rewrite
    - gateway/speech: Text-to-speech HTTP client
    - gateway/media: ffprobe/ffmpeg

Infrastructure (Technical Concerns):
    - infrastructure/storage: Workspace directories and uploads
    - llm: LLM providers (Gemini, Ollama)

Use Cases (Application Layer):
    - use_cases: Standalone transcription and audio extraction
"""

# Main entry points
from .infrastructure.storage import Workspace
from .gateway import ToolGateway
from .pipeline import PipelineOrchestrator

__all__ = [
    "Workspace",
    "ToolGateway",
    "PipelineOrchestrator",
]
