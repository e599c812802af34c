"""
Core Exceptions
Error taxonomy shared by the gateway, the pipeline and the routes.
"""


class DarkMakerError(Exception):
    """Base exception for all application errors."""

    status_code = 500


class PipelineError(DarkMakerError):
    """Base exception for render pipeline errors."""
    pass


class InfrastructureError(DarkMakerError):
    """Base exception for infrastructure errors (remote services, storage, config)."""
    pass


class BadRequest(PipelineError):
    """Required input is missing or malformed."""

    status_code = 400


class UploadTooLarge(BadRequest):
    """An uploaded file exceeds the configured size limit."""

    status_code = 413


class DownloadError(PipelineError):
    """The remote media downloader failed or is unavailable."""
    pass


class TranscodeError(PipelineError):
    """The media transcoding tool exited with a non-zero status."""
    pass


class RewriteError(PipelineError):
    """The text-generation service could not rewrite the transcript."""
    pass


class ConfigError(InfrastructureError):
    """A credential or setting is missing at the point of use."""
    pass


class UpstreamError(InfrastructureError):
    """A remote service returned a non-success response or timed out."""
    pass


class WorkspaceError(InfrastructureError):
    """The workspace directories could not be created or written."""
    pass
