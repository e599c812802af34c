"""
Core Module - Cross-cutting concerns and shared infrastructure

Organization:
    - logging.py: Structured logging configuration and utilities
    - exceptions.py: Error taxonomy
    - security.py: Filename and source URL sanitization
    - runtime.py: Tool availability and directory checks

Usage:
    from darkmaker.core import get_logger, sanitize_filename, BadRequest
"""

from .logging import (
    setup_logging,
    get_logger,
    set_request_id,
    set_job_id,
    clear_context,
    LogTimer,
)

from .exceptions import (
    DarkMakerError,
    PipelineError,
    InfrastructureError,
    BadRequest,
    UploadTooLarge,
    DownloadError,
    TranscodeError,
    RewriteError,
    ConfigError,
    UpstreamError,
    WorkspaceError,
)

from .security import (
    sanitize_filename,
    validate_source_url,
)

from .runtime import (
    REQUIRED_RENDER_TOOLS,
    parse_bool_env,
    missing_runtime_tools,
    assert_directory_writable,
    run_startup_runtime_checks,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "set_request_id",
    "set_job_id",
    "clear_context",
    "LogTimer",
    # Exceptions
    "DarkMakerError",
    "PipelineError",
    "InfrastructureError",
    "BadRequest",
    "UploadTooLarge",
    "DownloadError",
    "TranscodeError",
    "RewriteError",
    "ConfigError",
    "UpstreamError",
    "WorkspaceError",
    # Security
    "sanitize_filename",
    "validate_source_url",
    # Runtime guards
    "REQUIRED_RENDER_TOOLS",
    "parse_bool_env",
    "missing_runtime_tools",
    "assert_directory_writable",
    "run_startup_runtime_checks",
]
