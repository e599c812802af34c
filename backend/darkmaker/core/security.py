"""
Security utilities for uploads and remote sources
Sanitizes caller-supplied filenames and source URLs before they reach the
workspace or an external tool.
"""

import os
import re
from urllib.parse import urlsplit

from .exceptions import BadRequest
from .logging import get_logger

logger = get_logger(__name__, component="security")

# Same character class the upload storage has always used for stored names
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")
_ALLOWED_URL_SCHEMES = ("http", "https")
MAX_URL_LENGTH = 2048


def sanitize_filename(filename: str, fallback: str = "upload") -> str:
    """
    Sanitize filename to prevent path traversal and shell/manifest injection

    Removes directory components, replaces every character outside
    ``[a-zA-Z0-9._-]`` with an underscore and strips leading dots.

    Args:
        filename: Raw filename from user input
        fallback: Name used when nothing usable remains

    Returns:
        Sanitized filename safe for file system operations

    Example:
        >>> sanitize_filename("../../etc/passwd")
        'passwd'
        >>> sanitize_filename("my clip (1).mp3")
        'my_clip__1_.mp3'
    """
    original_filename = filename or ""

    name = os.path.basename(original_filename.replace("\\", "/"))
    name = name.replace("\x00", "")
    name = _UNSAFE_FILENAME_CHARS.sub("_", name)
    name = name.lstrip(".")[:200]

    if not name or name.replace(".", "").replace("_", "") == "":
        name = fallback

    if name != original_filename:
        logger.debug("Filename sanitized", extra={
            "original": original_filename,
            "sanitized": name,
        })

    return name


def validate_source_url(url: str) -> str:
    """
    Validate a remote source URL before it is handed to the downloader

    Only absolute http(s) URLs with a host are accepted; whitespace and
    control characters are rejected outright. The downloader receives the URL
    as a single argv element after ``--``, so no further escaping is needed.

    Raises:
        BadRequest: If the URL is not acceptable
    """
    candidate = (url or "").strip()
    if not candidate:
        raise BadRequest("Source URL is empty")

    if len(candidate) > MAX_URL_LENGTH:
        raise BadRequest("Source URL is too long")

    if any(ch.isspace() or ord(ch) < 32 or ord(ch) == 127 for ch in candidate):
        logger.warning("Rejected source URL with control characters")
        raise BadRequest("Source URL contains invalid characters")

    parts = urlsplit(candidate)
    if parts.scheme.lower() not in _ALLOWED_URL_SCHEMES or not parts.netloc:
        raise BadRequest(f"Unsupported source URL: {candidate}")

    return candidate
