"""
Application configuration and settings
"""

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from .constants import (
    API_TITLE,
    API_DESCRIPTION,
    API_VERSION,
    CORS_ORIGINS,
    ALLOWED_MIME_PREFIXES,
    MAX_MEDIA_FILES,
    TARGET_WIDTH,
    TARGET_HEIGHT,
    TARGET_FPS,
    MIN_SECONDS_PER_IMAGE,
)
from .settings import Settings

__all__ = [
    "API_TITLE",
    "API_DESCRIPTION",
    "API_VERSION",
    "CORS_ORIGINS",
    "ALLOWED_MIME_PREFIXES",
    "MAX_MEDIA_FILES",
    "TARGET_WIDTH",
    "TARGET_HEIGHT",
    "TARGET_FPS",
    "MIN_SECONDS_PER_IMAGE",
    "Settings",
]
